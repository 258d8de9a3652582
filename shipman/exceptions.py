"""
Exceptions for Shipman.

All errors are ShipmanError with a structured code for programmatic handling.
"""

from datetime import date, datetime
from typing import Any


class BaseError(Exception):
    """
    Exception carrying a code, a human-readable message and context data.

    Subclasses declare `_default_messages` keyed by code; the message
    argument overrides the default.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"


class ShipmanError(BaseError):
    """
    Structured exception for container allocation and QC operations.

    Usage:
        try:
            ship.allocate(request.pk, farmer, plan_date, 3)
        except ShipmanError as e:
            if e.code == 'QUOTA_EXCEEDED':
                print(f"Já alocados {e.used} de {e.total}")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'NOT_FOUND': 'Registro não encontrado',
        'ACCESS_DENIED': 'Acesso negado para esta licença ou país',
        'INVALID_TRANSITION': 'Transição de status de QC inválida',
        'INVALID_STATE': 'Estado inválido para esta operação',
        'OUT_OF_WINDOW': 'Data fora do período de entrega da solicitação',
        'QUOTA_EXCEEDED': 'Quantidade de contêineres excede a cota da solicitação',
        'ALREADY_SUBMITTED': 'Inspeção de QC já registrada',
        'ALREADY_REPORTED': 'Relatório de QC externo já registrado',
        'VALIDATION_ERROR': 'Dados inválidos',
        'PLAN_LOCKED': 'Plano com contêineres já em QC não pode ser substituído',
    }

    @property
    def used(self) -> int:
        """Shortcut for data['used']."""
        return self.data.get('used', 0)

    @property
    def total(self) -> int:
        """Shortcut for data['total']."""
        return self.data.get('total', 0)

    @property
    def current(self) -> str | None:
        """Shortcut for data['current'] (status found by a failed guard)."""
        return self.data.get('current')

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v.isoformat() if isinstance(v, (date, datetime)) else v
                for k, v in self.data.items()
            }
        }
