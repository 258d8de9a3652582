"""
Shipman signals.

first_plan_created:
    Sent inside the allocation transaction when an actor creates their
    first plan for a request. Keyword arguments: request, plan, actor.
    Receivers run inside the same transaction.
"""

from django.dispatch import Signal

first_plan_created = Signal()
