"""
Notification sink that records deliveries in memory.
"""

from shipman.protocols.notifications import Notification


class RecordingSink:
    """Keeps every notification; raises for recipients listed in fail_for."""

    sent: list[Notification] = []
    fail_for: set[int] = set()

    def notify(self, recipient_id, event_type, related_id, payload):
        if recipient_id in self.fail_for:
            raise RuntimeError(f"delivery failed for {recipient_id}")
        self.sent.append(Notification(recipient_id, event_type, related_id, payload))

    @classmethod
    def clear(cls):
        cls.sent.clear()
        cls.fail_for.clear()

    @classmethod
    def recipients(cls, event_type):
        return sorted(n.recipient_id for n in cls.sent if n.event_type == event_type)
