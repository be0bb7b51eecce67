"""Deduplication gate: suppress refiring of a trigger within its window.

The window is keyed by trigger only. Any refire of the same rule inside the
window is suppressed, whichever entity caused it.
"""

from datetime import datetime, timedelta

from agentflow.domain.entities.trigger import TriggerEntity
from agentflow.shared.utils.datetime import ensure_utc


class DeduplicationGate:
    """Decides whether a trigger may fire again at a given time."""

    def allows(self, trigger: TriggerEntity, now: datetime) -> bool:
        """Allow when there is no window, the trigger never fired, or the window has elapsed."""
        window = trigger.dedup_window_minutes
        if window is None or trigger.last_triggered_at is None:
            return True
        last = ensure_utc(trigger.last_triggered_at)
        return ensure_utc(now) - last >= timedelta(minutes=window)
