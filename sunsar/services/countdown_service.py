"""
Countdown Service

Ticks the time left until the next puzzle to one connected client.
"""

import threading
from typing import Callable, Dict

from .date_service import DateKeyProvider, format_countdown


class CountdownTimer:
    """
    Emits ``countdown`` once per interval until stopped.

    When the day key changes mid-run a final ``rollover`` event is emitted
    and the timer ends, so no timer survives into the next puzzle day.
    """

    def __init__(self,
                 day_keys: DateKeyProvider,
                 emit: Callable[[str, Dict], None],
                 sleep: Callable[[float], None],
                 interval: float = 1.0):
        self.day_keys = day_keys
        self.emit = emit
        self.sleep = sleep
        self.interval = interval
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        self._stopped.set()

    def tick(self) -> Dict[str, object]:
        remaining = self.day_keys.time_until_next_rollover()
        return {
            'day_key': self.day_keys.current_day_key(),
            'remaining_ms': remaining,
            'display': format_countdown(remaining),
        }

    def run(self) -> None:
        start_key = self.day_keys.current_day_key()
        while not self.stopped:
            payload = self.tick()
            if payload['day_key'] != start_key:
                self.emit('rollover', {'day_key': payload['day_key']})
                self.stop()
                break
            self.emit('countdown', payload)
            self.sleep(self.interval)
