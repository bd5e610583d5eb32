import threading
from typing import Callable, Optional


class RoundTimer:
    """One-second countdown that drives the memorization phase.

    - Calls ``on_tick(remaining)`` for every whole second, starting with the
      initial value and ending with 0, then ``on_expire()`` exactly once
    - Only one countdown is live at a time: ``start`` supersedes the previous
      one and ``cancel`` silences it; a superseded worker delivers nothing
    - Remaining time is counted in ticks, not measured, so drift accumulates

    The worker runs as a Socket.IO background task by default. ``spawn`` and
    ``sleep`` can be swapped out to drive the countdown by hand.
    """

    def __init__(self, spawn: Optional[Callable] = None, sleep: Optional[Callable[[float], None]] = None,
                 interval: float = 1.0):
        if spawn is None or sleep is None:
            from sequence_memory import socketio
            spawn = spawn or socketio.start_background_task
            sleep = sleep or socketio.sleep
        self._spawn = spawn
        self._sleep = sleep
        self.interval = interval
        self._generation = 0
        self._lock = threading.Lock()

    def start(self, seconds: int, on_tick: Callable[[int], None], on_expire: Callable[[], None]) -> int:
        with self._lock:
            self._generation += 1
            generation = self._generation
        self._spawn(self._worker, generation, max(0, int(seconds)), on_tick, on_expire)
        return generation

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _worker(self, generation: int, seconds: int, on_tick, on_expire) -> None:
        remaining = seconds
        while True:
            if not self._is_current(generation):
                return
            on_tick(remaining)
            if remaining <= 0:
                break
            self._sleep(self.interval)
            remaining -= 1
        with self._lock:
            if generation != self._generation:
                return
            # Retire this countdown so a late cancel/start cannot re-fire it
            self._generation += 1
        on_expire()
