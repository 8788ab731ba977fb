"""
smartprep/timer.py

Countdown used by the assessment stages.

  Timer   – pure countdown: start / tick / remaining / cancel, expiry fires once
  Ticker  – background loop that ticks a Timer once per second and pushes the
            remaining time to the browser session's Socket.IO room
"""
from __future__ import annotations

import logging
import threading
import time
from threading import Lock
from typing import Callable, Optional

from smartprep import socketio

log = logging.getLogger(__name__)

DEFAULT_SECONDS = 20 * 60


class Timer:
    def __init__(
        self,
        on_expire: Optional[Callable[[], None]] = None,
        is_active: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._lock      = Lock()
        self._on_expire = on_expire
        self._is_active = is_active or (lambda: True)
        self._remaining = 0
        self._armed     = False
        self._fired     = False

    # ── Control ───────────────────────────────────────────────────────────

    def start(self, duration_seconds: int = DEFAULT_SECONDS) -> None:
        """(Re)arm the countdown. Re-arming after expiry allows one more expiry."""
        with self._lock:
            self._remaining = max(0, int(duration_seconds))
            self._armed     = True
            self._fired     = False

    def cancel(self) -> None:
        with self._lock:
            self._armed = False

    def tick(self) -> int:
        """
        Advance one second if armed and the owning stage is active.
        Calls on_expire exactly once, outside the internal lock, when the
        count reaches zero.
        """
        fire = False
        with self._lock:
            if not self._armed or self._fired:
                return self._remaining
            if not self._is_active():
                return self._remaining
            if self._remaining > 0:
                self._remaining -= 1
            if self._remaining == 0:
                self._fired = True
                self._armed = False
                fire = True
        if fire and self._on_expire is not None:
            self._on_expire()
        return self._remaining

    # ── Read-only views ───────────────────────────────────────────────────

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def expired(self) -> bool:
        return self._fired


class Ticker:
    """
    Drives a Timer from a daemon thread. Every start() bumps the generation
    counter; a loop whose generation is no longer current exits on its next
    wake-up, so restarting or stopping never leaves two loops ticking.
    """

    def __init__(self, timer: Timer, room: Optional[str], interval: float = 1.0) -> None:
        self.timer       = timer
        self.room        = room
        self.interval    = interval
        self._generation = 0
        self._lock       = Lock()

    def start(self) -> None:
        with self._lock:
            self._generation += 1
            gen = self._generation
        threading.Thread(target=self._run, args=(gen,), daemon=True).start()

    def stop(self) -> None:
        with self._lock:
            self._generation += 1

    def is_current(self, gen: int) -> bool:
        with self._lock:
            return gen == self._generation

    def _run(self, gen: int) -> None:
        while True:
            time.sleep(self.interval)
            if not self.is_current(gen):
                return
            try:
                remaining = self.timer.tick()
            except Exception as exc:
                log.error("Timer expiry handler failed: %s", exc)
                return
            self._emit("timer_tick", {"remaining": remaining})
            if self.timer.expired:
                self._emit("stage_expired", {})
                return
            if not self.timer.armed:
                return

    def _emit(self, event: str, payload: dict) -> None:
        if self.room is None:
            return
        socketio.emit(event, payload, to=self.room)
