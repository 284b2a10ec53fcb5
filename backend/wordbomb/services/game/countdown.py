import logging
import threading
import time
import uuid
from typing import Callable, Dict, Optional


TickHandler = Callable[[str, str], bool]


class Countdown:
    """Handle for one room's repeating tick."""

    def __init__(self, code: str):
        self.code = code
        self.token = uuid.uuid4().hex
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class CountdownService:
    """One repeating tick per room while a game is running.

    - Ensures a single countdown per room: starting replaces the old one
    - Every tick calls `on_tick(code, token)`; a falsy return stops the loop
    - With `autostart` off no worker is spawned and ticks are driven through
      `fire()`, which is how tests step the clock
    """

    def __init__(
        self,
        on_tick: TickHandler,
        interval: float = 1.0,
        start_task: Optional[Callable] = None,
        sleep: Optional[Callable[[float], None]] = None,
        autostart: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self._on_tick = on_tick
        self.interval = interval
        self._start_task = start_task or _start_thread
        self._sleep = sleep or time.sleep
        self.autostart = autostart
        self.logger = logger or logging.getLogger(__name__)
        self._timers: Dict[str, Countdown] = {}
        self._lock = threading.Lock()

    def start(self, code: str) -> Countdown:
        countdown = Countdown(code)
        with self._lock:
            previous = self._timers.get(code)
            if previous is not None:
                previous.cancel()
            self._timers[code] = countdown
        if previous is not None:
            self.logger.info(f"[timer-replace] room={code} old={previous.token[:8]} new={countdown.token[:8]}")
        self.logger.info(f"[timer-start] room={code} interval={self.interval}s token={countdown.token[:8]}")
        if self.autostart:
            self._start_task(self._run, countdown)
        return countdown

    def cancel(self, code: str, token: Optional[str] = None) -> bool:
        """Stop the room's countdown. Idempotent; with `token`, only that countdown."""
        with self._lock:
            countdown = self._timers.get(code)
            if countdown is None or (token is not None and countdown.token != token):
                return False
            del self._timers[code]
        countdown.cancel()
        self.logger.info(f"[timer-cancel] room={code} token={countdown.token[:8]}")
        return True

    def is_current(self, code: str, token: str) -> bool:
        with self._lock:
            countdown = self._timers.get(code)
        return countdown is not None and countdown.token == token

    def is_running(self, code: str) -> bool:
        with self._lock:
            return code in self._timers

    def current(self, code: str) -> Optional[Countdown]:
        with self._lock:
            return self._timers.get(code)

    def fire(self, code: str) -> bool:
        """Run one tick for the room's current countdown, if any."""
        countdown = self.current(code)
        if countdown is None:
            return False
        return bool(self._on_tick(code, countdown.token))

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)

    def _run(self, countdown: Countdown) -> None:
        while not countdown.cancelled:
            self._sleep(self.interval)
            if countdown.cancelled:
                break
            try:
                keep_going = self._on_tick(countdown.code, countdown.token)
            except Exception:
                self.logger.exception(f"[timer-error] room={countdown.code} token={countdown.token[:8]}")
                keep_going = False
            if not keep_going:
                break
        # A stopped worker must not leave its entry behind
        self.cancel(countdown.code, countdown.token)


def _start_thread(target, *args):
    worker = threading.Thread(target=target, args=args, daemon=True)
    worker.start()
    return worker
