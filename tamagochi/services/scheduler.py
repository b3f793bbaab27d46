# tamagochi/services/scheduler.py
import logging
import threading
from contextlib import nullcontext
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class TaskScheduler:
    """
    종류(kind)별로 최대 하나의 예약 작업만 유지하는 스케줄러.

    같은 종류의 작업을 새로 예약하면 대기 중인 이전 작업은 먼저 취소됩니다.
    타이머 생성은 timer_factory로 주입할 수 있어 테스트에서 수동으로 실행할 수 있습니다.
    (threading.Timer와 같은 (interval, function) 시그니처와 start/cancel 메서드)
    callback_lock을 주면 콜백은 그 잠금을 잡은 상태에서 실행됩니다.
    """

    def __init__(self, timer_factory: Optional[Callable] = None, callback_lock=None):
        self._timer_factory = timer_factory or threading.Timer
        self._callback_lock = callback_lock
        self._timers: Dict[str, Tuple[object, object]] = {}
        self._lock = threading.Lock()

    def schedule(self, kind: str, delay: float, callback: Callable[[], None]) -> None:
        """delay초 뒤에 callback을 한 번 실행합니다."""
        with self._lock:
            self._cancel_locked(kind)
            token = object()
            timer = self._timer_factory(delay, lambda: self._fire(kind, token, callback))
            if isinstance(timer, threading.Timer):
                timer.daemon = True
            self._timers[kind] = (token, timer)
            timer.start()

    def schedule_repeating(self, kind: str, interval: float, callback: Callable[[], None]) -> None:
        """interval초마다 callback을 실행합니다. cancel(kind)로 중지합니다."""
        def _rearm_and_run():
            # 먼저 다음 실행을 예약해야 callback 도중의 cancel이 반복을 멈출 수 있습니다.
            self.schedule(kind, interval, _rearm_and_run)
            callback()

        self.schedule(kind, interval, _rearm_and_run)

    def cancel(self, kind: str) -> bool:
        with self._lock:
            return self._cancel_locked(kind)

    def cancel_all(self) -> None:
        with self._lock:
            for kind in list(self._timers):
                self._cancel_locked(kind)

    def pending(self, kind: str) -> bool:
        with self._lock:
            return kind in self._timers

    def _cancel_locked(self, kind: str) -> bool:
        entry = self._timers.pop(kind, None)
        if entry is None:
            return False
        entry[1].cancel()
        return True

    def _fire(self, kind: str, token: object, callback: Callable[[], None]) -> None:
        # 토큰 확인도 callback_lock 안에서 해야 잠금을 기다리는 사이의 취소가 반영됩니다.
        with self._callback_lock or nullcontext():
            with self._lock:
                entry = self._timers.get(kind)
                # 이미 취소되었거나 새 작업으로 대체된 타이머
                if entry is None or entry[0] is not token:
                    return
                del self._timers[kind]

            try:
                callback()
            except Exception as e:
                logger.error(f"Scheduled task '{kind}' failed: {e}", exc_info=True)
