# conftest.py
import pytest

from tamagochi import create_app
from tamagochi.services.storage_service import MemoryTamagochiStore


class ManualTimer:
    """threading.Timer 대역. 테스트가 직접 fire()를 호출해야 실행됩니다."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    @property
    def active(self):
        return self.started and not self.cancelled and not self.fired

    def fire(self):
        if not self.active:
            return
        self.fired = True
        self.function()


class ManualTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    def active(self):
        return [timer for timer in self.timers if timer.active]

    def fire_all(self):
        for timer in self.active():
            timer.fire()


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def store():
    return MemoryTamagochiStore()


@pytest.fixture
def app(store):
    app = create_app('testing', store=store)
    yield app
    app.services['companions'].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
