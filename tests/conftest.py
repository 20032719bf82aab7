import pytest

from factories import ManualClock, RecordingSleep
from prompt_detective.config.settings import CacheSettings, GenerationSettings, Settings
from prompt_detective.game.actions import GameService


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_service(clock, sleep):
    """Build a GameService on the manual clock with a recording sleep."""

    def _make(generator=None, mock_cases: bool = False, environment: str = "development"):
        settings = Settings(
            environment=environment,
            generation=GenerationSettings(mock_cases=mock_cases, model_name="test-model"),
            cache=CacheSettings(),
        )
        return GameService(generator=generator, settings=settings, clock=clock, sleep=sleep)

    return _make
