"""Game actions: cached artifact generation for each game mode.

Detective cases, audit cases and rectification options go through the
per-session cache. Verdicts and mentor feedback are stateless and always
call the generator.

All entry points are coroutines. Store reads and writes never straddle an
``await`` except the generator call itself, so two concurrent misses for the
same slot both generate and the last one to finish wins.
"""

import asyncio
import random
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

from prompt_detective.config.settings import Settings, settings as default_settings
from prompt_detective.core.cache import (
    CacheEntry,
    EvictionSweeper,
    OptionsStore,
    SessionStore,
    is_fresh,
    options_key,
    session_key,
    should_rate_limit,
)
from prompt_detective.core.llm_client import Generator, Sleep, generate_until_valid
from prompt_detective.core.logging import get_logger
from prompt_detective.core.metrics import metrics
from prompt_detective.core.schemas import (
    AuditCaseData,
    CaseData,
    MentorFeedback,
    PlayerPrompt,
    RectificationOption,
    RectificationOptionSet,
    VerdictData,
)
from prompt_detective.game import catalog, mock_data
from prompt_detective.llm.generate import make_generator
from prompt_detective.prompts_loader import load_prompts

logger = get_logger(__name__)

T = TypeVar("T")


class GameService:
    """Owns the caches and the generator for one process."""

    def __init__(
        self,
        generator: Optional[Generator] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.clock = clock
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.prompts = load_prompts()
        self.sessions = SessionStore()
        self.options = OptionsStore()
        self.sweeper = EvictionSweeper(
            self.sessions,
            self.options,
            max_idle=self.settings.cache.max_idle_seconds,
            interval=self.settings.cache.sweep_interval,
        )
        self._generator = generator

    @property
    def generator(self) -> Generator:
        # Built on first use; mock mode never needs provider credentials
        if self._generator is None:
            self._generator = make_generator(self.settings.generation)
        return self._generator

    @property
    def mock_mode(self) -> bool:
        return self.settings.generation.mock_cases

    def _servable(self, entry: Optional[CacheEntry], now: float) -> bool:
        cache = self.settings.cache
        return is_fresh(entry, now, cache.ttl_seconds) or should_rate_limit(
            entry, now, cache.rate_limit_seconds
        )

    def _serve(self, entry: CacheEntry[T], now: float, label: str, key: str) -> T:
        entry.touch(now)
        metrics.record_cache_hit()
        logger.debug("cache hit", extra={"artifact": label, "key": key})
        return entry.data

    async def _generate(
        self, prompt: str, parse: Callable[[Dict[str, Any]], T], label: str
    ) -> T:
        return await generate_until_valid(
            self.generator,
            prompt,
            self.settings.generation.model_name,
            parse,
            label=label,
            retry_delay=self.settings.generation.retry_delay_seconds,
            sleep=self.sleep,
        )

    # --- Detective mode -------------------------------------------------

    async def generate_case(
        self, session_id: Optional[str] = None, force_new: bool = False
    ) -> CaseData:
        """Return the session's detective case, generating one on a miss."""
        now = self.clock()
        self.sweeper.maybe_sweep(now)

        key = session_key(session_id)
        cached = self.sessions.get_or_create(key).detective
        if not force_new and cached is not None and self._servable(cached, now):
            return self._serve(cached, now, "case", key)

        metrics.record_cache_miss()
        if self.mock_mode:
            data = mock_data.mock_case(self.rng)
        else:
            element = catalog.pick_element(self.rng)
            prompt = self.prompts["case"].format(
                seed=self.rng.randint(0, 99999),
                case_number=catalog.case_number(self.rng),
                element=element,
                element_upper=element.upper(),
                scenario=catalog.pick_scenario(self.rng),
            )
            data = await self._generate(prompt, CaseData.model_validate, "case")

        # Re-resolve: a sweep during the await may have dropped the bundle
        self.sessions.get_or_create(key).detective = CacheEntry.new(data, self.clock())
        logger.info(
            "generated case",
            extra={"session": key, "case_id": data.id, "forced": force_new},
        )
        return data

    async def generate_rectification_options(
        self, case: CaseData, session_id: Optional[str] = None
    ) -> List[RectificationOption]:
        """Return four options for ``case``, sorted A-D, exactly one correct."""
        now = self.clock()
        self.sweeper.maybe_sweep(now)

        key = options_key(session_id, case)
        cached = self.options.get(key)
        if cached is not None and self._servable(cached, now):
            return self._serve(cached, now, "options", key)

        metrics.record_cache_miss()
        if self.mock_mode:
            option_set = RectificationOptionSet(options=mock_data.mock_rectification_options(case))
        else:
            prompt = self.prompts["rectification_options"].format(
                faulty_prompt=case.faulty_prompt,
                element=case.botched_element,
                ideal_prompt=case.ideal_prompt,
            )
            option_set = await self._generate(
                prompt, RectificationOptionSet.model_validate, "options"
            )

        options = option_set.sorted_options()
        self.options.set(key, CacheEntry.new(options, self.clock()))
        logger.info(
            "generated options",
            extra={"session": session_key(session_id), "case_id": case.id},
        )
        return options

    async def evaluate_rectification(
        self, case: CaseData, player_prompt: PlayerPrompt
    ) -> VerdictData:
        """Score a player's CO-STAR fix. Not cached."""
        if self.mock_mode:
            return mock_data.mock_verdict(case, player_prompt)

        prompt = self.prompts["verdict"].format(
            backstory=case.backstory,
            element=case.botched_element,
            ideal_prompt=case.ideal_prompt,
            **player_prompt.model_dump(),
        )
        return await self._generate(prompt, VerdictData.model_validate, "verdict")

    # --- Auditor mode ---------------------------------------------------

    async def generate_audit_case(
        self, session_id: Optional[str] = None, force_new: bool = False
    ) -> AuditCaseData:
        """Return the session's audit case, generating one on a miss."""
        now = self.clock()
        self.sweeper.maybe_sweep(now)

        key = session_key(session_id)
        cached = self.sessions.get_or_create(key).audit
        if not force_new and cached is not None and self._servable(cached, now):
            return self._serve(cached, now, "audit_case", key)

        metrics.record_cache_miss()
        if self.mock_mode:
            data = mock_data.mock_audit_case(self.rng)
        else:
            prompt = self.prompts["audit_case"].format(
                case_number=catalog.case_number(self.rng),
                domain=catalog.pick_domain(self.rng),
            )
            data = await self._generate(prompt, AuditCaseData.model_validate, "audit_case")

        self.sessions.get_or_create(key).audit = CacheEntry.new(data, self.clock())
        logger.info(
            "generated audit case",
            extra={"session": key, "case_id": data.id, "forced": force_new},
        )
        return data

    # --- Sandbox mode ---------------------------------------------------

    async def get_mentor_feedback(self, prompt_text: str) -> MentorFeedback:
        """CO-STAR critique of a free-form prompt. Not cached."""
        if self.mock_mode:
            return mock_data.mock_mentor_feedback(prompt_text)

        prompt = self.prompts["mentor_feedback"].format(prompt_text=prompt_text)
        return await self._generate(prompt, MentorFeedback.model_validate, "mentor_feedback")


_service: Optional[GameService] = None


def get_game_service() -> GameService:
    """Process-wide service; the caches live as long as the process."""
    global _service
    if _service is None:
        _service = GameService()
    return _service


async def generate_case(session_id: Optional[str] = None, force_new: bool = False) -> CaseData:
    return await get_game_service().generate_case(session_id, force_new=force_new)


async def generate_audit_case(
    session_id: Optional[str] = None, force_new: bool = False
) -> AuditCaseData:
    return await get_game_service().generate_audit_case(session_id, force_new=force_new)


async def generate_rectification_options(
    case: CaseData, session_id: Optional[str] = None
) -> List[RectificationOption]:
    return await get_game_service().generate_rectification_options(case, session_id)


async def evaluate_rectification(case: CaseData, player_prompt: PlayerPrompt) -> VerdictData:
    return await get_game_service().evaluate_rectification(case, player_prompt)


async def get_mentor_feedback(prompt_text: str) -> MentorFeedback:
    return await get_game_service().get_mentor_feedback(prompt_text)
