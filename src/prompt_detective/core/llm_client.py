"""
LLM call wrapper: one entrypoint for JSON extraction, validation and retries.
Why: every artifact type shares the same failure policy, so it lives here.

Failure policy: a network error, a response with no JSON object or a payload
that does not validate are all transient. The call is retried forever with a
fixed delay. Callers that need a deadline wrap the coroutine in
``asyncio.wait_for``; cancellation propagates out of the sleep.
"""

import asyncio
import json
import re
from typing import Any, Awaitable, Callable, Dict, TypeVar

from .logging import get_logger
from .metrics import metrics

_LOG = get_logger(__name__)

T = TypeVar("T")

# (prompt, model) -> completion text
Generator = Callable[[str, str], Awaitable[str]]
Sleep = Callable[[float], Awaitable[Any]]

# Greedy: first "{" to last "}"
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class NoJsonInResponse(ValueError):
    pass


def extract_json_object(text: str) -> Dict[str, Any]:
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise NoJsonInResponse("No valid JSON in response")
    payload = json.loads(match.group(0))
    if not isinstance(payload, dict):
        raise NoJsonInResponse(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


async def generate_until_valid(
    generator: Generator,
    prompt: str,
    model: str,
    parse: Callable[[Dict[str, Any]], T],
    *,
    label: str,
    retry_delay: float = 0.5,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Call ``generator`` until its output parses, then return the parsed value."""
    attempt = 0
    while True:
        attempt += 1
        try:
            metrics.record_generator_call()
            text = await generator(prompt, model)
            return parse(extract_json_object(text))
        except Exception as exc:
            metrics.record_retry()
            _LOG.warning(
                f"{label} generation failed, retrying...",
                extra={"artifact": label, "attempt": attempt, "error": repr(exc)},
            )
            await sleep(retry_delay)
