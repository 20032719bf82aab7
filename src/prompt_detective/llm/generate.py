"""Text completion across LLM providers.

The game treats the provider as an opaque ``(prompt, model) -> text`` call.
Provider SDK clients are blocking, so the async wrapper runs them in a worker
thread.
"""

import asyncio
from typing import Optional

import requests

from prompt_detective.config.settings import GenerationSettings, settings
from prompt_detective.core.llm_client import Generator
from prompt_detective.core.logging import get_logger

logger = get_logger(__name__)

PROVIDERS = ("gemini", "anthropic", "openai", "ollama")
OLLAMA_URL = "http://localhost:11434/api/generate"


def generate_with_llm(
    prompt: str,
    model: str,
    provider: str = "gemini",
    api_key: Optional[str] = None,
    temperature: float = 1.0,
    max_tokens: int = 2048,
) -> str:
    """Generate text using the specified LLM provider.

    Args:
        prompt: Full prompt text
        model: Provider model identifier
        provider: 'gemini', 'anthropic', 'openai', or 'ollama'
        api_key: API key for cloud providers (unused for Ollama)
        temperature: Sampling temperature
        max_tokens: Max response length

    Returns:
        Generated text response
    """
    provider = provider.lower().strip()

    if provider == "gemini":
        return _generate_gemini(prompt, model, api_key, temperature, max_tokens)
    elif provider == "anthropic":
        return _generate_anthropic(prompt, model, api_key, temperature, max_tokens)
    elif provider == "openai":
        return _generate_openai(prompt, model, api_key, temperature, max_tokens)
    elif provider == "ollama":
        return _generate_ollama(prompt, model, temperature, max_tokens)
    else:
        raise ValueError(f"Unknown provider: {provider}. Expected one of {PROVIDERS}")


def _generate_gemini(
    prompt: str,
    model: str,
    api_key: Optional[str],
    temperature: float,
    max_tokens: int,
) -> str:
    """Generate using Google Gemini."""
    if not api_key:
        raise ValueError("GEMINI_API_KEY required")

    from google import genai
    from google.genai import types

    client = genai.Client(api_key=api_key)
    response = client.models.generate_content(
        model=model,
        contents=prompt,
        config=types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        ),
    )
    return response.text or ""


def _generate_anthropic(
    prompt: str,
    model: str,
    api_key: Optional[str],
    temperature: float,
    max_tokens: int,
) -> str:
    """Generate using Anthropic Claude."""
    if not api_key:
        raise ValueError("ANTHROPIC_API_KEY required")

    import anthropic

    client = anthropic.Anthropic(api_key=api_key)
    response = client.messages.create(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        messages=[{"role": "user", "content": prompt}],
    )
    return response.content[0].text


def _generate_openai(
    prompt: str,
    model: str,
    api_key: Optional[str],
    temperature: float,
    max_tokens: int,
) -> str:
    """Generate using OpenAI GPT."""
    if not api_key:
        raise ValueError("OPENAI_API_KEY required")

    from openai import OpenAI

    client = OpenAI(api_key=api_key)
    response = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        temperature=temperature,
        max_tokens=max_tokens,
    )
    return response.choices[0].message.content or ""


def _generate_ollama(prompt: str, model: str, temperature: float, max_tokens: int) -> str:
    """Generate using local Ollama."""
    try:
        response = requests.post(
            OLLAMA_URL,
            json={
                "model": model,
                "prompt": prompt,
                "temperature": temperature,
                "stream": False,
                "num_predict": max_tokens,
            },
            timeout=120,
        )
        response.raise_for_status()
        return response.json()["response"]
    except requests.exceptions.ConnectionError:
        raise RuntimeError("Ollama not running. Start with: ollama serve")


def make_generator(config: Optional[GenerationSettings] = None) -> Generator:
    """Build the async ``(prompt, model) -> text`` callable used by the game."""
    config = config or settings.generation
    provider = config.provider.lower().strip()
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Expected one of {PROVIDERS}")
    api_key = config.api_key_for(provider)

    async def generate(prompt: str, model: str) -> str:
        logger.info("calling LLM", extra={"provider": provider, "model": model})
        return await asyncio.to_thread(
            generate_with_llm,
            prompt,
            model,
            provider=provider,
            api_key=api_key,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    return generate
