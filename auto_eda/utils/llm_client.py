"""
Model provider dispatch.

`send_to_llm(prompt, model)` is the single text-in/text-out capability the
agents use. Short model aliases pick a provider; Claude, OpenAI and Ollama go
through the OpenAI SDK (each behind its OpenAI-compatible endpoint) and
Gemini goes through google-generativeai.
"""
import logging
import os
from typing import Any, Optional

from dotenv import load_dotenv
from openai import OpenAI

from auto_eda.utils.errors import LLMProviderError
from auto_eda.utils.retries import call_with_retries

load_dotenv()

logger = logging.getLogger(__name__)

PROVIDER_ANTHROPIC = "anthropic"
PROVIDER_OPENAI = "openai"
PROVIDER_GEMINI = "gemini"
PROVIDER_OLLAMA = "ollama"

OPENAI_MODELS = ("gpt-4o", "gpt-4", "gpt-3.5-turbo")

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OLLAMA_MODEL = "llama3.1"

ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1/"
OLLAMA_BASE_URL = "http://localhost:11434/v1"


def resolve_provider(model: str) -> str:
    """Maps a model alias to its provider; unknown aliases fall back to Claude."""
    name = (model or "").strip()
    if name == "claude" or name.startswith("claude-"):
        return PROVIDER_ANTHROPIC
    if name in OPENAI_MODELS:
        return PROVIDER_OPENAI
    if name == "gemini" or name.startswith("gemini-"):
        return PROVIDER_GEMINI
    if name == "ollama":
        return PROVIDER_OLLAMA
    logger.warning("Unknown model: %s - defaulting to Claude", model)
    return PROVIDER_ANTHROPIC


def _provider_model_name(provider: str, model: str) -> str:
    if provider == PROVIDER_ANTHROPIC:
        return model if model.startswith("claude-") else os.getenv("CLAUDE_MODEL", DEFAULT_CLAUDE_MODEL)
    if provider == PROVIDER_GEMINI:
        return model if model.startswith("gemini-") else os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
    if provider == PROVIDER_OLLAMA:
        return os.getenv("OLLAMA_MODEL", DEFAULT_OLLAMA_MODEL)
    return model


def build_openai_client(provider: str, api_key: Optional[str] = None) -> OpenAI:
    """
    Builds an OpenAI SDK client pointed at the provider's compatible endpoint.
    """
    if provider == PROVIDER_ANTHROPIC:
        key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not key:
            raise ValueError("Anthropic API Key is required.")
        return OpenAI(api_key=key, base_url=os.getenv("ANTHROPIC_BASE_URL", ANTHROPIC_BASE_URL), timeout=None)
    if provider == PROVIDER_OLLAMA:
        return OpenAI(api_key=api_key or "ollama", base_url=os.getenv("OLLAMA_BASE_URL", OLLAMA_BASE_URL), timeout=None)
    key = api_key or os.getenv("OPENAI_API_KEY")
    if not key:
        raise ValueError("OpenAI API Key is required.")
    base_url = os.getenv("OPENAI_BASE_URL")
    if base_url:
        return OpenAI(api_key=key, base_url=base_url, timeout=None)
    return OpenAI(api_key=key, timeout=None)


def _chat_completion_text(client: Any, model_name: str, prompt: str) -> str:
    response = client.chat.completions.create(
        model=model_name,
        messages=[{"role": "user", "content": prompt}],
    )
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    content = getattr(choices[0].message, "content", None)
    return content if isinstance(content, str) else ""


def _gemini_text(model_name: str, prompt: str) -> str:
    import google.generativeai as genai

    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise ValueError("Google API Key is required.")
    genai.configure(api_key=api_key)
    gemini = genai.GenerativeModel(model_name=model_name)
    response = gemini.generate_content(prompt)
    try:
        return response.text or ""
    except ValueError:
        # Blocked or empty candidates carry no text part.
        return ""


def send_to_llm(prompt: str, model: str = "claude", client: Any = None) -> str:
    """
    Sends one prompt to the model behind `model` and returns the reply text.

    Args:
        prompt: Full prompt text.
        model: Alias ("claude", "gpt-4o", "gpt-4", "gpt-3.5-turbo", "gemini", "ollama")
            or a concrete claude-*/gemini-* model id.
        client: Optional pre-built OpenAI-compatible client (tests, custom gateways).

    Raises:
        ValueError: the provider's API key is not configured.
        LLMProviderError: the provider kept failing after transport retries.
    """
    provider = resolve_provider(model)
    model_name = _provider_model_name(provider, model)

    if provider == PROVIDER_GEMINI and client is None:
        def _call_model() -> str:
            return _gemini_text(model_name, prompt)
    else:
        chat_client = client or build_openai_client(provider)

        def _call_model() -> str:
            return _chat_completion_text(chat_client, model_name, prompt)

    try:
        return call_with_retries(_call_model, max_retries=3, backoff_factor=2, initial_delay=2)
    except ValueError:
        raise
    except Exception as exc:
        raise LLMProviderError(model, str(exc)) from exc
