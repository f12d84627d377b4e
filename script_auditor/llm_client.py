import logging
import os
import time
from typing import Any, Callable, Dict

import requests

from .errors import ProviderError, ProviderNotConfigured
from .models import ModelInfo

logger = logging.getLogger(__name__)

# -------- Provider knobs --------
LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "openrouter")
LLM_TIMEOUT = int(os.environ.get("LLM_TIMEOUT", "60"))
LLM_MAX_RETRIES = int(os.environ.get("LLM_MAX_RETRIES", "3"))
LLM_RETRY_BASE_DELAY = float(os.environ.get("LLM_RETRY_BASE_DELAY", "1.0"))
MAX_SCRIPT_CHARS = int(os.environ.get("LLM_MAX_SCRIPT_CHARS", "24000"))

OPENROUTER_BASE_URL = os.environ.get("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OLLAMA_URL = os.environ.get("OLLAMA_URL", "http://localhost:11434")
APP_URL = os.environ.get("APP_URL", "http://localhost:8000")
APP_TITLE = "Script Auditor"

DEFAULT_TEMPERATURE = 0.7
SEED = 42


def _sampling(model: ModelInfo) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "max_tokens": model.max_tokens,
        "temperature": DEFAULT_TEMPERATURE if model.temperature is None else model.temperature,
    }
    for key in ("top_p", "presence_penalty", "frequency_penalty"):
        value = getattr(model, key)
        if value is not None:
            params[key] = value
    return params


# ----------------- OpenRouter path (OpenAI-compatible) -----------------

def _openrouter_complete(prompt: str, model: ModelInfo) -> str:
    api_key = os.environ.get("OPENROUTER_API_KEY", "")
    if not api_key:
        raise ProviderNotConfigured("OPENROUTER_API_KEY is not set")

    from openai import OpenAI, OpenAIError
    client = OpenAI(api_key=api_key, base_url=OPENROUTER_BASE_URL, timeout=LLM_TIMEOUT, max_retries=0)
    try:
        resp = client.chat.completions.create(
            model=model.id,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            seed=SEED,
            extra_headers={"HTTP-Referer": APP_URL, "X-Title": APP_TITLE},
            **_sampling(model),
        )
    except OpenAIError as e:
        raise ProviderError(f"OpenRouter API error: {e}") from e

    if not resp.choices:
        raise ProviderError("Invalid API response structure: no choices")
    content = resp.choices[0].message.content
    if not content:
        raise ProviderError("No content in API response")
    return content


# ----------------- Ollama path (local) -----------------

def _ollama_complete(prompt: str, model: ModelInfo) -> str:
    model_name = os.environ.get("OLLAMA_MODEL", "").strip() or model.id
    sampling = _sampling(model)
    try:
        r = requests.post(
            f"{OLLAMA_URL.rstrip('/')}/api/generate",
            json={
                "model": model_name,
                "prompt": prompt,
                "stream": False,
                "format": "json",
                "options": {
                    "num_predict": sampling["max_tokens"],
                    "temperature": sampling["temperature"],
                    "seed": SEED,
                },
            },
            timeout=LLM_TIMEOUT,
        )
        r.raise_for_status()
        content = r.json().get("response", "")
    except requests.RequestException as e:
        raise ProviderError(f"Ollama error: {e}") from e
    if not content:
        raise ProviderError("No content in Ollama response")
    return content


_PROVIDERS: Dict[str, Callable[[str, ModelInfo], str]] = {
    "openrouter": _openrouter_complete,
    "ollama": _ollama_complete,
}


def complete(prompt: str, model: ModelInfo) -> str:
    """Send the prompt to the configured provider and return the raw reply text.

    Transient failures are retried with exponential backoff; a missing
    configuration fails immediately.
    """
    provider = _PROVIDERS.get(LLM_PROVIDER.strip().lower())
    if provider is None:
        raise ProviderNotConfigured(f"Unknown LLM_PROVIDER {LLM_PROVIDER!r}")

    attempts = max(1, LLM_MAX_RETRIES)
    for attempt in range(1, attempts + 1):
        try:
            return provider(prompt, model)
        except ProviderNotConfigured:
            raise
        except ProviderError as e:
            if attempt == attempts:
                raise
            delay = LLM_RETRY_BASE_DELAY * 2 ** (attempt - 1)
            logger.warning("Attempt %d/%d with %s failed (%s); retrying in %.1fs", attempt, attempts, model.id, e, delay)
            time.sleep(delay)
