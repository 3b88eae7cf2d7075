"""Single-prompt LiteLLM access for summaries and smart ids.

ask() sends one user prompt and returns the stripped answer text. LiteLLM's
own retry (num_retries, exponential backoff) absorbs transient errors; what
remains propagates, and callers turn it into ExternalServiceError at their
own boundary.
"""

from __future__ import annotations

import os

import litellm

litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]

DEFAULT_MODEL = "gemini/gemini-2.0-flash"

# Providers absent from this table use <PROVIDER>_API_KEY.
_PROVIDER_ENV: dict[str, str | None] = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "ollama": None,
    "ollama_chat": None,
}


def provider_of(model: str) -> str:
    """'gemini/gemini-2.0-flash' -> 'gemini'; bare model names are OpenAI's."""
    return model.split("/")[0].lower() if "/" in model else "openai"


def api_key_env(model: str) -> str | None:
    """Name of the env var holding *model*'s key, or None for local providers."""
    provider = provider_of(model)
    return _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")


def validate_api_key(model: str) -> None:
    """Check that *model* can be called with the current environment.

    Raises:
        EnvironmentError: the provider's key variable is unset or empty.
    """
    env_var = api_key_env(model)
    if env_var is None or os.getenv(env_var):
        return
    raise EnvironmentError(
        f"API key not found for provider '{provider_of(model)}'. "
        f"Set the {env_var} environment variable."
    )


def ask(
    model: str,
    prompt: str,
    max_tokens: int = 1024,
    num_retries: int = 2,
) -> str:
    """Send *prompt* as a single user message; return the answer, stripped.

    Deterministic sampling (temperature 0). A missing answer comes back as "".

    Raises:
        Exception: whatever litellm raises once its retries are exhausted.
    """
    response = litellm.completion(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=max_tokens,
        temperature=0.0,
        num_retries=num_retries,
    )
    return (response.choices[0].message.content or "").strip()
