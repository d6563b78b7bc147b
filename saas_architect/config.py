# saas_architect/config.py
"""
Environment-driven settings.

Values are read on each call (not cached at import) so tests can monkeypatch
os.environ. app.py loads .env before importing anything from this package.

Env vars:
  OPENAI_API_KEY / GEMINI_API_KEY / ANTHROPIC_API_KEY   provider credentials (optional)
  OPENAI_MODEL / GEMINI_MODEL / ANTHROPIC_MODEL         model overrides
  LLM_PROVIDER_ORDER=openai,gemini                      fallback chain order
  LLM_TIMEOUT_SECONDS=30
  LLM_MAX_TOKENS=4000
  LLM_TEMPERATURE=0.7
  DATABASE_URL=sqlite:///./saas_architect.db
  CORS_ORIGINS=*
"""

import os
from dataclasses import dataclass
from typing import List, Optional

# Values shipped in .env.example; treated the same as a missing key
PLACEHOLDER_KEYS = {
    "your_openai_api_key_here",
    "your_gemini_api_key_here",
    "your_anthropic_api_key_here",
}

KNOWN_PROVIDERS = ("openai", "gemini", "anthropic")

_CREDENTIAL_ENV = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

_MODEL_ENV = {
    "openai": ("OPENAI_MODEL", "gpt-3.5-turbo"),
    "gemini": ("GEMINI_MODEL", "gemini-2.0-flash"),
    "anthropic": ("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
}

DEFAULT_PROVIDER_ORDER = "openai,gemini"
DEFAULT_DATABASE_URL = "sqlite:///./saas_architect.db"


@dataclass
class ProviderSettings:
    name: str
    api_key: Optional[str]
    model: str
    timeout: float = 30.0
    max_tokens: int = 4000
    temperature: float = 0.7

    @property
    def configured(self) -> bool:
        return self.api_key is not None


def credential(env_name: str) -> Optional[str]:
    """Return the credential stored in env_name, or None if blank or a placeholder."""
    value = os.getenv(env_name, "").strip()
    if not value or value in PLACEHOLDER_KEYS:
        return None
    return value


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def provider_order() -> List[str]:
    raw = os.getenv("LLM_PROVIDER_ORDER", DEFAULT_PROVIDER_ORDER)
    names = []
    for part in raw.split(","):
        name = part.strip().lower()
        if name and name not in names:
            names.append(name)
    return names


def provider_settings(name: str) -> ProviderSettings:
    if name not in KNOWN_PROVIDERS:
        raise ValueError(f"Unknown provider '{name}'")
    model_env, model_default = _MODEL_ENV[name]
    return ProviderSettings(
        name=name,
        api_key=credential(_CREDENTIAL_ENV[name]),
        model=os.getenv(model_env, model_default).strip() or model_default,
        timeout=_float_env("LLM_TIMEOUT_SECONDS", 30.0),
        max_tokens=_int_env("LLM_MAX_TOKENS", 4000),
        temperature=_float_env("LLM_TEMPERATURE", 0.7),
    )


def database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]
