# saas_architect/providers.py
"""
Provider adapters for blueprint generation. Supports OpenAI, Gemini and Anthropic.

Every adapter exposes the same capability:
  result = await adapter.attempt(request)   # -> AttemptResult
  result.ok, result.blueprint, result.reason, result.detail

attempt() makes exactly one outbound call and never raises for provider
trouble; failures come back as an AttemptResult carrying one of the reason
codes below. Fallback between providers is the orchestrator's job.

Clients are built once by build_adapters() and injected, so tests can hand
in fakes:
  adapter = OpenAIAdapter(client=fake_client, model="gpt-test")
"""

import asyncio
import json
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import anthropic
import google.generativeai as genai
import openai
from google.api_core import exceptions as google_exceptions

from saas_architect import config
from saas_architect import monitoring
from saas_architect.processors.prompt_builder import build_prompt, SYSTEM_PROMPT
from saas_architect.schemas import GenerateRequest
from saas_architect.validator import validate_blueprint

# Failure reasons
R_NOT_CONFIGURED = "not_configured"
R_RATE_LIMITED = "rate_limited"
R_TIMEOUT = "timeout"
R_REQUEST_FAILED = "request_failed"
R_EMPTY_RESPONSE = "empty_response"
R_INVALID_JSON = "invalid_json"
R_SCHEMA_INVALID = "schema_invalid"

_LEADING_FENCE = re.compile(r"^\s*```[a-zA-Z0-9_-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


class ProviderError(Exception):
    def __init__(self, reason: str, message: str = ""):
        super().__init__(message or reason)
        self.reason = reason


@dataclass
class AttemptResult:
    provider: str
    blueprint: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.blueprint is not None


def strip_code_fences(text: str) -> str:
    """Remove a leading ```/```json marker and a trailing ``` marker, if present."""
    s = _LEADING_FENCE.sub("", text or "", count=1)
    s = _TRAILING_FENCE.sub("", s, count=1)
    return s.strip()


def parse_blueprint_text(text: Optional[str]) -> Dict[str, Any]:
    """
    Turn raw model text into a validated blueprint dict.
    Raises ProviderError(empty_response | invalid_json | schema_invalid).
    """
    if not text or not text.strip():
        raise ProviderError(R_EMPTY_RESPONSE, "Provider returned no text")
    payload = strip_code_fences(text)
    if not payload:
        raise ProviderError(R_EMPTY_RESPONSE, "Provider returned only code fences")
    try:
        parsed = json.loads(payload)
    except ValueError as e:
        raise ProviderError(R_INVALID_JSON, f"Failed to parse JSON from model response: {e}")
    validation = validate_blueprint(parsed)
    if not validation["valid"]:
        raise ProviderError(R_SCHEMA_INVALID, "; ".join(validation["errors"]))
    return parsed


class ProviderAdapter:
    """Base adapter. Subclasses implement _complete() for one SDK."""

    name = "base"
    rate_limit_errors: Tuple[type, ...] = ()
    timeout_errors: Tuple[type, ...] = ()

    def __init__(self, client: Any = None, model: str = "", timeout: float = 30.0,
                 max_tokens: int = 4000, temperature: float = 0.7):
        self.client = client
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def _complete(self, system: str, prompt: str) -> Optional[str]:
        raise NotImplementedError

    def _classify(self, exc: Exception) -> str:
        if isinstance(exc, ProviderError):
            return exc.reason
        if isinstance(exc, self.rate_limit_errors):
            return R_RATE_LIMITED
        if isinstance(exc, (asyncio.TimeoutError,) + self.timeout_errors):
            return R_TIMEOUT
        return R_REQUEST_FAILED

    async def attempt(self, request: GenerateRequest) -> AttemptResult:
        if not self.is_configured:
            return AttemptResult(provider=self.name, reason=R_NOT_CONFIGURED,
                                 detail=f"{self.name} credential not configured")
        prompt = build_prompt(request)
        start = time.time()
        try:
            text = await asyncio.wait_for(self._complete(SYSTEM_PROMPT, prompt), timeout=self.timeout)
            blueprint = parse_blueprint_text(text)
        except Exception as e:
            reason = self._classify(e)
            monitoring.observe_provider_attempt(start, self.name, reason)
            if reason == R_INVALID_JSON:
                monitoring.logger.debug("Unparsable provider output",
                                        extra={"provider": self.name, "model": self.model})
            return AttemptResult(provider=self.name, reason=reason, detail=str(e) or type(e).__name__)
        monitoring.observe_provider_attempt(start, self.name, "success")
        return AttemptResult(provider=self.name, blueprint=blueprint)


# ---------------------------------------------------------------------------
# OpenAI backend
# ---------------------------------------------------------------------------
class OpenAIAdapter(ProviderAdapter):
    name = "openai"
    rate_limit_errors = (openai.RateLimitError,)
    timeout_errors = (openai.APITimeoutError,)

    async def _complete(self, system: str, prompt: str) -> Optional[str]:
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        choices = getattr(resp, "choices", None) or []
        return choices[0].message.content if choices else None


# ---------------------------------------------------------------------------
# Gemini backend
# ---------------------------------------------------------------------------
class GeminiAdapter(ProviderAdapter):
    """The client is a genai.GenerativeModel built with the system instruction."""

    name = "gemini"
    rate_limit_errors = (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)
    timeout_errors = (google_exceptions.DeadlineExceeded,)

    async def _complete(self, system: str, prompt: str) -> Optional[str]:
        resp = await self.client.generate_content_async(
            prompt,
            generation_config=genai.types.GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
            ),
            request_options={"timeout": self.timeout},
        )
        # a blocked prompt has no candidates and .parts raises; a filtered
        # candidate has an empty parts list
        if not resp.candidates or not resp.parts:
            return None
        return resp.text


# ---------------------------------------------------------------------------
# Anthropic backend
# ---------------------------------------------------------------------------
class AnthropicAdapter(ProviderAdapter):
    name = "anthropic"
    rate_limit_errors = (anthropic.RateLimitError,)
    timeout_errors = (anthropic.APITimeoutError,)

    async def _complete(self, system: str, prompt: str) -> Optional[str]:
        resp = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        text = ""
        for block in resp.content:
            if hasattr(block, "text"):
                text += block.text
        return text


# ---------------------------------------------------------------------------
# Construction from config
# ---------------------------------------------------------------------------
def _openai_client(settings: config.ProviderSettings):
    return openai.AsyncOpenAI(api_key=settings.api_key, timeout=settings.timeout)


def _gemini_client(settings: config.ProviderSettings):
    genai.configure(api_key=settings.api_key)
    return genai.GenerativeModel(settings.model, system_instruction=SYSTEM_PROMPT)


def _anthropic_client(settings: config.ProviderSettings):
    return anthropic.AsyncAnthropic(api_key=settings.api_key, timeout=settings.timeout)


ADAPTERS = {
    "openai": (OpenAIAdapter, _openai_client),
    "gemini": (GeminiAdapter, _gemini_client),
    "anthropic": (AnthropicAdapter, _anthropic_client),
}


def build_adapter(settings: config.ProviderSettings) -> ProviderAdapter:
    adapter_cls, client_factory = ADAPTERS[settings.name]
    client = client_factory(settings) if settings.configured else None
    return adapter_cls(
        client=client,
        model=settings.model,
        timeout=settings.timeout,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


def build_adapters(order: Optional[List[str]] = None) -> List[ProviderAdapter]:
    """Build one adapter per provider in the configured fallback order."""
    adapters: List[ProviderAdapter] = []
    for name in order if order is not None else config.provider_order():
        if name not in ADAPTERS:
            monitoring.logger.warning("Ignoring unknown provider in LLM_PROVIDER_ORDER",
                                      extra={"provider": name})
            continue
        adapter = build_adapter(config.provider_settings(name))
        monitoring.logger.info("Provider adapter ready",
                               extra={"provider": name, "configured": adapter.is_configured,
                                      "model": adapter.model})
        adapters.append(adapter)
    return adapters
