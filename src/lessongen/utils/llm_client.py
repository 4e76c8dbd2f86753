"""LLM client for schema-constrained text generation.

Wraps the Google GenAI and OpenAI SDKs behind a single ``generate_text``
call that returns the raw response text. Parsing and validation happen
downstream, so this client does not retry: every provider failure is
raised as ``TransportError`` and the caller decides what to do with it.

Features:
- Provider detection from the model name (gemini-* / gpt-* / o*)
- JSON response format with a JSON Schema contract
- Token usage tracking and cost estimation
- Request/response logging (prompt hash, tokens, latency)
- Langfuse tracing
"""

import hashlib
import logging
import os
import threading
import time
from typing import Any, Dict, Optional

from google import genai
from google.genai import types as genai_types
from langfuse import observe
from openai import OpenAI
from pydantic import BaseModel

from lessongen.config import DEFAULT_MODEL, LANGFUSE_ENABLED
from lessongen.errors import TransportError

logger = logging.getLogger(__name__)


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cached_tokens: int = 0  # Prompt cache hits


def _as_int(value: Any) -> int:
    return value if isinstance(value, int) else 0


class LLMClient:
    """Single-shot LLM client returning raw text.

    The provider SDK client can be injected (``client=``) so tests and
    callers can supply their own instance instead of one built from
    environment variables.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
        enable_langfuse: bool = LANGFUSE_ENABLED,
    ):
        """Initialize LLM client.

        Args:
            api_key: API key for the provider (if None, uses provider-specific env var)
            model: Model to use (if None, uses LLM_MODEL env var or defaults to gemini-2.5-flash)
                   Supports: gemini-*, gpt-*, o*
            client: Pre-built provider SDK client (skips SDK construction)
            enable_langfuse: Route OpenAI calls through the Langfuse-wrapped client
        """
        self.model = model or DEFAULT_MODEL
        self.provider = self._detect_provider(self.model)
        self.enable_langfuse = enable_langfuse

        self.total_usage = TokenUsage()
        self._usage_lock = threading.Lock()

        if client is not None:
            self.client = client
        elif self.provider == "gemini":
            api_key_to_use = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
            if not api_key_to_use:
                raise ValueError("GEMINI_API_KEY environment variable is not set")
            self.client = genai.Client(api_key=api_key_to_use)
        elif enable_langfuse:
            from langfuse.openai import OpenAI as LangfuseOpenAI

            self.client = LangfuseOpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"))
            logger.info("Langfuse tracing enabled for OpenAI")
        else:
            self.client = OpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"))

        logger.info(f"LLMClient initialized with provider={self.provider}, model={self.model}")

    def _detect_provider(self, model: str) -> str:
        """Detect LLM provider from model name.

        Args:
            model: Model name

        Returns:
            Provider name: 'gemini' or 'openai'
        """
        model_lower = model.lower()
        if model_lower.startswith("gemini"):
            return "gemini"
        elif model_lower.startswith(("gpt", "o1", "o3", "o4")):
            return "openai"
        else:
            logger.warning(f"Unknown model prefix '{model}', defaulting to OpenAI provider")
            return "openai"

    @observe(as_type="generation")
    def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
        temperature: float = 0.7,
        top_p: Optional[float] = None,
        max_tokens: int = 2048,
    ) -> str:
        """Issue one generation call and return the response text.

        Args:
            prompt: User prompt/instruction
            system_prompt: Optional system instruction
            response_schema: JSON Schema the output must follow; also forces JSON output
            schema_name: Name reported to providers that require one
            temperature: Sampling temperature
            top_p: Nucleus sampling cutoff (provider default if None)
            max_tokens: Output token ceiling

        Returns:
            Response text (empty string if the provider returned no text)

        Raises:
            TransportError: If the provider call fails
        """
        prompt_hash = self._hash_prompt(prompt)
        logger.info(
            f"Generating text: model={self.model}, prompt_hash={prompt_hash}, "
            f"temperature={temperature}, schema={'yes' if response_schema else 'no'}"
        )

        start_time = time.time()
        try:
            if self.provider == "gemini":
                text, usage = self._generate_gemini(
                    prompt, system_prompt, response_schema, temperature, top_p, max_tokens
                )
            else:
                text, usage = self._generate_openai(
                    prompt, system_prompt, response_schema, schema_name, temperature, top_p, max_tokens
                )
        except Exception as e:
            latency_ms = (time.time() - start_time) * 1000
            self._log_response(
                prompt_hash=prompt_hash,
                latency_ms=latency_ms,
                success=False,
                error=str(e)[:200],
            )
            raise TransportError(f"{self.provider} call failed: {e}", provider=self.provider) from e

        latency_ms = (time.time() - start_time) * 1000
        self._update_total_usage(usage)
        self._log_response(
            prompt_hash=prompt_hash,
            latency_ms=latency_ms,
            success=True,
            usage=usage,
        )
        return text

    def _generate_gemini(
        self,
        prompt: str,
        system_prompt: Optional[str],
        response_schema: Optional[Dict[str, Any]],
        temperature: float,
        top_p: Optional[float],
        max_tokens: int,
    ):
        config_params: Dict[str, Any] = {
            "temperature": temperature,
            "max_output_tokens": max_tokens,
        }
        if system_prompt:
            config_params["system_instruction"] = system_prompt
        if top_p is not None:
            config_params["top_p"] = top_p
        if response_schema:
            config_params["response_mime_type"] = "application/json"
            config_params["response_json_schema"] = response_schema

        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(**config_params),
        )

        usage = TokenUsage()
        raw_usage = getattr(response, "usage_metadata", None)
        if raw_usage is not None:
            usage.prompt_tokens = _as_int(getattr(raw_usage, "prompt_token_count", 0))
            usage.completion_tokens = _as_int(getattr(raw_usage, "candidates_token_count", 0))
            usage.total_tokens = _as_int(getattr(raw_usage, "total_token_count", 0)) or (
                usage.prompt_tokens + usage.completion_tokens
            )
            usage.cached_tokens = _as_int(getattr(raw_usage, "cached_content_token_count", 0))

        return response.text or "", usage

    def _generate_openai(
        self,
        prompt: str,
        system_prompt: Optional[str],
        response_schema: Optional[Dict[str, Any]],
        schema_name: str,
        temperature: float,
        top_p: Optional[float],
        max_tokens: int,
    ):
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        api_params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }

        # GPT-5 and o* models use max_completion_tokens instead of max_tokens
        # and only support the default sampling parameters
        if self.model.startswith(("gpt-5", "o")):
            api_params["max_completion_tokens"] = max_tokens
            api_params["temperature"] = 1.0
        else:
            api_params["max_tokens"] = max_tokens
            if top_p is not None:
                api_params["top_p"] = top_p

        if response_schema:
            api_params["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": response_schema, "strict": False},
            }

        response = self.client.chat.completions.create(**api_params)

        usage = TokenUsage()
        raw_usage = getattr(response, "usage", None)
        if raw_usage is not None:
            usage.prompt_tokens = _as_int(getattr(raw_usage, "prompt_tokens", 0))
            usage.completion_tokens = _as_int(getattr(raw_usage, "completion_tokens", 0))
            usage.total_tokens = _as_int(getattr(raw_usage, "total_tokens", 0))
            details = getattr(raw_usage, "prompt_tokens_details", None)
            if details is not None:
                usage.cached_tokens = _as_int(getattr(details, "cached_tokens", 0))

        text = response.choices[0].message.content if response.choices else None
        return text or "", usage

    def _update_total_usage(self, usage: TokenUsage) -> None:
        """Update cumulative token usage.

        Args:
            usage: Token usage from current request
        """
        with self._usage_lock:
            self.total_usage.prompt_tokens += usage.prompt_tokens
            self.total_usage.completion_tokens += usage.completion_tokens
            self.total_usage.total_tokens += usage.total_tokens
            self.total_usage.cached_tokens += usage.cached_tokens

    def get_usage_summary(self) -> dict:
        """Get summary of total token usage.

        Returns:
            Dictionary with usage stats and cost estimates
        """
        # Cost estimates (per 1M tokens)
        costs = {
            "gemini-2.5-flash": {"input": 0.3, "output": 2.5, "cached": 0.075},
            "gemini-2.5-flash-lite": {"input": 0.1, "output": 0.4, "cached": 0.025},
            "gemini-2.5-pro": {"input": 1.25, "output": 10, "cached": 0.31},
            "gpt-4.1-nano": {"input": 0.1, "output": 0.4, "cached": 0.025},
            "gpt-4.1-mini": {"input": 0.4, "output": 1.6, "cached": 0.1},
            "gpt-4o-mini": {"input": 0.15, "output": 0.6, "cached": 0.075},
        }

        model_cost = costs.get(self.model, costs["gemini-2.5-flash"])

        with self._usage_lock:
            usage = self.total_usage.model_copy()

        uncached_prompt = usage.prompt_tokens - usage.cached_tokens
        input_cost = (
            uncached_prompt * model_cost["input"] + usage.cached_tokens * model_cost["cached"]
        ) / 1_000_000
        output_cost = usage.completion_tokens * model_cost["output"] / 1_000_000

        return {
            "model": self.model,
            "prompt_tokens": usage.prompt_tokens,
            "completion_tokens": usage.completion_tokens,
            "total_tokens": usage.total_tokens,
            "cached_tokens": usage.cached_tokens,
            "estimated_cost_usd": round(input_cost + output_cost, 4),
        }

    def reset_usage(self) -> None:
        """Reset token usage counters."""
        with self._usage_lock:
            self.total_usage = TokenUsage()

    def _hash_prompt(self, prompt: str) -> str:
        """Generate SHA256 hash of prompt for logging.

        Args:
            prompt: Text prompt to hash

        Returns:
            First 16 characters of SHA256 hash
        """
        return hashlib.sha256(prompt.encode()).hexdigest()[:16]

    def _log_response(
        self,
        prompt_hash: str,
        latency_ms: float,
        success: bool,
        usage: Optional[TokenUsage] = None,
        error: Optional[str] = None,
    ) -> None:
        """Log structured response metadata."""
        log_data = {
            "prompt_hash": prompt_hash,
            "provider": self.provider,
            "model": self.model,
            "latency_ms": round(latency_ms, 2),
            "success": success,
        }

        if usage:
            log_data["tokens"] = {
                "prompt": usage.prompt_tokens,
                "completion": usage.completion_tokens,
                "total": usage.total_tokens,
                "cached": usage.cached_tokens,
            }

        if error:
            log_data["error"] = error

        if success:
            logger.info(f"LLM response: {log_data}")
        else:
            logger.warning(f"LLM response failed: {log_data}")
