"""Gemini call with timeout and retry.

Retries up to LLM_MAX_RETRIES times with exponential backoff on transient
failures. Vertex AI / google-api-core exceptions are converted to builtin
types so the retry policy does not depend on which SDK built the model:

- DeadlineExceeded, call timeout -> TimeoutError
- ServiceUnavailable, InternalServerError -> ConnectionError
- ResourceExhausted (429) -> OSError

The converted exception chains the original (``__cause__``) so the HTTP
status survives for error classification.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ainote.config import LLM_MAX_RETRIES, LLM_MAX_WORKERS, LLM_TIMEOUT_SECONDS
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter

logger = get_logger(__name__)

# Blocking SDK calls run here so a per-call timeout can be enforced
_EXECUTOR = ThreadPoolExecutor(max_workers=LLM_MAX_WORKERS, thread_name_prefix="gemini")


def _response_text(response: Any) -> str:
    # Vertex raises ValueError from .text when every candidate was blocked
    try:
        text = response.text
    except ValueError:
        return ""
    return text or ""


@retry(
    stop=stop_after_attempt(LLM_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((TimeoutError, ConnectionError, OSError)),
    reraise=True,
)
def call_llm(
    model: Any,
    prompt: str,
    generation_config: dict[str, Any],
    timeout: float = LLM_TIMEOUT_SECONDS,
    counter_prefix: str = "llm",
) -> str:
    """Call ``model.generate_content`` with retry and exception conversion.

    Args:
        model: Gemini GenerativeModel (Vertex AI or google-generativeai)
        prompt: The prompt to send
        generation_config: temperature, max_output_tokens, top_p, top_k
        timeout: Seconds to wait for a single attempt
        counter_prefix: Telemetry counter prefix (e.g. "summary", "tags")

    Returns:
        The response text ("" when the model returned nothing usable)

    Raises:
        TimeoutError: Attempt exceeded ``timeout`` or deadline exceeded (retryable)
        ConnectionError: Service unavailable or internal error (retryable)
        OSError: Rate limited (retryable)
        Exception: Anything else, not retried
    """
    from google.api_core.exceptions import (
        DeadlineExceeded,
        InternalServerError,
        ResourceExhausted,
        ServiceUnavailable,
    )

    future = _EXECUTOR.submit(model.generate_content, prompt, generation_config=generation_config)
    try:
        response = future.result(timeout=timeout)
        return _response_text(response)
    except TimeoutError as e:
        future.cancel()
        counter(f"llm.{counter_prefix}.timeout")
        logger.warning("LLM call timed out after %ss", timeout)
        raise TimeoutError(f"Timeout: LLM call exceeded {timeout}s") from e
    except DeadlineExceeded as e:
        counter(f"llm.{counter_prefix}.timeout")
        logger.warning("LLM deadline exceeded: %s", e)
        raise TimeoutError(f"Timeout: LLM deadline exceeded: {e}") from e
    except ServiceUnavailable as e:
        counter(f"llm.{counter_prefix}.service_unavailable")
        logger.warning("LLM service unavailable, will retry: %s", e)
        raise ConnectionError(f"LLM service unavailable: {e}") from e
    except ResourceExhausted as e:
        counter(f"llm.{counter_prefix}.rate_limited")
        logger.warning("LLM rate limited (429), will retry: %s", e)
        raise OSError(f"LLM rate limited: {e}") from e
    except InternalServerError as e:
        counter(f"llm.{counter_prefix}.internal_error")
        logger.warning("LLM internal error (500), will retry: %s", e)
        raise ConnectionError(f"LLM internal error: {e}") from e
    except Exception as e:
        logger.error("LLM call failed: %s", e)
        raise
