"""
Gemini model construction and text generation.

The model is built explicitly by create_gemini_model() and handed to a
GeminiTextGenerator, which the API app receives at construction time. There
is no module-level cached model; tests pass a fake generator instead.

Supports two backends:
  1. Vertex AI SDK (production): GOOGLE_CLOUD_PROJECT + service account
  2. google-generativeai (local dev): GEMINI_API_KEY / GOOGLE_API_KEY
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from ainote.config import LLM_MAX_PROMPT_LENGTH, LLM_TIMEOUT_SECONDS
from ainote.infrastructure.settings import (
    GEMINI_API_KEY,
    GEMINI_LOCATION,
    GEMINI_MAX_TOKENS,
    GEMINI_MODEL,
    GEMINI_TEMPERATURE,
    GEMINI_TOP_K,
    GEMINI_TOP_P,
    GOOGLE_CLOUD_PROJECT,
)
from ainote.llm.retry import call_llm
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter, time_block
from ainote.utils.ai_errors import AIErrorType, handle_ai_error

logger = get_logger(__name__)

DEFAULT_GENERATION_CONFIG: dict[str, Any] = {
    "temperature": GEMINI_TEMPERATURE,
    "max_output_tokens": GEMINI_MAX_TOKENS,
    "top_p": GEMINI_TOP_P,
    "top_k": GEMINI_TOP_K,
}


class GeminiInitializationError(RuntimeError):
    """Raised when Gemini model cannot be initialized."""


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    text: str | None = None
    error: str | None = None
    error_type: AIErrorType | None = None
    action: str | None = None


class TextGenerator(Protocol):
    model_name: str

    def generate_text(self, prompt: str, counter_prefix: str = "llm") -> GenerationResult: ...


def create_gemini_model(
    model_name: str = GEMINI_MODEL,
    project: str | None = GOOGLE_CLOUD_PROJECT,
    location: str = GEMINI_LOCATION,
    api_key: str | None = GEMINI_API_KEY,
) -> Any:
    """
    Build a Gemini GenerativeModel.

    Uses Vertex AI when a project is configured, otherwise google-generativeai
    with an API key.

    Raises:
        GeminiInitializationError: If neither backend can be configured
    """
    if project:
        try:
            import vertexai
            from vertexai.generative_models import GenerativeModel
        except ImportError:
            logger.info("Vertex AI SDK not installed, trying google-generativeai fallback")
        else:
            try:
                vertexai.init(project=project, location=location)
                model = GenerativeModel(model_name)
            except Exception as e:
                logger.error("Failed to initialize Vertex AI model: %s", e)
                raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e

            logger.info(
                "Initialized Gemini model (Vertex AI): project=%s, location=%s, model=%s",
                project,
                location,
                model_name,
            )
            return model

    if not api_key:
        raise GeminiInitializationError(
            "The GEMINI_API_KEY environment variable is not set and no "
            "GOOGLE_CLOUD_PROJECT is configured."
        )

    try:
        import google.generativeai as genai
    except ImportError as e:
        raise GeminiInitializationError(
            "No Gemini SDK available. Install google-cloud-aiplatform or google-generativeai."
        ) from e

    try:
        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(model_name)
    except Exception as e:
        logger.error("Failed to initialize Gemini model: %s", e)
        raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e

    logger.info("Initialized Gemini model (google-generativeai): model=%s", model_name)
    return model


class GeminiTextGenerator:
    """
    Prompt validation, generation and failure classification around one model.

    generate_text() never raises for model failures; it returns a
    GenerationResult whose ``error`` is the fixed user-facing message.
    """

    def __init__(
        self,
        model: Any,
        model_name: str = GEMINI_MODEL,
        generation_config: dict[str, Any] | None = None,
        timeout: float = LLM_TIMEOUT_SECONDS,
        max_prompt_length: int = LLM_MAX_PROMPT_LENGTH,
    ) -> None:
        self.model = model
        self.model_name = model_name
        self.generation_config = {**DEFAULT_GENERATION_CONFIG, **(generation_config or {})}
        self.timeout = timeout
        self.max_prompt_length = max_prompt_length

    def generate_text(self, prompt: str, counter_prefix: str = "llm") -> GenerationResult:
        prompt = (prompt or "").strip()
        if not prompt:
            return GenerationResult(
                success=False,
                error="The prompt is empty.",
                error_type=AIErrorType.VALIDATION,
                action="retry",
            )
        if len(prompt) > self.max_prompt_length:
            return GenerationResult(
                success=False,
                error=f"Prompts can be at most {self.max_prompt_length} characters.",
                error_type=AIErrorType.VALIDATION,
                action="retry",
            )

        try:
            with time_block(f"llm.{counter_prefix}.latency"):
                text = call_llm(
                    self.model,
                    prompt,
                    self.generation_config,
                    timeout=self.timeout,
                    counter_prefix=counter_prefix,
                )
        except Exception as e:
            ai_error = handle_ai_error(e)
            counter(f"llm.{counter_prefix}.failed")
            logger.error("Gemini generation failed (%s): %s", ai_error.type.value, e)
            return GenerationResult(
                success=False,
                error=ai_error.message,
                error_type=ai_error.type,
                action=ai_error.action,
            )

        if not text.strip():
            counter(f"llm.{counter_prefix}.empty_response")
            return GenerationResult(
                success=False,
                error="The AI response was empty.",
                error_type=AIErrorType.API,
                action="retry",
            )

        counter(f"llm.{counter_prefix}.success")
        return GenerationResult(success=True, text=text)


def create_text_generator(model_name: str = GEMINI_MODEL) -> GeminiTextGenerator:
    """
    Build a generator backed by a freshly constructed Gemini model.

    Raises:
        GeminiInitializationError: If no backend can be configured
    """
    return GeminiTextGenerator(create_gemini_model(model_name=model_name), model_name=model_name)
