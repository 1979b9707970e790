"""
AI summary and tag generation for notes.

Generating a note's first summary (or first tag set) is free. Generating
again when one already exists is a regeneration: it is refused once the
user's daily limit is used up and recorded after it succeeds. Every
successful generation also records estimated token usage; a failure to
record usage is logged and never fails the request.
"""

from __future__ import annotations

import sqlite3

from ainote.config import NOTE_MIN_CONTENT_FOR_AI
from ainote.llm.gemini import GenerationResult, TextGenerator
from ainote.llm.prompts import create_summary_prompt, create_tag_prompt, truncate_note_content
from ainote.notes.models import Summary
from ainote.notes.repository import NoteRepository
from ainote.notes.summaries import SummaryRepository
from ainote.notes.tags import TagRepository, parse_tags_from_response
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import log_event
from ainote.usage.regenerations import (
    RegenerationLimitExceeded,
    check_regeneration_limit,
    record_regeneration,
)
from ainote.usage.token_usage import record_token_usage
from ainote.utils.ai_errors import AIErrorType
from ainote.utils.token_calculator import estimate_token_count
from ainote.utils.validators import ValidationError

logger = get_logger(__name__)


class AIGenerationError(Exception):
    """Generation failed; carries the classified, user-facing error."""

    def __init__(self, result: GenerationResult) -> None:
        self.error_type = result.error_type or AIErrorType.UNKNOWN_ERROR
        self.action = result.action or "retry"
        super().__init__(result.error or "AI generation failed")


def _require_content(content: str) -> str:
    content = content.strip()
    if len(content) < NOTE_MIN_CONTENT_FOR_AI:
        raise ValidationError(
            f"Note content must be at least {NOTE_MIN_CONTENT_FOR_AI} characters for AI processing"
        )
    return content


class NoteAIService:
    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    def _generate(self, prompt: str, counter_prefix: str) -> str:
        result = self.generator.generate_text(prompt, counter_prefix=counter_prefix)
        if not result.success or not result.text:
            raise AIGenerationError(result)
        return result.text.strip()

    def _check_regeneration(self, user_id: str, regeneration_type: str) -> None:
        status = check_regeneration_limit(user_id, regeneration_type)
        if not status.can_regenerate:
            raise RegenerationLimitExceeded(regeneration_type, status.current_count, status.limit)

    def _record_usage(
        self, user_id: str, note_id: str | None, operation: str, prompt: str, output: str
    ) -> None:
        try:
            record_token_usage(
                user_id=user_id,
                operation_type=operation,
                input_tokens=estimate_token_count(prompt),
                output_tokens=estimate_token_count(output),
                model=self.generator.model_name,
                note_id=note_id,
            )
        except (sqlite3.Error, OSError, ValueError) as e:
            logger.warning("Failed to record token usage for note %s: %s", note_id, e)

    def generate_summary(self, user_id: str, note_id: str) -> Summary:
        """
        Summarize a note and store the result.

        Raises:
            NoteNotFoundError: If the note is missing or owned by another user
            ValidationError: If the note is shorter than NOTE_MIN_CONTENT_FOR_AI
            RegenerationLimitExceeded: If replacing a summary and today's limit is used up
            AIGenerationError: If the model call fails
        """
        note = NoteRepository.get(user_id, note_id)
        content = _require_content(note.content)

        is_regeneration = SummaryRepository.get(note_id) is not None
        if is_regeneration:
            self._check_regeneration(user_id, "summary")

        prompt = create_summary_prompt(truncate_note_content(content))
        text = self._generate(prompt, counter_prefix="summary")
        summary = SummaryRepository.upsert(note_id, text, self.generator.model_name)

        if is_regeneration:
            record_regeneration(user_id, note_id, "summary")
        self._record_usage(
            user_id, note_id, "regeneration" if is_regeneration else "summary", prompt, text
        )
        log_event("notes.summary_generated", regeneration=is_regeneration)
        return summary

    def generate_tags(self, user_id: str, note_id: str) -> list[str]:
        """
        Generate tags for a note, replacing its current tag set.

        Raises:
            NoteNotFoundError, ValidationError, RegenerationLimitExceeded,
            AIGenerationError: as for generate_summary
        """
        note = NoteRepository.get(user_id, note_id)
        content = _require_content(note.content)

        is_regeneration = bool(TagRepository.get_tags(note_id))
        if is_regeneration:
            self._check_regeneration(user_id, "tags")

        prompt = create_tag_prompt(truncate_note_content(content))
        text = self._generate(prompt, counter_prefix="tags")
        tags = parse_tags_from_response(text)
        if not tags:
            raise AIGenerationError(
                GenerationResult(
                    success=False,
                    error="No usable tags were generated. Please try again.",
                    error_type=AIErrorType.API,
                    action="retry",
                )
            )

        saved = TagRepository.replace_tags(note_id, tags)

        if is_regeneration:
            record_regeneration(user_id, note_id, "tags")
        self._record_usage(
            user_id, note_id, "regeneration" if is_regeneration else "tags", prompt, text
        )
        log_event("notes.tags_generated", regeneration=is_regeneration, count=len(saved))
        return saved

    def generate_temp_tags(self, user_id: str, content: str) -> list[str]:
        """Suggest tags for unsaved content without storing them."""
        content = _require_content(content)
        prompt = create_tag_prompt(truncate_note_content(content))
        text = self._generate(prompt, counter_prefix="tags")
        self._record_usage(user_id, None, "tags", prompt, text)
        return parse_tags_from_response(text)
