"""Prompt templates for note summaries and tags."""

from __future__ import annotations

from ainote.config import NOTE_CONTENT_MAX_CHARS_FOR_AI, TAG_MAX_COUNT, TAG_MAX_LENGTH

TRUNCATION_MARKER = "\n\n... (content truncated)"


def truncate_note_content(content: str, max_length: int = NOTE_CONTENT_MAX_CHARS_FOR_AI) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length] + TRUNCATION_MARKER


def create_summary_prompt(note_content: str) -> str:
    return f"""Summarize the following note in 3 to 6 bullet points.

Rules:
- Write at least 3 and at most 6 bullet points
- Keep each bullet point to one concise sentence
- Focus on the key content and important information
- Bullet format: "- content" (markdown)
- Write in the same language as the note
- Start directly with the bullet points, with no introduction

Note:
{note_content}

Summary:"""


def create_tag_prompt(note_content: str) -> str:
    return f"""Suggest up to {TAG_MAX_COUNT} short tags that describe the following note.

Rules:
- Return only the tags, separated by commas, on a single line
- Each tag is one or two words and at most {TAG_MAX_LENGTH} characters
- No "#" prefix, numbering, bullets or explanations
- Write the tags in the same language as the note

Note:
{note_content}

Tags:"""
