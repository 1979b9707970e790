"""
Notes: CRUD, tags, summaries and AI generation.
"""

from ainote.notes.models import NOTE_TEMPLATES, Note, NoteTemplate, SortOption, Summary, get_template
from ainote.notes.repository import NoteNotFoundError, NoteRepository
from ainote.notes.service import AIGenerationError, NoteAIService
from ainote.notes.summaries import SummaryRepository
from ainote.notes.tags import TagRepository, parse_tags_from_response

__all__ = [
    # Models
    "NOTE_TEMPLATES",
    "Note",
    "NoteTemplate",
    "SortOption",
    "Summary",
    "get_template",
    # Repositories
    "NoteNotFoundError",
    "NoteRepository",
    "SummaryRepository",
    "TagRepository",
    "parse_tags_from_response",
    # AI
    "AIGenerationError",
    "NoteAIService",
]
