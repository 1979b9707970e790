"""Tests for note, tag and summary persistence"""

from __future__ import annotations

import pytest

from ainote.notes import (
    NoteNotFoundError,
    NoteRepository,
    SortOption,
    SummaryRepository,
    TagRepository,
)
from ainote.utils.validators import ValidationError


def test_create_and_get():
    note = NoteRepository.create("u1", "  Title  ", "  Body  ")
    assert note.title == "Title"
    assert note.content == "Body"

    loaded = NoteRepository.get("u1", note.id)
    assert loaded.id == note.id
    assert loaded.created_at == note.created_at


def test_create_rejects_invalid_input():
    with pytest.raises(ValidationError, match="Please enter a title"):
        NoteRepository.create("u1", " ", "body")
    with pytest.raises(ValidationError, match="Please enter some content"):
        NoteRepository.create("u1", "title", "")


def test_notes_are_scoped_to_owner():
    note = NoteRepository.create("u1", "Private", "secret plans")

    with pytest.raises(NoteNotFoundError):
        NoteRepository.get("u2", note.id)
    with pytest.raises(NoteNotFoundError):
        NoteRepository.update("u2", note.id, title="Hijacked")
    with pytest.raises(NoteNotFoundError):
        NoteRepository.delete("u2", note.id)

    assert NoteRepository.get("u1", note.id).title == "Private"


def test_update_partial_fields():
    note = NoteRepository.create("u1", "Old title", "Old body")

    updated = NoteRepository.update("u1", note.id, title="New title")
    assert updated.title == "New title"
    assert updated.content == "Old body"
    assert updated.updated_at >= note.updated_at

    with pytest.raises(ValidationError):
        NoteRepository.update("u1", note.id, content="   ")


def test_list_pagination_and_sorting():
    for title in ["banana", "Apple", "cherry"]:
        NoteRepository.create("u1", title, "body")
    NoteRepository.create("u2", "other user", "body")

    latest = NoteRepository.list_notes("u1", SortOption.LATEST)
    assert latest["total"] == 3
    assert [n.title for n in latest["notes"]] == ["cherry", "Apple", "banana"]

    oldest = NoteRepository.list_notes("u1", "oldest")
    assert [n.title for n in oldest["notes"]] == ["banana", "Apple", "cherry"]

    by_title = NoteRepository.list_notes("u1", "title")
    assert [n.title for n in by_title["notes"]] == ["Apple", "banana", "cherry"]

    page = NoteRepository.list_notes("u1", "bogus", page=2, page_size=2)
    assert page["sort"] == "latest"
    assert page["total_pages"] == 2
    assert [n.title for n in page["notes"]] == ["banana"]


def test_empty_list():
    result = NoteRepository.list_notes("nobody")
    assert result["notes"] == []
    assert result["total_pages"] == 0


def test_delete_cascades_to_tags_and_summary():
    note = NoteRepository.create("u1", "Doomed", "body")
    TagRepository.replace_tags(note.id, ["a", "b"])
    SummaryRepository.upsert(note.id, "- point", "gemini-1.5-flash")

    NoteRepository.delete("u1", note.id)

    assert TagRepository.get_tags(note.id) == []
    assert SummaryRepository.get(note.id) is None
    with pytest.raises(NoteNotFoundError):
        NoteRepository.delete("u1", note.id)


def test_tag_operations():
    note = NoteRepository.create("u1", "Tagged", "body")

    assert TagRepository.replace_tags(note.id, [" work ", "work", "home"]) == ["work", "home"]
    assert TagRepository.add_tag(note.id, "travel") == ["work", "home", "travel"]

    with pytest.raises(ValidationError, match="already exists"):
        TagRepository.add_tag(note.id, "work")

    assert TagRepository.remove_tag(note.id, "home") == ["work", "travel"]

    TagRepository.replace_tags(note.id, ["1", "2", "3", "4", "5", "6"])
    with pytest.raises(ValidationError, match="at most 6"):
        TagRepository.add_tag(note.id, "7")
    with pytest.raises(ValidationError):
        TagRepository.replace_tags(note.id, ["1", "2", "3", "4", "5", "6", "7"])

    TagRepository.delete_tags(note.id)
    assert TagRepository.get_tags(note.id) == []


def test_summary_upsert_replaces():
    note = NoteRepository.create("u1", "Summarized", "body")
    assert SummaryRepository.get(note.id) is None

    SummaryRepository.upsert(note.id, "- first", "gemini-1.5-flash")
    SummaryRepository.upsert(note.id, "- second", "gemini-1.5-pro")

    summary = SummaryRepository.get(note.id)
    assert summary.content == "- second"
    assert summary.model == "gemini-1.5-pro"
