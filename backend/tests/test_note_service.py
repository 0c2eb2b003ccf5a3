"""
Notes API: Note Service Unit Tests
===================================

What:  NoteService operations against a mocked repository (no database).

What we test:
    ✅ Create: presence checks, equal timestamps, storage failure wrapping
    ✅ List: ordering passthrough, empty store
    ✅ Get: found, not found, malformed id surfacing as InternalError
    ✅ Update: partial application, omitted vs explicit empty, null rejected
    ✅ Delete: snapshot returned, not found, delete failure
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from notes_api.exceptions import (
    DatabaseUnavailableError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from notes_api.services.note_service import NoteService


def _stored(title, content, timestamp, note_id):
    note = MagicMock()
    note.id = note_id
    note.title = title
    note.content = content
    note.created_at = timestamp
    note.updated_at = timestamp
    return note


class TestNoteServiceCreate:
    """Tests for create_note."""

    @pytest.mark.asyncio
    async def test_create_note_success(self, mock_repository, sample_note):
        """Valid input is stored and returned with both timestamps equal."""
        mock_repository.create.side_effect = lambda title, content, timestamp: _stored(
            title, content, timestamp, sample_note.id
        )
        service = NoteService(mock_repository)

        result = await service.create_note("Shopping", "Milk, eggs")

        assert result.id == sample_note.id
        assert result.title == "Shopping"
        assert result.content == "Milk, eggs"
        assert result.created_at == result.updated_at
        assert result.created_at.tzinfo is not None
        mock_repository.create.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "title,content,missing",
        [
            ("Shopping", None, ["content"]),
            (None, "Milk, eggs", ["title"]),
            (None, None, ["title", "content"]),
            ("", "Milk, eggs", ["title"]),
        ],
    )
    async def test_create_note_missing_fields(self, mock_repository, title, content, missing):
        """Absent or empty title/content is a ValidationError and nothing is stored."""
        service = NoteService(mock_repository)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_note(title, content)

        assert exc_info.value.message == "Title and content are required"
        assert exc_info.value.fields == missing
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_note_storage_failure(self, mock_repository):
        """Repository errors become InternalError carrying the driver message."""
        mock_repository.create.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.create_note("Shopping", "Milk, eggs")

        assert exc_info.value.message == "Error creating note"
        assert "disk full" in exc_info.value.error

    @pytest.mark.asyncio
    async def test_create_note_without_database(self, mock_repository):
        """A missing connection surfaces as a 500-class error for the operation."""
        mock_repository.create.side_effect = DatabaseUnavailableError()
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.create_note("Shopping", "Milk, eggs")

        assert exc_info.value.status_code == 500
        assert "DATABASE_URL" in exc_info.value.error


class TestNoteServiceList:
    """Tests for list_notes."""

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_repository):
        service = NoteService(mock_repository)

        assert await service.list_notes() == []

    @pytest.mark.asyncio
    async def test_list_notes_keeps_repository_order(self, mock_repository, sample_note):
        newer = _stored("Newer", "b", sample_note.created_at.replace(hour=13), "00000000-0000-4000-8000-000000000001")
        older = _stored("Older", "a", sample_note.created_at, "00000000-0000-4000-8000-000000000002")
        mock_repository.find_all.return_value = [newer, older]
        service = NoteService(mock_repository)

        result = await service.list_notes()

        assert [note.title for note in result] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_list_notes_failure(self, mock_repository):
        mock_repository.find_all.side_effect = RuntimeError("connection reset")
        service = NoteService(mock_repository)

        with pytest.raises(InternalError, match="Error retrieving notes"):
            await service.list_notes()


class TestNoteServiceGet:
    """Tests for get_note."""

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        service = NoteService(mock_repository)

        result = await service.get_note(str(sample_note.id))

        assert result.id == sample_note.id
        assert result.title == "Shopping"

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_repository):
        service = NoteService(mock_repository)

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_note("5f0c9a3e-2f7e-4a39-9a59-0c3c2f4d8b11")

        assert exc_info.value.message == "Note not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_get_note_malformed_id(self, mock_repository):
        """Ids the store cannot parse are reported as internal errors, not 400s."""
        mock_repository.find_by_id.side_effect = ValueError("badly formed hexadecimal UUID string")
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.get_note("not-a-uuid")

        assert exc_info.value.message == "Error retrieving note"
        assert exc_info.value.error == "badly formed hexadecimal UUID string"


class TestNoteServiceUpdate:
    """Tests for update_note partial-update semantics."""

    @pytest.mark.asyncio
    async def test_update_only_supplied_field(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        service = NoteService(mock_repository)

        result = await service.update_note(str(sample_note.id), {"title": "X"})

        assert result.title == "X"
        assert result.content == "Milk, eggs"
        assert result.updated_at > result.created_at
        mock_repository.save.assert_awaited_once_with(sample_note)

    @pytest.mark.asyncio
    async def test_update_with_no_fields_refreshes_timestamp(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        service = NoteService(mock_repository)

        result = await service.update_note(str(sample_note.id), {})

        assert result.title == "Shopping"
        assert result.content == "Milk, eggs"
        assert result.updated_at > result.created_at

    @pytest.mark.asyncio
    async def test_update_explicit_empty_string_is_applied(self, mock_repository, sample_note):
        """An explicitly supplied "" overwrites; an omitted field does not."""
        mock_repository.find_by_id.return_value = sample_note
        service = NoteService(mock_repository)

        result = await service.update_note(str(sample_note.id), {"content": ""})

        assert result.content == ""
        assert result.title == "Shopping"

    @pytest.mark.asyncio
    async def test_update_null_rejected(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        service = NoteService(mock_repository)

        with pytest.raises(ValidationError):
            await service.update_note(str(sample_note.id), {"title": None})

        mock_repository.find_by_id.assert_not_awaited()
        mock_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_repository):
        service = NoteService(mock_repository)

        with pytest.raises(NotFoundError):
            await service.update_note("5f0c9a3e-2f7e-4a39-9a59-0c3c2f4d8b11", {"title": "X"})

        mock_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_save_failure(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        mock_repository.save.side_effect = RuntimeError("write conflict")
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.update_note(str(sample_note.id), {"title": "X"})

        assert exc_info.value.message == "Error updating note"
        assert exc_info.value.error == "write conflict"


class TestNoteServiceDelete:
    """Tests for delete_note."""

    @pytest.mark.asyncio
    async def test_delete_returns_snapshot(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        service = NoteService(mock_repository)

        result = await service.delete_note(str(sample_note.id))

        assert result.id == sample_note.id
        assert result.title == "Shopping"
        assert result.content == "Milk, eggs"
        mock_repository.delete_by_id.assert_awaited_once_with(sample_note.id)

    @pytest.mark.asyncio
    async def test_delete_not_found(self, mock_repository):
        service = NoteService(mock_repository)

        with pytest.raises(NotFoundError):
            await service.delete_note("5f0c9a3e-2f7e-4a39-9a59-0c3c2f4d8b11")

        mock_repository.delete_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_failure(self, mock_repository, sample_note):
        mock_repository.find_by_id.return_value = sample_note
        mock_repository.delete_by_id.side_effect = RuntimeError("lock timeout")
        service = NoteService(mock_repository)

        with pytest.raises(InternalError, match="Error deleting note"):
            await service.delete_note(str(sample_note.id))
