"""
Notes API: Note Service
========================

What:  The five note operations behind the HTTP routes.
How:   Each method checks its input, calls the NoteRepository, and returns a
       NoteData (or a list of them). Failures leave as typed exceptions:
       ValidationError (400), NotFoundError (404), InternalError (500).
Who:   Called by routes/notes.py; constructed in the app lifespan with the
       process's NoteRepository.

Error mapping:
    Missing title/content on create       → ValidationError
    Explicit null on update               → ValidationError
    Unknown id on get/update/delete       → NotFoundError
    Anything raised by the repository     → InternalError (message names the
                                            operation, error carries the
                                            underlying text). This includes
                                            malformed ids.
"""

import logging
from typing import Dict, List, Optional

from notes_api.exceptions import (
    InternalError,
    NotesAPIError,
    NotFoundError,
    ValidationError,
)
from notes_api.models.note import Note, utc_now
from notes_api.repositories.note_repository import NoteRepository
from notes_api.schemas.note import NoteData

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content")


def _error_detail(exc: Exception) -> str:
    if isinstance(exc, NotesAPIError):
        return exc.error
    return str(exc) or type(exc).__name__


def _to_data(note: Note) -> NoteData:
    return NoteData(
        id=note.id,
        title=note.title,
        content=note.content,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


class NoteService:
    """
    Note operations on top of a repository.

    Stateless apart from the repository reference: every call performs a
    fresh lookup, nothing is cached between requests.
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository

    async def create_note(self, title: Optional[str], content: Optional[str]) -> NoteData:
        """
        Persist a new note.

        Raises:
            ValidationError: title or content is absent or empty.
            InternalError: The repository failed.
        """
        missing = [name for name, value in (("title", title), ("content", content)) if not value]
        if missing:
            raise ValidationError(message="Title and content are required", fields=missing)

        try:
            note = await self.repository.create(title=title, content=content, timestamp=utc_now())
        except Exception as e:
            logger.error("Error creating note: %s", _error_detail(e), exc_info=True)
            raise InternalError(message="Error creating note", error=_error_detail(e))

        logger.info("Created note with ID: %s", note.id)
        return _to_data(note)

    async def list_notes(self) -> List[NoteData]:
        """All notes, newest first. An empty store gives an empty list."""
        try:
            notes = await self.repository.find_all()
        except Exception as e:
            logger.error("Error retrieving notes: %s", _error_detail(e), exc_info=True)
            raise InternalError(message="Error retrieving notes", error=_error_detail(e))

        logger.info("Retrieved %d notes", len(notes))
        return [_to_data(note) for note in notes]

    async def get_note(self, note_id: str) -> NoteData:
        """
        One note by id.

        Raises:
            NotFoundError: No note has this id.
            InternalError: Lookup failed, including ids the store cannot parse.
        """
        note = await self._find(note_id, operation="retrieving")
        logger.info("Retrieved note with ID: %s", note_id)
        return _to_data(note)

    async def update_note(self, note_id: str, changes: Dict[str, Optional[str]]) -> NoteData:
        """
        Apply the supplied fields to an existing note.

        ``changes`` holds only the keys the client sent. Keys left out keep
        their stored value; an explicit empty string is written as-is.
        ``updated_at`` is refreshed on every successful call.

        Raises:
            ValidationError: A supplied field is null.
            NotFoundError: No note has this id.
            InternalError: Lookup or save failed.
        """
        nulls = [name for name in UPDATABLE_FIELDS if name in changes and changes[name] is None]
        if nulls:
            raise ValidationError(
                message="Title and content cannot be null",
                error="Null value for field(s): " + ", ".join(nulls),
                context={"fields": nulls},
            )

        note = await self._find(note_id, operation="updating", log_suffix=" for update")

        for name in UPDATABLE_FIELDS:
            if name in changes:
                setattr(note, name, changes[name])
        note.updated_at = utc_now()

        try:
            note = await self.repository.save(note)
        except Exception as e:
            logger.error("Error updating note %s: %s", note_id, _error_detail(e), exc_info=True)
            raise InternalError(message="Error updating note", error=_error_detail(e))

        logger.info("Updated note with ID: %s", note_id)
        return _to_data(note)

    async def delete_note(self, note_id: str) -> NoteData:
        """
        Delete a note and return what it held just before removal.

        Raises:
            NotFoundError: No note has this id.
            InternalError: Lookup or delete failed.
        """
        note = await self._find(note_id, operation="deleting", log_suffix=" for deletion")
        snapshot = _to_data(note)

        try:
            await self.repository.delete_by_id(note.id)
        except Exception as e:
            logger.error("Error deleting note %s: %s", note_id, _error_detail(e), exc_info=True)
            raise InternalError(message="Error deleting note", error=_error_detail(e))

        logger.info("Deleted note with ID: %s", note_id)
        return snapshot

    async def _find(self, note_id: str, operation: str, log_suffix: str = "") -> Note:
        try:
            note = await self.repository.find_by_id(note_id)
        except Exception as e:
            logger.error("Error %s note %s: %s", operation, note_id, _error_detail(e))
            raise InternalError(message=f"Error {operation} note", error=_error_detail(e))

        if note is None:
            logger.info("Note with ID %s not found%s", note_id, log_suffix)
            raise NotFoundError(resource="Note", resource_id=str(note_id))
        return note
