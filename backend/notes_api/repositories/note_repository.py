"""
Notes API: Note Repository
===========================

What:  The five storage operations on Note records.
How:   Every method opens its own session from the injected Database, so each
       call is one commit (or one rollback). Returned Note objects are
       detached but fully loaded.

Query plans:
    find_all      SELECT ... ORDER BY created_at DESC
    find_by_id    SELECT ... WHERE id = :uuid       (primary key lookup)
    delete_by_id  DELETE FROM notes WHERE id = :uuid

No locking or version checks: two saves of the same note both succeed and
the later commit wins.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy import delete, desc, select

from notes_api.database import Database
from notes_api.models.note import Note

logger = logging.getLogger(__name__)


def parse_note_id(note_id: Union[str, uuid.UUID]) -> uuid.UUID:
    """
    Convert a path identifier to a UUID.

    Raises:
        ValueError: The value is not a well-formed UUID.
    """
    if isinstance(note_id, uuid.UUID):
        return note_id
    return uuid.UUID(str(note_id))


class NoteRepository:
    """Stores and retrieves Note records through a Database."""

    def __init__(self, database: Database):
        self._database = database

    async def create(self, title: str, content: str, timestamp: datetime) -> Note:
        """Insert a new note whose created_at and updated_at both equal ``timestamp``."""
        note = Note(
            title=title,
            content=content,
            created_at=timestamp,
            updated_at=timestamp,
        )
        async with self._database.session() as session:
            session.add(note)
            await session.flush()  # assigns the UUID before commit
        return note

    async def find_all(self) -> List[Note]:
        """All notes, most recently created first."""
        async with self._database.session() as session:
            result = await session.execute(
                select(Note).order_by(desc(Note.created_at))
            )
            return list(result.scalars().all())

    async def find_by_id(self, note_id: Union[str, uuid.UUID]) -> Optional[Note]:
        """
        Look up one note.

        Returns None when no note has this id.

        Raises:
            ValueError: ``note_id`` is not a valid UUID.
        """
        key = parse_note_id(note_id)
        async with self._database.session() as session:
            return await session.get(Note, key)

    async def save(self, note: Note) -> Note:
        """
        Write back a note previously returned by this repository.

        Only attributes changed since it was loaded are updated. If the row
        was deleted in the meantime the flush fails (StaleDataError).
        """
        async with self._database.session() as session:
            session.add(note)
        return note

    async def delete_by_id(self, note_id: Union[str, uuid.UUID]) -> bool:
        """Remove a note permanently; True when a row was deleted."""
        key = parse_note_id(note_id)
        async with self._database.session() as session:
            result = await session.execute(delete(Note).where(Note.id == key))
            deleted = result.rowcount or 0
        logger.debug("Deleted %d row(s) for note %s", deleted, key)
        return deleted > 0
