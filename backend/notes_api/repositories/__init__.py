"""Persistence layer: repositories built on a Database connection manager."""

from notes_api.repositories.note_repository import NoteRepository

__all__ = ["NoteRepository"]
