"""
Notes API: Notes Route Handlers
================================

What:  The five REST endpoints on /notes.
How:   Each handler pulls the NoteService off the application state, calls
       one operation, and wraps the result in the success envelope. Errors
       raised by the service are turned into failure envelopes by the
       handlers registered in main.py.

Route Inventory:
    POST   /notes        → 201 created note
    GET    /notes        → 200 all notes (newest first) + count
    GET    /notes/{id}   → 200 one note
    PUT    /notes/{id}   → 200 updated note (partial, same as PATCH)
    PATCH  /notes/{id}   → 200 updated note
    DELETE /notes/{id}   → 200 snapshot of the deleted note
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, status

from notes_api.schemas.note import (
    ErrorEnvelope,
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteUpdate,
)
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorEnvelope}}
_SERVER_ERROR = {500: {"description": "Storage error", "model": ErrorEnvelope}}


def get_note_service(request: Request) -> NoteService:
    """Dependency: the NoteService built by the application lifespan."""
    return request.app.state.note_service


@router.post(
    "",
    response_model=NoteEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Missing title or content", "model": ErrorEnvelope}, **_SERVER_ERROR},
    summary="Create a note",
)
async def create_note(
    body: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.create_note(title=body.title, content=body.content)
    return NoteEnvelope(success=True, message="Note created successfully", data=note)


@router.get(
    "",
    response_model=NoteListEnvelope,
    response_model_exclude_none=True,
    responses=_SERVER_ERROR,
    summary="List all notes, newest first",
)
async def list_notes(service: NoteService = Depends(get_note_service)) -> NoteListEnvelope:
    notes = await service.list_notes()
    return NoteListEnvelope(success=True, count=len(notes), data=notes)


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    response_model_exclude_none=True,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    # note_id stays a plain string: ids the store cannot parse are reported
    # by the service as a 500, not by FastAPI as a 422
    note = await service.get_note(note_id)
    return NoteEnvelope(success=True, data=note)


@router.api_route(
    "/{note_id}",
    methods=["PUT", "PATCH"],
    response_model=NoteEnvelope,
    response_model_exclude_none=True,
    responses={400: {"description": "Null field", "model": ErrorEnvelope}, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a note (only the supplied fields)",
)
async def update_note(
    note_id: str,
    body: Optional[NoteUpdate] = Body(default=None),
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    # A bodiless update behaves like {}: nothing changes except updatedAt
    changes = body.supplied_fields() if body is not None else {}
    note = await service.update_note(note_id, changes)
    return NoteEnvelope(success=True, message="Note updated successfully", data=note)


@router.delete(
    "/{note_id}",
    response_model=NoteEnvelope,
    response_model_exclude_none=True,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteEnvelope:
    note = await service.delete_note(note_id)
    return NoteEnvelope(success=True, message="Note deleted successfully", data=note)
