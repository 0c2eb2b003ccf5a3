"""
Notes API: Pydantic Request/Response Schemas
=============================================

What:  The API contract: request bodies, the note payload, and the uniform
       response envelope every endpoint returns.
How:   FastAPI validates request bodies against these models and serializes
       responses through them. JSON keys are camelCase (``createdAt``),
       Python attributes snake_case.

Envelope:
    {
        "success": true,
        "message": "Note created successfully",   (optional)
        "count": 3,                               (list endpoint only)
        "data": {...} | [...],                    (success only)
        "error": "..."                            (failure only)
    }
    Keys whose value is None are left out of the JSON.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /notes.

    Both fields are typed Optional so that a missing field reaches the
    service's presence check (400 envelope) rather than FastAPI's 422.
    """
    title: Optional[str] = Field(default=None, description="Note title (required)")
    content: Optional[str] = Field(default=None, description="Note body (required)")


class NoteUpdate(BaseModel):
    """
    Body of PUT/PATCH /notes/{id}.

    Only keys present in the JSON body are applied. ``model_fields_set``
    tells an omitted key apart from one explicitly sent (including ``""``).
    """
    title: Optional[str] = Field(default=None, description="New title, if changing it")
    content: Optional[str] = Field(default=None, description="New content, if changing it")

    def supplied_fields(self) -> dict:
        """The fields the client actually sent, with their values."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteData(_CamelModel):
    """Full representation of one note, as returned by every endpoint."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")


class Envelope(BaseModel):
    """Uniform response wrapper shared by successes and failures."""
    success: bool = Field(description="Whether the operation succeeded")
    message: Optional[str] = Field(default=None, description="Human-readable outcome")
    count: Optional[int] = Field(default=None, description="Number of items in data (list only)")
    error: Optional[str] = Field(default=None, description="Underlying error detail")


class NoteEnvelope(Envelope):
    data: Optional[NoteData] = None


class NoteListEnvelope(Envelope):
    data: List[NoteData] = Field(default_factory=list)
    count: int = Field(default=0, description="Number of notes returned")


class ErrorEnvelope(BaseModel):
    """What every failed request returns."""
    success: bool = False
    message: str = Field(description="What failed, e.g. 'Note not found'")
    error: str = Field(description="Underlying error detail")


class HealthResponse(BaseModel):
    """Service and database status for GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the service started")
