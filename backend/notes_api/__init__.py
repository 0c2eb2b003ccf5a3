"""
Notes API: Application Package
================================

What: A small REST service for creating, listing, reading, updating and
      deleting text notes.
Who:  Imported by uvicorn (``notes_api.main:app``), the ``notes-api`` console
      script, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP status codes, envelopes
    ├─────────────────────────────────────┤
    │         Services (Operations)       │  ← presence checks, error mapping
    ├─────────────────────────────────────┤
    │      Repositories (Persistence)     │  ← one session per call
    ├─────────────────────────────────────┤
    │    Database (Connection Manager)    │  ← engine lifecycle, status
    └─────────────────────────────────────┘

    Each layer receives the one below it at construction time; the
    application lifespan in main.py wires them together.
"""

__version__ = "1.0.0"
