"""
Notes API: Middleware Package
==============================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log record
    emitted by the handler share the same correlation ID.
"""
