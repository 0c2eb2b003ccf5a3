"""
Notes API: Services Layer
==========================

What:  Operations sitting between routes (HTTP) and repositories (storage).
How:   Services receive their repository at construction and raise typed
       exceptions; routes turn results into envelopes.

Service Inventory:
    - NoteService: create, list, get, update and delete notes
"""
