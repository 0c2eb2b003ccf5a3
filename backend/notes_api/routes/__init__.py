"""
Notes API: Routes Package
==========================

Route Inventory:
    - notes.py:   POST/GET /notes, GET/PUT/PATCH/DELETE /notes/{id}
    - health.py:  GET /health

Routes stay thin: read the request, call the service, wrap the result.
"""
