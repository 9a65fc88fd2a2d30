# Routes package init
"""
Lexicon Backend: API Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - translations.py:        GET  /api/translations/...           (catalog reads)
    - admin_translations.py:  PUT/POST/DELETE /api/admin/translations/...
    - health.py:              GET  /api/health                     (service health)

Routes stay thin: gates run as dependencies, business rules live in
services, errors are raised and turned into envelopes by the global handlers.
"""
