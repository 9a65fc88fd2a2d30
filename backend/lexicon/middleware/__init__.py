# Middleware package init
"""
Lexicon Backend: Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Logging] → [Language] → Router

    1. Request ID: correlation ID for logs and error envelopes, 429s included
    2. Rate Limit: rejects abusive /api traffic before logging and routing
    3. Logging: access line with status and duration
    4. Language: negotiated response language for the translator

Responses travel back through the same chain in reverse, which is how the
request ID, Content-Language and RateLimit-* headers reach the client.

Gates (identity and role checks) are not middleware: they are per-route
FastAPI dependencies, see `lexicon.gates`.
"""
