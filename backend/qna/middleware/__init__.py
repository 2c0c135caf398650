# Middleware package init
"""
QnA Backend — Middleware Package
==================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and every exception
    handler can read the id from the ContextVar.
"""
