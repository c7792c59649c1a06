# Middleware package init
"""
PackTrack Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Responses travel back through the same chain in reverse, picking up
    the X-Request-ID header and the access-log line.
"""
