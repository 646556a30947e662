# Middleware package init
"""
Contacts API — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first so every later log line can carry it
    2. Logging measures duration and logs the final status
    3. CORS is FastAPI's CORSMiddleware (handles preflight and exposes the
       X-Page-* headers to browsers)
"""
