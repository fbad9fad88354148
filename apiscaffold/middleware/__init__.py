# Middleware package init
"""
API Scaffold — Middleware Package
==================================

What:  Cross-cutting concerns applied to every request, each an explicit
       before/after hook around the rest of the chain.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → [GZip]
            → [CORS] → [Error Handling] → Router → Handler

    Why this order:
    1. Request ID first: every later log line and error body can use it
    2. Logging: sees the final status, including translated errors
    3. Error Handling innermost: unhandled exceptions become JSON responses
       that still pass through CORS, headers and logging on the way out
"""
