"""
API Scaffold — Application Package Initializer
===============================================

What: Marks the `apiscaffold` directory as a Python package.
Why:  Enables module imports like `from apiscaffold.config import settings`.
Who:  Used by uvicorn, the `apiscaffold` CLI, and pytest.

Architecture Note:
    The scaffold is split into a small core and the modules it serves:

    ┌─────────────────────────────────────┐
    │   Composition root (main.py)        │  ← middleware, handlers, docs
    ├─────────────────────────────────────┤
    │   Core: discovery → dispatcher      │  ← live routing + validation
    │         discovery → openapi         │  ← documentation document
    ├─────────────────────────────────────┤
    │   Modules (health, todos, users)    │  ← route descriptors + schemas
    ├─────────────────────────────────────┤
    │   Storage (Store interface)         │  ← injected per module
    └─────────────────────────────────────┘

    The dispatcher and the documentation generator both read the same
    route descriptors but never call each other.
"""

__version__ = "1.0.0"
