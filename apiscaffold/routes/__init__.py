# Routes package init
"""
API Scaffold — Framework Routes
================================

Routes the scaffold serves itself, as opposed to the route modules under
apiscaffold/modules:

    - docs.py:  GET {prefix}/docs/api.json, /swagger, /redoc, /scalar
"""
