# Modules package init
"""
API Scaffold — Route Modules
=============================

Each sub-package is one mounted module: `schemas.py` declares its shapes,
`routes.py` exports a `routes` list of Route descriptors. A module is served
once its routes path is listed in settings.route_modules.

Module Inventory:
    - health:  GET /api/v1/health
    - todos:   CRUD /api/v1/todos
    - users:   CRUD /api/v1/users
"""
