# Schemas package init
"""
API Scaffold — Shared Schemas
==============================

Module-specific request/response models live next to their routes under
apiscaffold/modules/<name>/schemas.py; only cross-module models live here.
"""
