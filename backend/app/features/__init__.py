"""
Feature modules for the running log.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models
- schemas.py - Pydantic schemas
- repository.py - Data access
- service.py - Business logic (optional)
"""
