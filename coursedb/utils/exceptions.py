# coursedb/utils/exceptions.py
"""
Central place for all coursedb exceptions.
Every error reaching a caller of the migration, seed or query layer is one of these.
"""
from __future__ import annotations

class CourseDBError(Exception):
    """Base exception for all coursedb errors. Never raised directly."""
    exit_code = 1
    message = "An unexpected database error occurred"

    def __init__(self, message: str | None = None, **payload):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.payload = payload

class UniqueConstraintViolation(CourseDBError):
    message = "A row with the same unique value already exists"

class ReferentialIntegrityViolation(CourseDBError):
    message = "Foreign key constraint failed"

class ValidationError(CourseDBError):
    message = "Invalid input"

class NotFoundError(CourseDBError):
    message = "The requested row was not found"

class SeedError(CourseDBError):
    exit_code = 2
    message = "Seed data could not be loaded"
