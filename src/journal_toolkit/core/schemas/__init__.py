"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_template,
    validate_paper,
    ValidationError,
)

__all__ = [
    "validate_template",
    "validate_paper",
    "ValidationError",
]
