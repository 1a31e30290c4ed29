"""Etymolog exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class EtymologError(Exception):
    """Base exception for all Etymolog failures."""


class EtymologConfigError(EtymologError):
    """Raised for invalid runtime configuration."""


class EtymologStoreError(EtymologError):
    """Raised for row store and settings store failures."""


class FormatError(EtymologError):
    """Raised for structural corruption of a frame or image container."""


class IntegrityError(EtymologError):
    """Raised when a decoded payload does not match its checksum."""


class ValidationError(EtymologError):
    """Raised when an export document fails schema checks."""


class DecodeError(EtymologError):
    """Raised when the compression codec or text decoder rejects input."""
