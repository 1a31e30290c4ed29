"""Public SDK surface for Etymolog.

This module provides a stable import path for export/import users.
It re-exports the client, the pipeline service, and the typed models.
"""

from __future__ import annotations

from core.config import EtymologConfig
from core.errors import (
    DecodeError,
    EtymologError,
    FormatError,
    IntegrityError,
    ValidationError,
)
from core.progress import CallbackProgressSink, LoggingProgressSink, ProgressSink
from core.types import ArtifactSummary, Envelope
from transfer.client import EtymologClient
from transfer.service import TransferService, inspect_artifact

__all__ = [
    "ArtifactSummary",
    "CallbackProgressSink",
    "DecodeError",
    "Envelope",
    "EtymologClient",
    "EtymologConfig",
    "EtymologError",
    "FormatError",
    "IntegrityError",
    "LoggingProgressSink",
    "ProgressSink",
    "TransferService",
    "ValidationError",
    "inspect_artifact",
]
