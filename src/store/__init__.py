"""Destination storage layer.

This module persists lexicon rows in SQLite and settings as JSON.
It exposes the narrow store interfaces the import orchestrator drives.
"""
