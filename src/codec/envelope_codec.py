"""Export envelope building, serialization, and validation.

The envelope is the JSON document written for document exports and the
text payload framed inside image exports. Wire keys are ``magic``,
``version``, ``exportedAt``, ``conlangName``, ``settings``, and ``tables``.
Validation checks magic and version before any other field is trusted and
stops at the first failure.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from core.constants import EXPORT_MAGIC, EXPORT_SCHEMA_VERSION
from core.errors import ValidationError
from core.records import IMPORT_ORDER, LexiconRecord, record_from_payload, record_to_payload
from core.types import Envelope

REQUIRED_COLLECTIONS: tuple[str, ...] = IMPORT_ORDER


def build_envelope(
    collections: Mapping[str, Sequence[LexiconRecord]],
    settings: Mapping[str, Any],
    display_name: str,
) -> Envelope:
    """Stamp magic, schema version, and the current time onto collections.

    Args:
        collections: Typed rows keyed by collection name.
        settings: Settings snapshot to carry.
        display_name: Human-readable conlang name.

    Returns:
        Envelope ready for serialization.
    """
    return Envelope(
        magic=EXPORT_MAGIC,
        schema_version=EXPORT_SCHEMA_VERSION,
        exported_at=datetime.now(timezone.utc),
        display_name=display_name,
        settings=dict(settings),
        collections={name: tuple(collections.get(name, ())) for name in REQUIRED_COLLECTIONS},
    )


def envelope_to_payload(envelope: Envelope) -> dict[str, Any]:
    """Convert an envelope into its JSON-safe wire mapping."""
    return {
        "magic": envelope.magic,
        "version": envelope.schema_version,
        "exportedAt": _format_timestamp(envelope.exported_at),
        "conlangName": envelope.display_name,
        "settings": dict(envelope.settings),
        "tables": {
            name: [record_to_payload(record) for record in rows]
            for name, rows in envelope.collections.items()
        },
    }


def serialize(envelope: Envelope) -> str:
    """Serialize an envelope to indented, human-readable JSON."""
    return json.dumps(envelope_to_payload(envelope), indent=2, ensure_ascii=False)


def parse(text: str) -> dict[str, Any]:
    """Parse document text into a raw mapping.

    Args:
        text: Document text.

    Returns:
        Raw top-level mapping.

    Raises:
        ValidationError: If the text is not JSON or not a JSON object.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as error:
        raise ValidationError(f"Invalid export: invalid syntax ({error.msg})") from error
    if not isinstance(raw, dict):
        raise ValidationError("Invalid export: invalid syntax (expected a JSON object)")
    return raw


def validate(raw: Mapping[str, Any]) -> Envelope:
    """Validate a raw mapping and build a typed envelope.

    Checks run in order and the first failure is raised: magic, version,
    collections object, each required collection, settings object, then
    the optional timestamp and every row.

    Args:
        raw: Parsed document mapping.

    Returns:
        Validated envelope.

    Raises:
        ValidationError: If any check fails.
    """
    if raw.get("magic") != EXPORT_MAGIC:
        raise ValidationError("Invalid export: not a recognized export")
    version = raw.get("version")
    if isinstance(version, bool) or version != EXPORT_SCHEMA_VERSION:
        raise ValidationError(f"Invalid export: unsupported version: {version}")
    tables = raw.get("tables")
    if not isinstance(tables, dict):
        raise ValidationError("Invalid export: missing collections")
    for name in REQUIRED_COLLECTIONS:
        if name not in tables:
            raise ValidationError(f"Invalid export: missing collection: {name}")
        if not isinstance(tables[name], list):
            raise ValidationError(f"Invalid export: collection {name} is not a list")
    settings = raw.get("settings")
    if not isinstance(settings, dict):
        raise ValidationError("Invalid export: missing settings")
    return Envelope(
        magic=EXPORT_MAGIC,
        schema_version=EXPORT_SCHEMA_VERSION,
        exported_at=_parse_timestamp(raw.get("exportedAt")),
        display_name=_display_name(raw, settings),
        settings=settings,
        collections={
            name: tuple(
                record_from_payload(name, row, index) for index, row in enumerate(tables[name])
            )
            for name in REQUIRED_COLLECTIONS
        },
    )


def parse_and_validate(text: str) -> Envelope:
    """Parse and validate document text in one step."""
    return validate(parse(text))


def _display_name(raw: Mapping[str, Any], settings: Mapping[str, Any]) -> str:
    """Resolve the conlang name from the envelope or its settings."""
    for candidate in (raw.get("conlangName"), settings.get("conlangName")):
        if isinstance(candidate, str):
            return candidate
    return ""


def _format_timestamp(value: datetime | None) -> str | None:
    """Render a UTC timestamp in ISO 8601 with a trailing Z."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an optional ISO 8601 export timestamp.

    Returns:
        Timezone-aware timestamp, or None when the field is absent or null.

    Raises:
        ValidationError: If a value is present but not an ISO 8601 string.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Invalid export: invalid exportedAt timestamp '{value}'")
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as error:
        raise ValidationError(f"Invalid export: invalid exportedAt timestamp '{value}'") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
