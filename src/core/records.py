"""Typed lexicon row models and collection ordering.

This module defines one frozen row type per exported collection so every
row of a collection carries the same column set by construction. It also
owns the foreign-key-safe import order and the auto-identifier subset.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from functools import lru_cache
from typing import Any, Mapping, Union, get_args, get_type_hints

from core.errors import ValidationError


@dataclass(frozen=True)
class GlyphRow:
    """Atomic SVG symbol, the smallest drawable unit."""

    id: int
    name: str
    svg_data: str
    category: str | None
    notes: str | None
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class GraphemeRow:
    """Written character composed of one or more glyphs."""

    id: int
    name: str
    category: str | None
    notes: str | None
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class GraphemeGlyphRow:
    """Positioned glyph inside a grapheme, with optional SVG transform."""

    id: int
    grapheme_id: int
    glyph_id: int
    position: int
    transform: str | None


@dataclass(frozen=True)
class PhonemeRow:
    """Pronunciation attached to a grapheme; flags are stored as 0/1."""

    id: int
    grapheme_id: int
    phoneme: str
    use_in_auto_spelling: int
    context: str | None


@dataclass(frozen=True)
class LexiconRow:
    """Dictionary entry of the conlang."""

    id: int
    lemma: str
    pronunciation: str | None
    is_native: int
    auto_spell: int
    meaning: str | None
    part_of_speech: str | None
    notes: str | None
    glyph_order: str
    needs_attention: int
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class LexiconSpellingRow:
    """Grapheme at one position of a lexicon entry spelling."""

    id: int
    lexicon_id: int
    grapheme_id: int
    position: int


@dataclass(frozen=True)
class LexiconAncestryRow:
    """Direct derivation link between two lexicon entries."""

    id: int
    lexicon_id: int
    ancestor_id: int
    position: int
    ancestry_type: str


@dataclass(frozen=True)
class LexiconAncestryClosureRow:
    """Transitive ancestry pair; depth 0 is the entry itself."""

    ancestor_id: int
    descendant_id: int
    depth: int


LexiconRecord = Union[
    GlyphRow,
    GraphemeRow,
    GraphemeGlyphRow,
    PhonemeRow,
    LexiconRow,
    LexiconSpellingRow,
    LexiconAncestryRow,
    LexiconAncestryClosureRow,
]

# Parents precede children so foreign keys resolve during bulk insert.
COLLECTION_ROW_TYPES: dict[str, type] = {
    "glyphs": GlyphRow,
    "graphemes": GraphemeRow,
    "grapheme_glyphs": GraphemeGlyphRow,
    "phonemes": PhonemeRow,
    "lexicon": LexiconRow,
    "lexicon_spelling": LexiconSpellingRow,
    "lexicon_ancestry": LexiconAncestryRow,
    "lexicon_ancestry_closure": LexiconAncestryClosureRow,
}
IMPORT_ORDER: tuple[str, ...] = tuple(COLLECTION_ROW_TYPES)
AUTO_ID_COLLECTIONS: frozenset[str] = frozenset(
    name for name in IMPORT_ORDER if name != "lexicon_ancestry_closure"
)


@dataclass(frozen=True)
class ColumnSpec:
    """Declared column name, Python value type, and nullability."""

    name: str
    value_type: type
    nullable: bool


@lru_cache(maxsize=None)
def column_specs(collection: str) -> tuple[ColumnSpec, ...]:
    """Return ordered column specs for a collection row type.

    Args:
        collection: Collection name from the import order.

    Returns:
        Column specs in declaration order.
    """
    row_type = COLLECTION_ROW_TYPES[collection]
    hints = get_type_hints(row_type)
    specs = []
    for item in fields(row_type):
        hint = hints[item.name]
        arguments = get_args(hint)
        nullable = type(None) in arguments
        value_type = next((arg for arg in arguments if arg is not type(None)), hint)
        specs.append(ColumnSpec(name=item.name, value_type=value_type, nullable=nullable))
    return tuple(specs)


def column_names(collection: str) -> tuple[str, ...]:
    """Return the insert column list for a collection."""
    return tuple(spec.name for spec in column_specs(collection))


def record_values(record: LexiconRecord) -> tuple[Any, ...]:
    """Return row values in column order."""
    return astuple(record)


def record_to_payload(record: LexiconRecord) -> dict[str, Any]:
    """Serialize a typed row into a JSON-safe mapping."""
    return {item.name: getattr(record, item.name) for item in fields(record)}


def record_from_payload(collection: str, payload: Any, index: int) -> LexiconRecord:
    """Convert one raw row mapping into the collection's typed row.

    Args:
        collection: Collection name.
        payload: Raw row value from a parsed document or a store query.
        index: Zero-based row position, used in error messages.

    Returns:
        Typed row instance.

    Raises:
        ValidationError: If the row is not a mapping, misses a required
            column, carries an unknown column, or holds a mistyped value.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(f"collection {collection} row {index}: expected an object")
    specs = column_specs(collection)
    known = {spec.name for spec in specs}
    unknown = sorted(str(key) for key in payload if key not in known)
    if unknown:
        raise ValidationError(
            f"collection {collection} row {index}: unexpected column {unknown[0]}"
        )
    values = {spec.name: _column_value(collection, index, spec, payload) for spec in specs}
    return COLLECTION_ROW_TYPES[collection](**values)


def _column_value(
    collection: str,
    index: int,
    spec: ColumnSpec,
    payload: Mapping[str, Any],
) -> Any:
    """Read and type-check one column value from a raw row."""
    if spec.name not in payload:
        if spec.nullable:
            return None
        raise ValidationError(f"collection {collection} row {index}: missing column {spec.name}")
    value = payload[spec.name]
    if value is None:
        if spec.nullable:
            return None
        raise ValidationError(f"collection {collection} row {index}: column {spec.name} is null")
    # bool is an int subclass; flags travel as 0/1 integers.
    if isinstance(value, bool) or not isinstance(value, spec.value_type):
        raise ValidationError(
            f"collection {collection} row {index}: column {spec.name} "
            f"expected {spec.value_type.__name__}, got {type(value).__name__}"
        )
    return value
