"""SQLite schema for the lexicon database.

Statements are listed in import order so creating them front to back and
dropping them back to front never dangles a foreign key.
"""

from __future__ import annotations

from core.records import IMPORT_ORDER

TABLE_STATEMENTS: dict[str, str] = {
    "glyphs": """
        CREATE TABLE IF NOT EXISTS glyphs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            svg_data TEXT NOT NULL,
            category TEXT,
            notes TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "graphemes": """
        CREATE TABLE IF NOT EXISTS graphemes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category TEXT,
            notes TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "grapheme_glyphs": """
        CREATE TABLE IF NOT EXISTS grapheme_glyphs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            grapheme_id INTEGER NOT NULL REFERENCES graphemes(id) ON DELETE CASCADE,
            glyph_id INTEGER NOT NULL REFERENCES glyphs(id) ON DELETE RESTRICT,
            position INTEGER NOT NULL,
            transform TEXT
        )
    """,
    "phonemes": """
        CREATE TABLE IF NOT EXISTS phonemes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            grapheme_id INTEGER NOT NULL REFERENCES graphemes(id) ON DELETE CASCADE,
            phoneme TEXT NOT NULL,
            use_in_auto_spelling INTEGER NOT NULL DEFAULT 0,
            context TEXT
        )
    """,
    "lexicon": """
        CREATE TABLE IF NOT EXISTS lexicon (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            lemma TEXT NOT NULL,
            pronunciation TEXT,
            is_native INTEGER NOT NULL DEFAULT 1,
            auto_spell INTEGER NOT NULL DEFAULT 1,
            meaning TEXT,
            part_of_speech TEXT,
            notes TEXT,
            glyph_order TEXT NOT NULL DEFAULT '[]',
            needs_attention INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "lexicon_spelling": """
        CREATE TABLE IF NOT EXISTS lexicon_spelling (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            lexicon_id INTEGER NOT NULL REFERENCES lexicon(id) ON DELETE CASCADE,
            grapheme_id INTEGER NOT NULL REFERENCES graphemes(id) ON DELETE RESTRICT,
            position INTEGER NOT NULL
        )
    """,
    "lexicon_ancestry": """
        CREATE TABLE IF NOT EXISTS lexicon_ancestry (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            lexicon_id INTEGER NOT NULL REFERENCES lexicon(id) ON DELETE CASCADE,
            ancestor_id INTEGER NOT NULL REFERENCES lexicon(id) ON DELETE CASCADE,
            position INTEGER NOT NULL DEFAULT 0,
            ancestry_type TEXT NOT NULL DEFAULT 'derived'
        )
    """,
    "lexicon_ancestry_closure": """
        CREATE TABLE IF NOT EXISTS lexicon_ancestry_closure (
            ancestor_id INTEGER NOT NULL REFERENCES lexicon(id) ON DELETE CASCADE,
            descendant_id INTEGER NOT NULL REFERENCES lexicon(id) ON DELETE CASCADE,
            depth INTEGER NOT NULL,
            PRIMARY KEY (ancestor_id, descendant_id)
        )
    """,
}

INDEX_STATEMENTS: tuple[str, ...] = (
    "CREATE INDEX IF NOT EXISTS idx_grapheme_glyphs_grapheme ON grapheme_glyphs(grapheme_id)",
    "CREATE INDEX IF NOT EXISTS idx_phonemes_grapheme ON phonemes(grapheme_id)",
    "CREATE INDEX IF NOT EXISTS idx_lexicon_spelling_lexicon ON lexicon_spelling(lexicon_id)",
    "CREATE INDEX IF NOT EXISTS idx_lexicon_ancestry_lexicon ON lexicon_ancestry(lexicon_id)",
    "CREATE INDEX IF NOT EXISTS idx_closure_descendant ON lexicon_ancestry_closure(descendant_id)",
)


def create_statements() -> tuple[str, ...]:
    """Return table then index DDL in dependency order."""
    return tuple(TABLE_STATEMENTS[name] for name in IMPORT_ORDER) + INDEX_STATEMENTS


def drop_statements() -> tuple[str, ...]:
    """Return DROP TABLE statements children first."""
    return tuple(f"DROP TABLE IF EXISTS {name}" for name in reversed(IMPORT_ORDER))
