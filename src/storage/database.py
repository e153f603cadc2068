"""SQLite database initialization and connection management."""

import sqlite3
from pathlib import Path

from src.text.normalizer import title_key


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Registers ``title_key`` as a SQL function so title matching can be
    case-insensitive for Turkish letters, which SQLite's ``lower`` ignores.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.create_function("title_key", 1, _sql_title_key, deterministic=True)
    return conn


def _sql_title_key(value: str | None) -> str | None:
    if value is None:
        return None
    return title_key(value)


def initialize_database(db_path: str | Path) -> None:
    """Create the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY,
                title TEXT NOT NULL,
                slug TEXT NOT NULL UNIQUE
            );

            CREATE TABLE IF NOT EXISTS chapters (
                id INTEGER PRIMARY KEY,
                book_id INTEGER NOT NULL REFERENCES books(id),
                title TEXT NOT NULL,
                chapter_number INTEGER NOT NULL,
                UNIQUE (book_id, chapter_number)
            );

            CREATE TABLE IF NOT EXISTS paragraphs (
                id INTEGER PRIMARY KEY,
                chapter_id INTEGER NOT NULL REFERENCES chapters(id),
                content TEXT NOT NULL,
                sequence_number INTEGER NOT NULL,
                UNIQUE (chapter_id, sequence_number)
            );

            CREATE TABLE IF NOT EXISTS documents (
                id INTEGER PRIMARY KEY,
                chapter_id INTEGER REFERENCES chapters(id),
                content TEXT NOT NULL,
                embedding TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS dictionary (
                word TEXT PRIMARY KEY,
                definition TEXT NOT NULL,
                root_word TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_chapters_number
                ON chapters (chapter_number);
            CREATE INDEX IF NOT EXISTS idx_dictionary_root_word
                ON dictionary (root_word);
            """
        )
        conn.commit()
    finally:
        conn.close()
