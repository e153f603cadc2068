"""Tests for database initialization."""

import sqlite3
from pathlib import Path

import pytest

from src.storage.database import get_connection, initialize_database


def _tables(db_path: Path) -> list[str]:
    conn = sqlite3.connect(str(db_path))
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
    tables = [row[0] for row in cursor.fetchall()]
    conn.close()
    return tables


def _columns(db_path: Path, table: str) -> set[str]:
    conn = sqlite3.connect(str(db_path))
    cursor = conn.execute(f"PRAGMA table_info({table})")
    columns = {row[1] for row in cursor.fetchall()}
    conn.close()
    return columns


class TestInitializeDatabase:
    def test_creates_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        tables = _tables(db_path)
        for table in ("books", "chapters", "paragraphs", "documents", "dictionary"):
            assert table in tables
        assert "settings" not in tables

    def test_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)
        initialize_database(db_path)  # Should not raise
        assert "chapters" in _tables(db_path)

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "test.db"
        initialize_database(db_path)
        assert db_path.exists()

    def test_chapters_table_schema(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)
        assert _columns(db_path, "chapters") == {"id", "book_id", "title", "chapter_number"}

    def test_dictionary_table_schema(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)
        assert _columns(db_path, "dictionary") == {"word", "definition", "root_word"}

    def test_chapter_number_unique_per_book(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)
        conn = get_connection(db_path)
        try:
            conn.execute("INSERT INTO books (id, title, slug) VALUES (1, 'Sözler', 'sozler')")
            conn.execute(
                "INSERT INTO chapters (book_id, title, chapter_number) VALUES (1, 'Birinci Söz', 1)"
            )
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO chapters (book_id, title, chapter_number) VALUES (1, 'Kopya', 1)"
                )
        finally:
            conn.close()


class TestGetConnection:
    def test_returns_connection_with_row_factory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        conn = get_connection(db_path)
        assert conn.row_factory == sqlite3.Row
        conn.close()

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        conn = get_connection(db_path)
        result = conn.execute("PRAGMA foreign_keys").fetchone()
        assert result[0] == 1
        conn.close()

    def test_title_key_function(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        conn = get_connection(db_path)
        row = conn.execute(
            "SELECT title_key('ALTINCI İMAN'), title_key('Altıncı iman'), "
            "lower('DÖRDÜNCÜ'), title_key(NULL)"
        ).fetchone()
        conn.close()
        assert row[0] == row[1] == "altinci iman"
        # Built-in lower() only folds ASCII
        assert row[2] != "dördüncü"
        assert row[3] is None
