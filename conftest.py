from __future__ import annotations

import io
import sqlite3
from pathlib import Path
from typing import Callable, Iterable, Iterator, List

import pytest
from rich.console import Console

from queryly.config.store import ProfileStore
from queryly.db.adapters.sqlite import SQLiteProvider


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary working directory."""
    return tmp_path


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Path:
    """SQLite database with a 120-row ``items`` table, a ``users`` table and a view."""
    path = tmp_path / "sample.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(
            """
            CREATE TABLE items (
                id INTEGER PRIMARY KEY,
                label TEXT NOT NULL,
                price REAL
            );
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            );
            CREATE VIEW cheap_items AS SELECT * FROM items WHERE price < 10;
            """
        )
        conn.executemany(
            "INSERT INTO items (id, label, price) VALUES (?, ?, ?)",
            [(i, f"item {i}", i * 1.5) for i in range(1, 121)],
        )
        conn.executemany(
            "INSERT INTO users (id, name, email) VALUES (?, ?, ?)",
            [
                (1, "Ada", "ada@example.com"),
                (2, 'Smith, "Bob"', None),
                (3, "Line\nBreak", "lb@example.com"),
            ],
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def sqlite_provider() -> SQLiteProvider:
    return SQLiteProvider()


@pytest.fixture
def sqlite_connection(sqlite_provider: SQLiteProvider, sqlite_db: Path) -> Iterator:
    """Open connection to :func:`sqlite_db`, closed after the test."""
    with sqlite_provider.open_connection(f"Data Source={sqlite_db}") as connection:
        yield connection


@pytest.fixture
def profile_store(tmp_path: Path) -> ProfileStore:
    return ProfileStore(tmp_path / "connections.yaml")


@pytest.fixture
def console_output() -> Iterator[Console]:
    """Wide console writing to memory; read it with ``console.file.getvalue()``."""
    yield Console(file=io.StringIO(), width=200, color_system=None)


def make_prompt(responses: Iterable[str]) -> Callable[[str], str]:
    """Prompt callable that replays ``responses`` and records each message."""
    queue: List[str] = list(responses)

    def prompt(message: str) -> str:
        prompt.messages.append(message)
        if not queue:
            raise AssertionError(f"Unexpected prompt: {message}")
        return queue.pop(0)

    prompt.messages = []
    return prompt


@pytest.fixture
def scripted_prompt() -> Callable[[Iterable[str]], Callable[[str], str]]:
    """Factory building scripted prompt callables."""
    return make_prompt
