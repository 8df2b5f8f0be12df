from __future__ import annotations

import datetime as dt
import json
import logging
import sqlite3
from collections.abc import Callable
from contextlib import suppress
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")

STORAGE_PREFIX = "StaticLocalizer."

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """What the user last translated with; persisted between sessions."""

    serialized_dictionary: str = "RU\tEN\nПривет!\tHello!"
    serialized_exceptions: str = "Joom"
    source_language: str = "RU"
    target_language: str = "EN"


SETTINGS_FIELDS = tuple(f.name for f in fields(Settings))


class SettingsStore:
    """Key-value store for Settings in a small sqlite file.

    Every field is stored under its own prefixed key, so a store written by an older
    version with fewer fields still loads (missing keys fall back to defaults).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = self._connect_with_recovery()

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> SettingsStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _connect_sqlite(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        try:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS client_storage (key TEXT PRIMARY KEY, value_json TEXT NOT NULL, updated_at TEXT NOT NULL);"
            )
            conn.commit()
        except sqlite3.DatabaseError:
            conn.close()
            raise
        return conn

    def _quarantine_corrupt_sqlite(self) -> None:
        stamp = dt.datetime.now(dt.UTC).strftime("%Y%m%dT%H%M%SZ")
        for suffix in ("", "-journal"):
            src = Path(f"{self.path}{suffix}")
            if not src.exists():
                continue
            try:
                src.replace(Path(f"{src}.corrupt-{stamp}"))
            except OSError:
                continue
        _logger.warning("Settings store %s was corrupt; starting from defaults", self.path)

    def _connect_with_recovery(self) -> sqlite3.Connection:
        try:
            return self._connect_sqlite()
        except sqlite3.DatabaseError:
            self._quarantine_corrupt_sqlite()
            return self._connect_sqlite()

    def _run_with_recovery(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except sqlite3.DatabaseError as exc:
            if "malformed" not in str(exc).lower() and "not a database" not in str(exc).lower():
                raise
            with suppress(sqlite3.Error):
                self.conn.close()
            self._quarantine_corrupt_sqlite()
            self.conn = self._connect_sqlite()
            return operation()

    def get(self, key: str) -> object | None:
        def _operation() -> object | None:
            row = self.conn.execute(
                "SELECT value_json FROM client_storage WHERE key=?", (STORAGE_PREFIX + key,)
            ).fetchone()
            return json.loads(row[0]) if row else None

        return self._run_with_recovery(_operation)

    def set(self, key: str, value: object) -> None:
        def _operation() -> None:
            self.conn.execute(
                """
                INSERT INTO client_storage(key, value_json, updated_at) VALUES(?,?,?)
                ON CONFLICT(key) DO UPDATE SET value_json=excluded.value_json, updated_at=excluded.updated_at
                """,
                (STORAGE_PREFIX + key, json.dumps(value, ensure_ascii=False), dt.datetime.now(dt.UTC).isoformat()),
            )
            self.conn.commit()

        self._run_with_recovery(_operation)

    def load(self) -> Settings:
        defaults = asdict(Settings())
        values = {}
        for name in SETTINGS_FIELDS:
            value = self.get(name)
            values[name] = defaults[name] if value is None else str(value)
        return Settings(**values)

    def save(self, settings: Settings) -> None:
        for name, value in asdict(settings).items():
            self.set(name, value)

    def reset(self) -> Settings:
        def _operation() -> None:
            self.conn.execute("DELETE FROM client_storage WHERE key LIKE ?", (STORAGE_PREFIX + "%",))
            self.conn.commit()

        self._run_with_recovery(_operation)
        return Settings()
