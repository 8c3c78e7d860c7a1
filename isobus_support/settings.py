"""Persistent key/value settings with typed integer and string entries.

Entries live in one flat namespace: the section is recorded in log
messages only, as in a non-volatile storage partition where every entry
of the application shares a single namespace.  Each entry remembers its
storage type, and reading it back with another type behaves like a
missing entry.  Reading a missing entry stores and returns the default.
Every change is committed to the backing file at once.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

_log = logging.getLogger(__name__)

_STRING_TYPE = "str"


class IntKind(enum.Enum):
    """Integer storage kinds: width, signedness and how values are shown."""

    S8 = "s8"
    S16 = "s16"
    S32 = "s32"
    S64 = "s64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    X64 = "x64"

    @property
    def signed(self) -> bool:
        return self.value.startswith("s")

    @property
    def bits(self) -> int:
        return int(self.value[1:])

    @property
    def storage_type(self) -> str:
        """Type tag stored with the entry; X64 shares the unsigned 64-bit slot."""
        return "u64" if self is IntKind.X64 else self.value

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def format(self, value: int) -> str:
        return f"{value:X}" if self is IntKind.X64 else str(value)


class Settings:
    """Typed settings kept in a JSON file, or in memory when ``path`` is None."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._entries: dict[str, dict[str, Any]] = self._load()

    def _load(self) -> dict[str, dict[str, Any]]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _log.warning("settings file %s unreadable (%s); starting empty", self._path, exc)
            return {}
        if not isinstance(data, dict):
            _log.warning("settings file %s malformed; starting empty", self._path)
            return {}
        return {
            key: entry
            for key, entry in data.items()
            if isinstance(entry, dict) and "type" in entry and "value" in entry
        }

    def _commit(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".settings-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._entries, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        _log.info("committed settings to %s", self._path)

    def _lookup(self, key: str, storage_type: str) -> Any:
        entry = self._entries.get(key)
        if entry is None or entry["type"] != storage_type:
            raise KeyError(key)
        return entry["value"]

    def get_int(self, section: str, key: str, default: int, kind: IntKind) -> int:
        """Return the integer under ``key``; store and return ``default`` if absent."""
        try:
            value = int(self._lookup(key, kind.storage_type))
        except KeyError:
            value = default
            self.set_int(section, key, value, kind)
        _log.info(
            "get%s, section = %s, key = %s, value = %s",
            kind.name, section, key, kind.format(value),
        )
        return value

    def set_int(self, section: str, key: str, value: int, kind: IntKind) -> None:
        """Store ``value`` under ``key`` as ``kind`` and commit."""
        if not kind.minimum <= value <= kind.maximum:
            raise ValueError(
                f"{value} does not fit {kind.name} "
                f"({kind.minimum}..{kind.maximum})"
            )
        _log.info(
            "set%s, section = %s, key = %s, value = %s",
            kind.name, section, key, kind.format(value),
        )
        self._entries[key] = {"type": kind.storage_type, "value": int(value)}
        self._commit()

    def get_string(self, section: str, key: str, default: str | None) -> str:
        """Return the string under ``key``.

        If absent, ``default`` is stored and returned; with no default an
        empty string is returned and nothing is stored.
        """
        try:
            value = str(self._lookup(key, _STRING_TYPE))
        except KeyError:
            if default is None:
                return ""
            value = default
            self.set_string(section, key, value)
        _log.info("getString, section = %s, key = %s, value = %s", section, key, value)
        return value

    def set_string(self, section: str, key: str, value: str) -> None:
        """Store the string ``value`` under ``key`` and commit."""
        _log.info("setString, section = %s, key = %s, value = %s", section, key, value)
        self._entries[key] = {"type": _STRING_TYPE, "value": str(value)}
        self._commit()

    def erase(self, section: str, key: str) -> None:
        """Remove ``key`` if present and commit."""
        _log.info("erase_item, section = %s, key = %s", section, key)
        self._entries.pop(key, None)
        self._commit()