"""The shell's ordered environment."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from shellfish.textutil import strncmp

_EXACT_WIDTH = 8


def parse_entry(text: str) -> tuple[str, str | None]:
    """Split ``NAME=VALUE`` at the first ``=``; the value is None without one."""
    key, sep, value = text.partition("=")
    return key, (value if sep else None)


@dataclass
class _Variable:
    key: str
    value: str | None


class Environment:
    """Variables kept in insertion order; duplicate names are allowed."""

    def __init__(self) -> None:
        self._vars: list[_Variable] = []

    @classmethod
    def from_strings(cls, entries: Iterable[str]) -> Environment:
        """Build an environment from ``NAME=VALUE`` strings."""
        env = cls()
        for entry in entries:
            env.add(entry)
        return env

    def get(self, name: str) -> str | None:
        """Value of the first variable whose name starts with ``name``."""
        for var in self._vars:
            if var.key.startswith(name):
                return var.value
        return None

    def lookup_exact_prefix(self, name: str) -> str | None:
        """Value of the first variable matching ``name`` in its first eight characters."""
        for var in self._vars:
            if strncmp(var.key, name, _EXACT_WIDTH) == 0:
                return var.value
        return None

    def update(self, key: str, value: str | None) -> None:
        """Set the value of the first variable whose name is a prefix of ``key``."""
        for var in self._vars:
            if key.startswith(var.key):
                var.value = value
                return

    def add(self, entry: str) -> None:
        """Append a variable parsed from ``NAME=VALUE``."""
        key, value = parse_entry(entry)
        self._vars.append(_Variable(key, value))

    def remove(self, key: str) -> None:
        """Remove the first variable named exactly ``key``, if any."""
        for pos, var in enumerate(self._vars):
            if var.key == key:
                del self._vars[pos]
                return

    def to_strings(self) -> list[str]:
        """Render every variable as ``NAME=VALUE``."""
        return [f"{var.key}={var.value or ''}" for var in self._vars]

    def items(self) -> list[tuple[str, str | None]]:
        """All (name, value) pairs in order."""
        return [(var.key, var.value) for var in self._vars]

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[str]:
        return (var.key for var in self._vars)