"""Variable storage shared by the analyzer, the compiler and the executor."""

from __future__ import annotations

from collections.abc import Iterator


class SymbolError(Exception):
    """Raised when an identifier is declared twice or used undeclared."""


class SymbolTable:
    """Ordered table of variable names and their current values.

    Each variable is addressed by a handle: its position in declaration order.
    """

    def __init__(self) -> None:
        self._entries: list[list] = []

    def insert_symbol(self, identifier: str) -> int:
        """Declare a new variable with value 0 and return its handle."""
        if any(name == identifier for name, _ in self._entries):
            raise SymbolError(
                f"Error: Identifier '{identifier}' declared several times."
            )
        self._entries.append([identifier, 0.0])
        return len(self._entries) - 1

    def find_symbol(self, identifier: str) -> int:
        """Return the handle of a declared variable."""
        for handle, (name, _) in enumerate(self._entries):
            if name == identifier:
                return handle
        raise SymbolError(
            f"Error: Identifier '{identifier}' used before having been declared."
        )

    def get_value(self, handle: int) -> float:
        return self._entries[handle][1]

    def set_value(self, handle: int, value: float) -> None:
        self._entries[handle][1] = value

    def get_name(self, handle: int) -> str:
        return self._entries[handle][0]

    def __iter__(self) -> Iterator[tuple[str, float]]:
        return ((name, value) for name, value in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SymbolTable({list(self)!r})"