"""A minimal greeting contract."""

from __future__ import annotations


class HelloContract:
    """Greets whoever is named."""

    def hello(self, to: str) -> list[str]:
        """Return the greeting word followed by the name."""
        return ["Hello", to]