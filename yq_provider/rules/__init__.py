"""Rule registry for the provider."""

from __future__ import annotations

from typing import Any, Dict, Protocol, Sequence

from yq_provider.result import QueryRecord


class Rule(Protocol):
    """Protocol implemented by all record predicates."""

    name: str
    key_path: Sequence[str]

    def matches(self, record: QueryRecord) -> bool:
        """Return ``True`` when ``record`` should become an incident."""

    def variables(self, record: QueryRecord) -> Dict[str, Any]:
        """Return the variables reported alongside a matching record."""
