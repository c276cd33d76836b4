"""Core result data structures for the provider."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List

IMAGE_TAG_VARIABLE = "imageTag"


@dataclass(frozen=True)
class QueryRecord:
    """One value pulled out of one file by a yq run.

    The line number is kept as the text yq printed; it only becomes an
    integer once the record is turned into an incident.
    """

    value: str
    line_number: str
    file_uri: str


@dataclass
class Incident:
    """Capture a single reported match."""

    file_uri: str
    line_number: int
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def key(self) -> str:
        """Return the canonical form used to detect duplicate incidents."""

        return json.dumps(self.to_dict(), sort_keys=True)


def dedupe_incidents(incidents: Iterable[Incident]) -> List[Incident]:
    """Drop structurally identical incidents, keeping the first of each."""

    seen: Dict[str, Incident] = {}
    for incident in incidents:
        seen.setdefault(incident.key(), incident)
    return list(seen.values())


@dataclass
class EvaluationResult:
    """Bundle the match flag and the incidents behind it."""

    matched: bool = False
    incidents: List[Incident] = field(default_factory=list)

    @classmethod
    def from_incidents(cls, incidents: Iterable[Incident]) -> "EvaluationResult":
        unique = dedupe_incidents(incidents)
        if not unique:
            return cls(matched=False)
        unique.sort(key=lambda incident: (incident.file_uri, incident.line_number))
        return cls(matched=True, incidents=unique)

    def to_dict(self) -> Dict[str, object]:
        return {
            "matched": self.matched,
            "incidents": [incident.to_dict() for incident in self.incidents],
        }

    def exit_code(self) -> int:
        return 1 if self.matched else 0


def format_summary_table(result: EvaluationResult, max_incidents: int = 10) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Evaluation Summary")
    lines.append("=" * 40)
    status = "MATCHED" if result.matched else "NO MATCH"
    lines.append(f"Status    : {status}")
    lines.append(f"Incidents : {len(result.incidents)}")

    shown = result.incidents[:max_incidents]
    if shown:
        lines.append("")
        lines.append("Incidents")
        lines.append("-" * 40)
        for incident in shown:
            tag = incident.variables.get(IMAGE_TAG_VARIABLE, "")
            lines.append(f"[{tag}] {incident.file_uri}:{incident.line_number}")
        hidden = len(result.incidents) - len(shown)
        if hidden > 0:
            lines.append(f"... and {hidden} more")
    return "\n".join(lines)
