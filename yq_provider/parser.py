"""Turn raw yq output into query records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .result import QueryRecord

logger = logging.getLogger(__name__)


def file_uri(path: Union[str, Path]) -> str:
    """Return the ``file://`` URI of the canonical absolute path.

    Symlinks are resolved so that the same document reached through two
    paths maps to one location.
    """

    return Path(path).resolve().as_uri()


def parse_segment(segment: str, uri: str) -> Optional[QueryRecord]:
    """Parse one ``<key>:<value>`` / ``<line>`` pair, or return ``None``."""

    lines = segment.strip().splitlines()
    if len(lines) < 2:
        logger.warning("Skipping malformed yq output segment for %s: %r", uri, segment)
        return None

    key, sep, value = lines[0].partition(":")
    if not sep:
        logger.debug("No tag in value %r for %s", key, uri)
        return None
    return QueryRecord(value=value, line_number=lines[1].strip(), file_uri=uri)


def parse_output(segments: Iterable[str], path: Union[str, Path]) -> List[QueryRecord]:
    uri = file_uri(path)
    records: List[QueryRecord] = []
    for segment in segments:
        if not segment.strip():
            continue
        record = parse_segment(segment, uri)
        if record is not None:
            records.append(record)
    return records
