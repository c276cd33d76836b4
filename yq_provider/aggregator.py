"""Run the yq query over every file concurrently and gather the records."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import List, Optional, Sequence

from .command import ProcessTracker, YqCommand, execute_command
from .errors import CommandError, EvaluationTimeoutError
from .parser import parse_output
from .query import build_query
from .result import QueryRecord
from .utils import read_document

logger = logging.getLogger(__name__)


def query_file(
    path: Path,
    command: YqCommand,
    tracker: Optional[ProcessTracker] = None,
) -> List[QueryRecord]:
    """Run ``command`` on one file. Failures yield no records."""

    try:
        data = read_document(path)
    except OSError as exc:
        logger.warning("Error reading YAML file '%s': %s", path, exc)
        return []

    try:
        segments = execute_command(command, data, tracker)
    except CommandError as exc:
        logger.warning("Error running yq on '%s': %s", path, exc.message)
        return []

    records = parse_output(segments, path)
    logger.debug("Collected %d record(s) from %s", len(records), path)
    return records


def collect_records(
    files: Sequence[Path],
    base_command: YqCommand,
    key_path: Sequence[str],
    tracker: Optional[ProcessTracker] = None,
    timeout: Optional[float] = None,
) -> List[QueryRecord]:
    """Query every file in its own worker and return all records.

    Records arrive in no particular order. When ``timeout`` elapses the
    tracker is cancelled, killing any running yq process, and
    ``EvaluationTimeoutError`` is raised.
    """

    if not files:
        return []

    if tracker is None:
        tracker = ProcessTracker()
    query = build_query(key_path)
    results: List[QueryRecord] = []
    lock = threading.Lock()

    def worker(path: Path) -> None:
        # each worker gets its own copy of the command
        command = base_command.with_query(query)
        records = query_file(path, command, tracker)
        with lock:
            results.extend(records)

    executor = ThreadPoolExecutor(max_workers=len(files), thread_name_prefix="yq")
    try:
        futures = [executor.submit(worker, path) for path in files]
        done, pending = wait(futures, timeout=timeout)
        if pending:
            tracker.cancel()
            raise EvaluationTimeoutError(
                f"scan of {len(files)} file(s) did not finish within {timeout} seconds"
            )
        for future in done:
            future.result()
    finally:
        executor.shutdown(wait=True)

    return results
