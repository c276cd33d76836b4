"""Evaluate image-tag conditions against a directory of YAML documents."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import List, Optional, Sequence, Set, Union
from urllib.parse import urlparse

from .aggregator import collect_records
from .command import ProcessTracker, terminate_process
from .condition import Condition
from .config import ProviderConfig
from .errors import IncidentError, ProviderStoppedError
from .result import EvaluationResult, Incident, QueryRecord
from .rules import Rule
from .rules.image_tag import get_rule
from .utils import iter_yaml_files

logger = logging.getLogger(__name__)


def build_incident(record: QueryRecord, rule: Rule) -> Incident:
    """Turn a matching record into an incident.

    Raises:
        IncidentError: the record's URI or line number is unusable.
    """

    if urlparse(record.file_uri).scheme != "file":
        raise IncidentError(f"record location {record.file_uri!r} is not a file URI")
    try:
        line_number = int(record.line_number)
    except ValueError as exc:
        raise IncidentError(
            f"invalid line number {record.line_number!r} for {record.file_uri}", cause=exc
        ) from exc
    return Incident(
        file_uri=record.file_uri,
        line_number=line_number,
        variables=rule.variables(record),
    )


class YqServiceClient:
    """Answer evaluation requests for one configured location.

    ``process`` is an optional long-lived yq process owned by the host; it is
    terminated by ``stop`` together with any query still running.
    """

    def __init__(
        self,
        config: ProviderConfig,
        rule: Optional[Rule] = None,
        process: Optional[subprocess.Popen] = None,
    ) -> None:
        self.config = config
        self.rule = rule or get_rule()
        self._base_command = config.base_command()
        self._process = process
        self._lock = threading.Lock()
        self._trackers: Set[ProcessTracker] = set()
        self._stopped = False

    def __enter__(self) -> "YqServiceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    @property
    def stopped(self) -> bool:
        return self._stopped

    def evaluate(
        self,
        condition_info: Union[bytes, str],
        timeout: Optional[float] = None,
    ) -> EvaluationResult:
        """Evaluate one condition and return the deduplicated incidents.

        Raises:
            ConditionError: the payload could not be parsed; nothing is scanned.
            IncidentError: a matching record could not be reported.
            EvaluationTimeoutError: the scan overran ``timeout`` seconds.
            ProviderStoppedError: ``stop`` was called before or during the scan.
        """

        condition = Condition.parse(condition_info)
        logger.debug("Evaluating %s with condition %s", self.rule.name, condition.payload)

        records = self.get_all_values_for_key(self.rule.key_path, timeout=timeout)
        incidents = [build_incident(record, self.rule) for record in records if self.rule.matches(record)]
        result = EvaluationResult.from_incidents(incidents)
        logger.info(
            "%s: %d record(s), %d incident(s) under %s",
            self.rule.name,
            len(records),
            len(result.incidents),
            self.config.location,
        )
        return result

    def get_all_values_for_key(
        self,
        key_path: Sequence[str],
        timeout: Optional[float] = None,
    ) -> List[QueryRecord]:
        tracker = self._open_tracker()
        try:
            files = iter_yaml_files(self.config.location, self.config.extensions)
            logger.debug("Scanning %d file(s) under %s", len(files), self.config.location)
            records = collect_records(files, self._base_command, key_path, tracker, timeout)
        finally:
            self._close_tracker(tracker)
        if tracker.cancelled:
            raise ProviderStoppedError("provider was stopped during evaluation")
        return records

    def stop(self) -> None:
        """Terminate running queries and the owned yq process. Idempotent."""

        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            trackers = list(self._trackers)

        for tracker in trackers:
            tracker.cancel()
        if self._process is not None:
            terminate_process(self._process)
        logger.debug("Provider stopped")

    def _open_tracker(self) -> ProcessTracker:
        with self._lock:
            if self._stopped:
                raise ProviderStoppedError("provider has been stopped")
            tracker = ProcessTracker()
            self._trackers.add(tracker)
        return tracker

    def _close_tracker(self, tracker: ProcessTracker) -> None:
        with self._lock:
            self._trackers.discard(tracker)
