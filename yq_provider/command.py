"""Run the yq binary against a single document."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple, Union

from .errors import CommandError

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "---"
DEFAULT_TIMEOUT_SECONDS = 30.0
TERMINATE_GRACE_SECONDS = 3.0


@dataclass(frozen=True)
class YqCommand:
    """Immutable description of one yq invocation.

    A configured command acts as a template: ``with_query`` hands back a new
    command with the expression appended, so concurrent runs never share or
    mutate argument state.
    """

    binary: str
    args: Tuple[str, ...] = ()
    env: Tuple[Tuple[str, str], ...] = ()
    timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def create(
        cls,
        binary: str,
        args: Sequence[str] = (),
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    ) -> "YqCommand":
        pairs = tuple(sorted((env or {}).items()))
        return cls(binary=binary, args=tuple(args), env=pairs, timeout=timeout)

    def with_query(self, query: str) -> "YqCommand":
        return replace(self, args=self.args + (query,))

    def argv(self) -> List[str]:
        return [self.binary, *self.args]

    def environment(self) -> Dict[str, str]:
        """Return a fresh process environment with the command's overrides."""

        merged = os.environ.copy()
        merged.update(dict(self.env))
        return merged


class ProcessTracker:
    """Keep track of live yq processes so they can be terminated together.

    Once cancelled the tracker refuses to start new processes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processes: Set[subprocess.Popen] = set()
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def spawn(self, command: YqCommand) -> subprocess.Popen:
        if self._cancelled.is_set():
            raise CommandError("refusing to start yq: evaluation was cancelled")
        process = _popen(command)
        with self._lock:
            cancelled = self._cancelled.is_set()
            if not cancelled:
                self._processes.add(process)
        if cancelled:
            # cancel() ran while this process was starting
            terminate_process(process)
            raise CommandError("evaluation was cancelled while yq was starting")
        return process

    def release(self, process: subprocess.Popen) -> None:
        with self._lock:
            self._processes.discard(process)

    def cancel(self) -> None:
        """Stop accepting work and terminate every live process."""

        with self._lock:
            self._cancelled.set()
            processes = list(self._processes)
        for process in processes:
            terminate_process(process)

    def __len__(self) -> int:
        with self._lock:
            return len(self._processes)


def _popen(command: YqCommand) -> subprocess.Popen:
    try:
        return subprocess.Popen(
            command.argv(),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=command.environment(),
        )
    except OSError as exc:
        raise CommandError(f"unable to start {command.binary}: {exc}", cause=exc) from exc


def terminate_process(process: subprocess.Popen, grace: float = TERMINATE_GRACE_SECONDS) -> None:
    """Terminate ``process`` and wait for it, killing it if it lingers."""

    if process.poll() is not None:
        return
    process.terminate()
    try:
        process.wait(timeout=grace)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s ignored SIGTERM, killing it", process.pid)
        process.kill()
        process.wait()


def split_documents(output: str) -> List[str]:
    return output.split(DOCUMENT_SEPARATOR)


def execute_command(
    command: YqCommand,
    content: Union[str, bytes],
    tracker: Optional[ProcessTracker] = None,
) -> List[str]:
    """Feed ``content`` to yq on stdin and return its output segments.

    Raises:
        CommandError: yq could not be started, timed out, or exited non-zero.
    """

    data = content.encode("utf-8") if isinstance(content, str) else content
    process = tracker.spawn(command) if tracker is not None else _popen(command)
    try:
        try:
            stdout, stderr = process.communicate(data, timeout=command.timeout)
        except subprocess.TimeoutExpired as exc:
            process.kill()
            _, stderr = process.communicate()
            raise CommandError(
                f"{command.binary} timed out after {command.timeout} seconds",
                stderr=stderr.decode("utf-8", errors="replace"),
                cause=exc,
            ) from exc
    finally:
        if tracker is not None:
            tracker.release(process)

    stderr_text = stderr.decode("utf-8", errors="replace")
    if process.returncode != 0:
        raise CommandError(
            f"error running command={command.argv()}, exit status={process.returncode}, "
            f"stderr={stderr_text.strip()}",
            stderr=stderr_text,
            return_code=process.returncode,
        )
    return split_documents(stdout.decode("utf-8", errors="replace"))
