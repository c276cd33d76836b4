"""Parse the condition payload handed over by the host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union

import yaml

from .errors import ConditionError


@dataclass(frozen=True)
class Condition:
    """Parsed condition. Only its shape is checked for now."""

    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def parse(cls, condition_info: Union[bytes, str]) -> "Condition":
        try:
            data = yaml.safe_load(condition_info)
        except yaml.YAMLError as exc:
            raise ConditionError(f"unable to get query info: {exc}", cause=exc) from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConditionError(
                f"unable to get query info: expected a mapping, got {type(data).__name__}"
            )
        return cls(payload=data)
