"""Flag container images that use the floating ``latest`` tag."""

from __future__ import annotations

from typing import Any, Dict

from yq_provider.query import IMAGE_KEY_PATH
from yq_provider.result import IMAGE_TAG_VARIABLE, QueryRecord

from . import Rule

LATEST_TAG = "latest"


class LatestImageTagRule:
    """Match the first container's image when it is tagged ``latest``."""

    name = "image_tag_latest"
    key_path = IMAGE_KEY_PATH

    def matches(self, record: QueryRecord) -> bool:
        return record.value == LATEST_TAG

    def variables(self, record: QueryRecord) -> Dict[str, Any]:
        return {IMAGE_TAG_VARIABLE: record.value}


def get_rule() -> Rule:
    return LatestImageTagRule()
