"""Build yq expressions for a logical key path."""

from __future__ import annotations

from typing import Sequence, Tuple

CONTAINER_PATH = ".spec.template.spec.containers[0]"
IMAGE_KEY_PATH: Tuple[str, ...] = ("image",)


def field_path(key_path: Sequence[str]) -> str:
    """Return the yq path of the field named by ``key_path``.

    Only the first container of a pod template is addressed for now; the
    last segment of the key path picks the field inside it.
    """

    if not key_path:
        raise ValueError("key path must name at least one field")
    return f"{CONTAINER_PATH}.{key_path[-1]}"


def build_query(key_path: Sequence[str]) -> str:
    """Return an expression printing the field value followed by its line."""

    path = field_path(key_path)
    parts = [path, f"{path} | line"]
    return ", ".join(parts)
