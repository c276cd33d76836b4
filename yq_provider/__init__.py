"""yq-backed provider that reports container images tagged ``latest``."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("yq-provider")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
