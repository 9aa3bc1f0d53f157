"""Local artifact preparation: server build and docker context archive."""

from dropship.packaging.archive import package_directory
from dropship.packaging.build import build_command, build_server

__all__ = [
    "package_directory",
    "build_command",
    "build_server",
]
