"""Local-folder file listing for bulk imports."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from coitrack.config.errors import ConfigurationError
from coitrack.domain.model import ExternalFile

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)

DOCUMENT_SUFFIXES: Final[frozenset[str]] = frozenset(
    {".pdf", ".png", ".jpg", ".jpeg", ".tif", ".tiff", ".heic", ".webp"}
)


class LocalFolderListing:
    """Callable ``ExternalFileListing`` over a directory tree.

    ``source_file_id`` is the path relative to ``root`` (POSIX separators),
    so it stays stable when the folder is moved or mounted elsewhere.
    """

    def __init__(self, root: Path, *, suffixes: frozenset[str] = DOCUMENT_SUFFIXES) -> None:
        self.root = root
        self.suffixes = suffixes

    def __call__(self) -> list[ExternalFile]:
        root = self.root.expanduser()
        if not root.is_dir():
            raise ConfigurationError(f"Import folder does not exist: {root}")
        files = [
            ExternalFile(
                source_file_id=path.relative_to(root).as_posix(),
                file_name=path.name,
                web_link=path.resolve().as_uri(),
            )
            for path in sorted(root.rglob("*"))
            if path.is_file() and path.suffix.lower() in self.suffixes
        ]
        log.info("Found %d document(s) in %s", len(files), root)
        return files
