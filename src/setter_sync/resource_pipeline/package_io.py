"""Local directory reader/writer for resource documents."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from fnmatch import fnmatch
from pathlib import Path

from .resource_models import ResourceDocument

logger = logging.getLogger(__name__)

DEFAULT_MATCH_FILES: tuple[str, ...] = ("*.yaml", "*.yml")


class PipelineError(Exception):
    """Raised when resource documents cannot be read, transformed, or written."""


class LocalPackageReadWriter:
    """Reads every resource file under a directory and writes modified ones back.

    Files are read and written as raw UTF-8 so that line endings survive. Only
    documents whose text changed are rewritten. Unless `no_delete_files` is set,
    `write` also removes files that were read but are missing from its input.
    """

    def __init__(
        self,
        package_path: Path | str,
        *,
        no_delete_files: bool = False,
        match_files: Sequence[str] = DEFAULT_MATCH_FILES,
    ) -> None:
        self.package_path = Path(package_path)
        self.no_delete_files = no_delete_files
        self.match_files = tuple(match_files)
        self._read_paths: set[Path] = set()

    def read(self) -> list[ResourceDocument]:
        if not self.package_path.is_dir():
            raise PipelineError(f"Resource directory not found: {self.package_path}")
        documents: list[ResourceDocument] = []
        for path in sorted(self._matching_files()):
            try:
                text = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise PipelineError(f"Failed to read resource file {path}: {exc}") from exc
            documents.append(ResourceDocument(path=path, original_text=text, text=text))
        self._read_paths = {document.path for document in documents}
        logger.debug("read %d resource file(s) from %s", len(documents), self.package_path)
        return documents

    def write(self, documents: Sequence[ResourceDocument]) -> int:
        """Persist modified documents and return how many files were rewritten."""
        written = 0
        for document in documents:
            if not document.modified:
                continue
            try:
                document.path.write_bytes(document.text.encode("utf-8"))
            except OSError as exc:
                raise PipelineError(
                    f"Failed to write resource file {document.path}: {exc}"
                ) from exc
            written += 1
        if not self.no_delete_files:
            kept = {document.path for document in documents}
            for stale in sorted(self._read_paths - kept):
                try:
                    stale.unlink()
                except OSError as exc:
                    raise PipelineError(f"Failed to delete resource file {stale}: {exc}") from exc
                logger.debug("deleted %s", stale)
        logger.debug("wrote %d resource file(s) to %s", written, self.package_path)
        return written

    def _matching_files(self) -> Iterator[Path]:
        for path in self.package_path.rglob("*"):
            relative = path.relative_to(self.package_path)
            if any(part.startswith(".") for part in relative.parts[:-1]):
                continue
            if path.is_file() and self._matches(path.name):
                yield path

    def _matches(self, file_name: str) -> bool:
        return any(fnmatch(file_name, pattern) for pattern in self.match_files)
