"""Document saving with revision snapshots, listing and restore."""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from loguru import logger

from flatwiki.config import DOCUMENT_FILENAME, VERSIONS_DIRNAME
from flatwiki.core.paths import sanitize_path
from flatwiki.core.versions.retention import (
    VERSION_STAMP_FORMAT,
    VERSION_SUFFIX,
    is_version_stamp,
    list_version_files,
    prune_versions,
)
from flatwiki.exceptions import InvalidVersionError, VersionNotFoundError
from flatwiki.models.node import VersionInfo


class DocumentHistory:
    """Keep a bounded history of every document under ``documents_root``.

    Before a document is overwritten its current content is copied to
    ``<document>/versions/<YYYYMMDDhhmmss>.md`` and the directory is pruned to
    ``max_versions`` files. Two saves within the same second share a stamp and
    the later snapshot replaces the earlier one.
    """

    def __init__(
        self,
        documents_root: str | Path,
        max_versions: int,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.documents_root = Path(documents_root)
        self.max_versions = max_versions
        self._clock = clock

    def document_dir(self, doc_path: str) -> Path:
        return self.documents_root / sanitize_path(doc_path)

    def document_file(self, doc_path: str) -> Path:
        return self.document_dir(doc_path) / DOCUMENT_FILENAME

    def version_dir(self, doc_path: str) -> Path:
        return self.document_dir(doc_path) / VERSIONS_DIRNAME

    def _snapshot(self, doc_path: str) -> str | None:
        """Copy the current document into its versions directory."""
        if self.max_versions <= 0:
            return None
        try:
            current = self.document_file(doc_path).read_bytes()
        except FileNotFoundError:
            return None
        if not current:
            return None

        stamp = self._clock().strftime(VERSION_STAMP_FORMAT)
        version_dir = self.version_dir(doc_path)
        version_dir.mkdir(parents=True, exist_ok=True)
        version_path = version_dir / f"{stamp}{VERSION_SUFFIX}"
        version_path.write_bytes(current)
        logger.debug("Created version: {}", version_path)

        prune_versions(version_dir, self.max_versions)
        return stamp

    def save(self, doc_path: str, content: str) -> str | None:
        """Write new document content, snapshotting the previous content first.

        Returns:
            The stamp of the snapshot taken, or None if there was nothing to keep.
        """
        stamp = self._snapshot(doc_path)
        document = self.document_file(doc_path)
        document.parent.mkdir(parents=True, exist_ok=True)
        document.write_bytes(content.encode("utf-8"))
        return stamp

    def list_versions(self, doc_path: str) -> list[VersionInfo]:
        """List stored versions of a document, newest first."""
        clean = sanitize_path(doc_path)
        return [
            VersionInfo(timestamp=stamp, path=f"{clean}/{stamp}" if clean else stamp)
            for stamp in (
                name.removesuffix(VERSION_SUFFIX)
                for name in reversed(list_version_files(self.version_dir(doc_path)))
            )
        ]

    def _version_file(self, doc_path: str, timestamp: str) -> Path:
        if not is_version_stamp(timestamp):
            msg = f"Invalid version timestamp: {timestamp!r}"
            raise InvalidVersionError(msg)
        version_path = self.version_dir(doc_path) / f"{timestamp}{VERSION_SUFFIX}"
        if not version_path.is_file():
            msg = f"Version {timestamp} of {doc_path!r} not found"
            raise VersionNotFoundError(msg)
        return version_path

    def read_version(self, doc_path: str, timestamp: str) -> str:
        """Return the content of one stored version."""
        return self._version_file(doc_path, timestamp).read_bytes().decode("utf-8")

    def restore(self, doc_path: str, timestamp: str) -> str | None:
        """Replace the document with a stored version.

        The content being replaced is itself kept as a new version.

        Returns:
            The stamp of the snapshot of the replaced content, if one was taken.
        """
        content = self._version_file(doc_path, timestamp).read_bytes()
        stamp = self._snapshot(doc_path)
        document = self.document_file(doc_path)
        document.parent.mkdir(parents=True, exist_ok=True)
        document.write_bytes(content)
        logger.info("Restored {!r} to version {}", doc_path, timestamp)
        return stamp
