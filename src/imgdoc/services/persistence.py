"""Persistence gateway for the text + metadata file pair.

A document saved to ``notes.txt`` produces two files:

* ``notes.txt`` - UTF-8 text, one slot per line, images as placeholders.
* ``notes.txt.meta`` - UTF-8 JSON holding every referenced image record.

The text half is written first. When atomic writes are enabled each half is
written to a temporary sibling and moved into place with ``os.replace``.
"""

import os
import tempfile
from pathlib import Path

import structlog

from imgdoc.config import Settings
from imgdoc.errors import IoFailureError, MetadataMissingError
from imgdoc.models.document import Document
from imgdoc.models.metadata import MetadataStore
from imgdoc.services.codec import PlaceholderCodec

ENCODING = "utf-8"


class PersistenceGateway:
    """Saves and loads documents as a text file plus a metadata companion.

    Accepts the codec and settings via dependency injection so tests can
    swap either.
    """

    def __init__(
        self,
        codec: PlaceholderCodec | None = None,
        settings: Settings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._logger = logger or structlog.get_logger(__name__)
        self._codec = codec or PlaceholderCodec(logger=self._logger)
        self._settings = settings or Settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def metadata_path_for(self, path: Path) -> Path:
        """Return the companion metadata path for a text file path."""
        return path.with_name(path.name + self._settings.meta_suffix)

    def save(self, document: Document, path: Path) -> None:
        """Write ``document`` to ``path`` and its metadata companion.

        The metadata file is always written, with an empty ``images`` mapping
        when the document holds no images. On success the document is marked
        clean and bound to ``path``.

        Args:
            document: The document to persist.
            path: Target text file path.

        Raises:
            DanglingReferenceError: If an image slot has no known record.
            IoFailureError: If either file cannot be written. When the text
                file was written but the metadata was not, the text file is
                left in place and the document stays modified.
        """
        path = Path(path)
        meta_path = self.metadata_path_for(path)
        text, metadata = self._codec.encode(document)

        self._write(path, text)
        try:
            self._write(meta_path, metadata.to_json(indent=self._settings.metadata_indent))
        except IoFailureError:
            self._logger.error(
                "metadata_write_failed",
                path=str(path),
                metadata_path=str(meta_path),
            )
            raise

        document.mark_clean(path)
        self._logger.info(
            "document_saved",
            path=str(path),
            element_count=document.element_count(),
            image_count=len(metadata),
        )

    def load(self, path: Path) -> Document:
        """Read the file pair at ``path`` into a new document.

        Args:
            path: Text file path; the companion is ``path`` + meta suffix.

        Returns:
            A clean document bound to ``path``.

        Raises:
            IoFailureError: If a file cannot be read or is not valid text.
            MetadataMissingError: If the text holds placeholders but the
                companion file does not exist.
            MetadataCorruptError: If the companion cannot be parsed.
            DanglingReferenceError: If a placeholder has no metadata entry.
        """
        path = Path(path)
        meta_path = self.metadata_path_for(path)
        text = self._read(path)

        if meta_path.exists():
            metadata = MetadataStore.from_json(self._read(meta_path))
        elif self._codec.has_placeholders(text):
            self._logger.error("metadata_missing", path=str(path), metadata_path=str(meta_path))
            raise MetadataMissingError(meta_path)
        else:
            self._logger.debug("metadata_absent_no_images", path=str(path))
            metadata = MetadataStore()

        document = self._codec.decode(text, metadata)
        document.mark_clean(path)
        self._logger.info(
            "document_loaded",
            path=str(path),
            element_count=document.element_count(),
            image_count=len(document.image_ids()),
        )
        return document

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding=ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise IoFailureError(path, f"Could not read {path}: {exc}") from exc

    def _write(self, path: Path, content: str) -> None:
        try:
            if self._settings.atomic_writes:
                self._write_atomic(path, content)
            else:
                with path.open("w", encoding=ENCODING, newline="\n") as handle:
                    handle.write(content)
        except (OSError, UnicodeEncodeError) as exc:
            raise IoFailureError(path, f"Could not write {path}: {exc}") from exc

    def _write_atomic(self, path: Path, content: str) -> None:
        """Write to a temporary sibling, then move it over ``path``."""
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding=ENCODING, newline="\n") as handle:
                handle.write(content)
            # mkstemp creates 0600 files; keep the mode of the file being replaced.
            os.chmod(tmp_name, path.stat().st_mode if path.exists() else 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["PersistenceGateway"]
