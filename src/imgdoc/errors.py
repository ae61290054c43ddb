"""Exception types raised by the document model, codec and persistence layer.

Every error carries a short machine-readable ``code`` alongside its message so
callers (the CLI, an editor shell) can branch without string matching.
"""

from pathlib import Path


class DocumentError(Exception):
    """Base exception for all imgdoc errors."""

    def __init__(self, message: str, code: str = "DOC_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class TypeMismatchError(DocumentError):
    """Raised when a text operation targets an image slot, or vice versa."""

    def __init__(self, message: str = "Element has the wrong kind for this operation") -> None:
        super().__init__(message, code="DOC_TYPE_MISMATCH")


class DanglingReferenceError(DocumentError):
    """Raised when an image id has no matching record in the metadata."""

    def __init__(self, image_id: str, message: str | None = None) -> None:
        self.image_id = image_id
        super().__init__(
            message or f"No image record for id '{image_id}'",
            code="DOC_DANGLING_REFERENCE",
        )


class MetadataCorruptError(DocumentError):
    """Raised when the metadata companion cannot be parsed or validated."""

    def __init__(self, message: str = "Metadata is corrupt") -> None:
        super().__init__(message, code="META_CORRUPT")


class MetadataMissingError(DocumentError):
    """Raised when placeholders exist but the metadata companion does not."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Metadata file not found: {path}", code="META_MISSING")


class IoFailureError(DocumentError):
    """Raised when reading or writing one of the file pair fails."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"I/O failure on {path}", code="IO_FAILURE")


class ImageDecodeError(DocumentError):
    """Raised when incoming image bytes cannot be decoded to probe their size."""

    def __init__(self, message: str = "Image bytes could not be decoded") -> None:
        super().__init__(message, code="IMG_DECODE")
