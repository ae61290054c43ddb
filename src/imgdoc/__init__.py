"""imgdoc - plain-text documents with embedded images and a metadata companion."""

from importlib.metadata import version, PackageNotFoundError

from imgdoc.models import Document, ImageElement, ImageRecord, MetadataStore, TextElement
from imgdoc.services.factory import load, new_document, save

try:
    __version__ = version("imgdoc")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "Document",
    "ImageElement",
    "ImageRecord",
    "MetadataStore",
    "TextElement",
    "__version__",
    "load",
    "new_document",
    "save",
]
