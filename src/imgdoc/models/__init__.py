from imgdoc.models.document import Document, new_document
from imgdoc.models.elements import ContentElement, ImageElement, TextElement
from imgdoc.models.enums import ElementKind
from imgdoc.models.image import ImageRecord
from imgdoc.models.metadata import MetadataStore

__all__ = [
    "ContentElement",
    "Document",
    "ElementKind",
    "ImageElement",
    "ImageRecord",
    "MetadataStore",
    "TextElement",
    "new_document",
]
