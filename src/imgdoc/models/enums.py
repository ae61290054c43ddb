from enum import StrEnum


class ElementKind(StrEnum):
    TEXT = "text"
    IMAGE = "image"
