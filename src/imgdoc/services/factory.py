"""Factory functions for wiring services and the shell-facing entry points.

``new_document``, ``load`` and ``save`` are what an editor shell calls; they
build a default gateway unless one is supplied.
"""

from pathlib import Path

import structlog

from imgdoc.config import Settings
from imgdoc.models.document import Document, new_document
from imgdoc.services.codec import PlaceholderCodec
from imgdoc.services.editor import LineEditor
from imgdoc.services.images import ImageIntake
from imgdoc.services.persistence import PersistenceGateway


def create_gateway(settings: Settings | None = None) -> PersistenceGateway:
    """Create a PersistenceGateway with its codec.

    Args:
        settings: Persistence settings. Defaults read ``IMGDOC_*`` variables.

    Returns:
        Configured PersistenceGateway.
    """
    logger = structlog.get_logger(__name__)
    settings = settings or Settings()

    codec = PlaceholderCodec(logger=logger)
    return PersistenceGateway(codec=codec, settings=settings, logger=logger)


def create_editor(document: Document, settings: Settings | None = None) -> LineEditor:
    """Create a LineEditor over ``document`` with an image intake."""
    logger = structlog.get_logger(__name__)
    intake = ImageIntake(settings=settings or Settings(), logger=logger)
    return LineEditor(document=document, intake=intake, logger=logger)


def load(path: Path, gateway: PersistenceGateway | None = None) -> Document:
    return (gateway or create_gateway()).load(Path(path))


def save(document: Document, path: Path, gateway: PersistenceGateway | None = None) -> None:
    (gateway or create_gateway()).save(document, Path(path))


__all__ = ["create_editor", "create_gateway", "load", "new_document", "save"]
