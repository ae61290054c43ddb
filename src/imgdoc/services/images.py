"""Image intake: turns an opaque byte buffer into an ``ImageRecord``."""

import io
from uuid import uuid4

import structlog
from PIL import Image, UnidentifiedImageError

from imgdoc.config import Settings
from imgdoc.errors import ImageDecodeError
from imgdoc.models.image import ImageRecord

_SAMPLE_BLUE = 128


class ImageIntake:
    """Mints ids and fills in dimensions for incoming image payloads.

    Bytes are stored exactly as received; Pillow is only used to read the
    intrinsic size when the caller does not declare one.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._logger = logger or structlog.get_logger(__name__)

    def new_image_id(self) -> str:
        return str(uuid4())

    def probe_dimensions(self, data: bytes) -> tuple[int, int]:
        """Read the intrinsic ``(width, height)`` of an encoded image.

        Raises:
            ImageDecodeError: If Pillow cannot identify the format.
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise ImageDecodeError(f"Could not read image dimensions: {exc}") from exc
        return width, height

    def from_bytes(
        self,
        data: bytes,
        width: int | None = None,
        height: int | None = None,
    ) -> ImageRecord:
        """Build a record for ``data`` under a fresh id.

        Args:
            data: Encoded image bytes; copied, so the caller keeps its buffer.
            width: Declared width; probed from ``data`` when omitted.
            height: Declared height; probed from ``data`` when omitted.

        Returns:
            A new ImageRecord.
        """
        payload = bytes(data)
        if width is None or height is None:
            intrinsic_width, intrinsic_height = self.probe_dimensions(payload)
            width = intrinsic_width if width is None else width
            height = intrinsic_height if height is None else height

        record = ImageRecord(id=self.new_image_id(), data=payload, width=width, height=height)
        self._logger.debug(
            "image_received",
            image_id=record.id,
            size_bytes=len(payload),
            width=record.width,
            height=record.height,
        )
        return record

    def create_sample_image(self, width: int | None = None, height: int | None = None) -> bytes:
        """Render a gradient PNG: red grows along x, green along y."""
        width = width or self._settings.sample_width
        height = height or self._settings.sample_height

        image = Image.new("RGBA", (width, height))
        image.putdata(
            [
                (int(x / width * 255), int(y / height * 255), _SAMPLE_BLUE, 255)
                for y in range(height)
                for x in range(width)
            ]
        )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


__all__ = ["ImageIntake"]
