"""The metadata companion: every image record a saved document refers to.

Serialized form::

    {
      "images": {
        "<id>": {"id": "<id>", "data": "<base64>", "width": 800, "height": 600}
      }
    }
"""

import json
from typing import Any

from pydantic import Field, ValidationError, model_validator

from imgdoc.errors import MetadataCorruptError
from imgdoc.models.base import RecordModel
from imgdoc.models.image import ImageRecord


class MetadataStore(RecordModel):
    images: dict[str, ImageRecord] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_keys(self) -> "MetadataStore":
        for key, record in self.images.items():
            if key != record.id:
                raise ValueError(f"image key '{key}' does not match record id '{record.id}'")
        return self

    @classmethod
    def from_records(cls, records: list[ImageRecord]) -> "MetadataStore":
        return cls(images={record.id: record for record in records})

    def __contains__(self, image_id: object) -> bool:
        return image_id in self.images

    def __len__(self) -> int:
        return len(self.images)

    def get(self, image_id: str) -> ImageRecord | None:
        return self.images.get(image_id)

    def ids(self) -> set[str]:
        return set(self.images)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_record(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str | bytes) -> "MetadataStore":
        """Parse a serialized store.

        Raises:
            MetadataCorruptError: On malformed JSON, missing or invalid fields,
                or a base64 payload that does not decode.
        """
        try:
            payload: Any = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MetadataCorruptError(f"Metadata is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict) or "images" not in payload:
            raise MetadataCorruptError("Metadata must be an object with an 'images' mapping")
        try:
            return cls.from_record(payload)
        except ValidationError as exc:
            raise MetadataCorruptError(f"Metadata failed validation: {exc}") from exc


__all__ = ["MetadataStore"]
