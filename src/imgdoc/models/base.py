import base64
import binascii
import re
from typing import Annotated, Any, Mapping, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer

T_Model = TypeVar("T_Model", bound="RecordModel")

# Characters allowed inside a placeholder token.
TOKEN_PATTERN = r'[^"\r\n]+'

_TOKEN_RE = re.compile(rf"{TOKEN_PATTERN}")


class FrozenModel(BaseModel):
    """Base class for immutable value objects."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class RecordModel(FrozenModel):
    """Adds serialization helpers for storage adapters."""

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls: Type[T_Model], data: Mapping[str, Any] | BaseModel) -> T_Model:
        return cls.model_validate(data)


def decode_base64(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 payload: {exc}") from exc
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


def encode_base64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


# Raw bytes in memory, standard base64 text when serialized.
Base64Bytes = Annotated[
    bytes,
    BeforeValidator(decode_base64),
    PlainSerializer(encode_base64, return_type=str, when_used="json"),
]


def ensure_image_id(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("image id must be a string")
    if not _TOKEN_RE.fullmatch(value):
        raise ValueError("image id must be non-empty and contain no quotes or newlines")
    return value


def ensure_single_line(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    if "\n" in value or "\r" in value:
        raise ValueError(f"{field_name} cannot contain line breaks")
    return value
