"""Runtime settings for persistence and image intake.

Values come from keyword arguments or ``IMGDOC_*`` environment variables,
for example ``IMGDOC_ATOMIC_WRITES=false``. Both files of a pair are always
UTF-8.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="IMGDOC_", frozen=True, extra="ignore")

    meta_suffix: str = Field(default=".meta", min_length=1)
    atomic_writes: bool = True
    metadata_indent: int | None = Field(default=2, ge=0)
    sample_width: int = Field(default=200, gt=0)
    sample_height: int = Field(default=100, gt=0)
