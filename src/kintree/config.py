"""Settings for relationship validation and hierarchy building."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KintreeSettings(BaseSettings):
    """Tunable limits and labels, overridable through KINTREE_* env vars."""

    model_config = SettingsConfigDict(
        env_prefix="KINTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_parents: int = Field(default=2, ge=1)
    enforce_age_consistency: bool = True

    synthetic_root_label: str = "(Multiple Families)"
    empty_root_label: str = "(Empty Tree)"


settings = KintreeSettings()
