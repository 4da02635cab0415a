"""Archive record models.

Field aliases keep the snapshot keys (``snowflake``, ``archiveId``,
``localFile``...) that existing ``metadata.json`` files use.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class ArchivedAttachment(BaseModel):
    """One downloaded attachment: where it came from and where it lives."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_url: str = Field(alias="url")
    local_file_name: str = Field(alias="localFile")


class ArchiveRecord(BaseModel):
    """Persisted metadata for one archived starboard message."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_id: str = Field(alias="snowflake")
    archive_id: str = Field(alias="archiveId")
    source_url: str = Field(alias="url")
    star_count: int = Field(default=0, ge=0, alias="stars")
    text_content: str | None = Field(default=None, alias="textContent")
    attachments: tuple[ArchivedAttachment, ...] = ()

    @field_validator("source_id")
    @classmethod
    def ensure_snowflake(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError(f"source_id must be a numeric snowflake, got {v!r}")
        return v


RecordList = TypeAdapter(list[ArchiveRecord])
