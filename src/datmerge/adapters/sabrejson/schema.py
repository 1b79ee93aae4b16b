"""Pydantic models describing the SabreJSON catalog document."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from datmerge.domain.model import ForceMerging, ForceNodump, ForcePacking, ItemStatus


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SabreJsonBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RomPayload(SabreJsonBaseModel):
    type: Literal["rom"] = "rom"
    name: str
    size: int = -1
    crc: str | None = None
    md5: str | None = None
    sha1: str | None = None
    date: str | None = None
    status: ItemStatus = ItemStatus.NONE

    @field_validator("size", mode="before")
    @classmethod
    def _parse_size(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return -1
        if isinstance(value, str) and value.strip().lower().startswith("0x"):
            return int(value.strip(), 16)
        return value

    @field_validator("size")
    @classmethod
    def _check_size(cls, value: int) -> int:
        if value < -1:
            raise ValueError("size must be -1 (unknown) or non-negative")
        return value

    _normalize_hashes = field_validator("crc", "md5", "sha1", "date", mode="before")(
        _blank_to_none
    )


class DiskPayload(SabreJsonBaseModel):
    type: Literal["disk"] = "disk"
    name: str
    md5: str | None = None
    sha1: str | None = None
    status: ItemStatus = ItemStatus.NONE

    _normalize_hashes = field_validator("md5", "sha1", mode="before")(_blank_to_none)


class ReleasePayload(SabreJsonBaseModel):
    type: Literal["release"] = "release"
    name: str
    region: str | None = None
    language: str | None = None
    date: str | None = None
    is_default: bool | None = Field(default=None, alias="default")


class BiosSetPayload(SabreJsonBaseModel):
    type: Literal["biosset"] = "biosset"
    name: str
    description: str | None = None
    is_default: bool | None = Field(default=None, alias="default")


class SamplePayload(SabreJsonBaseModel):
    type: Literal["sample"] = "sample"
    name: str


class ArchivePayload(SabreJsonBaseModel):
    type: Literal["archive"] = "archive"
    name: str


ItemPayload = Annotated[
    RomPayload | DiskPayload | ReleasePayload | BiosSetPayload | SamplePayload | ArchivePayload,
    Field(discriminator="type"),
]


class MachinePayload(SabreJsonBaseModel):
    name: str = ""
    description: str | None = None
    clone_of: str | None = Field(default=None, alias="cloneof")
    rom_of: str | None = Field(default=None, alias="romof")
    sample_of: str | None = Field(default=None, alias="sampleof")
    year: str | None = None
    manufacturer: str | None = None
    comment: str | None = None
    is_bios: bool = Field(default=False, alias="isbios")
    board: str | None = None
    # validated one by one by the translator so a bad item does not sink the machine
    items: list[dict[str, object]] = Field(default_factory=list)


class HeaderPayload(SabreJsonBaseModel):
    name: str = ""
    description: str = ""
    category: str | None = None
    version: str | None = None
    date: str | None = None
    author: str | None = None
    email: str | None = None
    homepage: str | None = None
    url: str | None = None
    comment: str | None = None
    type: str | None = None
    force_merging: ForceMerging = Field(default=ForceMerging.NONE, alias="forcemerging")
    force_nodump: ForceNodump = Field(default=ForceNodump.NONE, alias="forcenodump")
    force_packing: ForcePacking = Field(default=ForcePacking.NONE, alias="forcepacking")


class CatalogPayload(SabreJsonBaseModel):
    header: HeaderPayload = Field(default_factory=HeaderPayload)
    machines: list[MachinePayload] = Field(default_factory=list)
