"""Translate between SabreJSON payloads and domain records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeAlias

from pydantic import TypeAdapter, ValidationError

from datmerge.domain.model import (
    Archive,
    BiosSet,
    CatalogHeader,
    DatItem,
    Disk,
    Machine,
    Release,
    Rom,
    Sample,
)
from datmerge.domain.model.constants import SUPERDAT_TYPE

from .schema import (
    ArchivePayload,
    BiosSetPayload,
    DiskPayload,
    HeaderPayload,
    ItemPayload,
    MachinePayload,
    ReleasePayload,
    RomPayload,
    SamplePayload,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

log = logging.getLogger(__name__)

_ITEM_ADAPTER: TypeAdapter[ItemPayload] = TypeAdapter(ItemPayload)

AnyItemPayload: TypeAlias = (
    RomPayload | DiskPayload | ReleasePayload | BiosSetPayload | SamplePayload | ArchivePayload
)


def header_from_payload(payload: HeaderPayload) -> CatalogHeader:
    return CatalogHeader(
        name=payload.name,
        description=payload.description,
        category=payload.category,
        version=payload.version,
        date=payload.date,
        author=payload.author,
        email=payload.email,
        homepage=payload.homepage,
        url=payload.url,
        comment=payload.comment,
        is_superdat=SUPERDAT_TYPE in (payload.type or ""),
        force_merging=payload.force_merging,
        force_nodump=payload.force_nodump,
        force_packing=payload.force_packing,
    )


def header_to_payload(header: CatalogHeader) -> HeaderPayload:
    return HeaderPayload(
        name=header.name,
        description=header.description,
        category=header.category,
        version=header.version,
        date=header.date,
        author=header.author,
        email=header.email,
        homepage=header.homepage,
        url=header.url,
        comment=header.comment,
        type=SUPERDAT_TYPE if header.is_superdat else None,
        force_merging=header.force_merging,
        force_nodump=header.force_nodump,
        force_packing=header.force_packing,
    )


def machine_from_payload(payload: MachinePayload) -> Machine:
    return Machine(
        name=payload.name.strip(),
        description=payload.description,
        clone_of=payload.clone_of,
        rom_of=payload.rom_of,
        sample_of=payload.sample_of,
        year=payload.year,
        manufacturer=payload.manufacturer,
        comment=payload.comment,
        is_bios=payload.is_bios,
        board=payload.board,
    )


def machine_to_payload(machine: Machine, items: Sequence[DatItem]) -> MachinePayload:
    return MachinePayload(
        name=machine.name,
        description=machine.description,
        clone_of=machine.clone_of,
        rom_of=machine.rom_of,
        sample_of=machine.sample_of,
        year=machine.year,
        manufacturer=machine.manufacturer,
        comment=machine.comment,
        is_bios=machine.is_bios,
        board=machine.board,
        items=[
            item_to_payload(item).model_dump(mode="json", by_alias=True, exclude_none=True)
            for item in items
        ],
    )


def items_from_payload(payload: MachinePayload, machine: Machine) -> Iterator[DatItem]:
    """Yield the valid items of ``payload``; invalid ones are logged and skipped."""

    for index, raw in enumerate(payload.items):
        try:
            item_payload = _ITEM_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            log.warning(
                "Skipping invalid item #%d in machine %r: %s",
                index,
                machine.name,
                exc.errors(include_url=False),
            )
            continue
        yield item_from_payload(item_payload, machine)


def item_from_payload(payload: AnyItemPayload, machine: Machine) -> DatItem:
    match payload:
        case RomPayload():
            return Rom(
                name=payload.name,
                machine=machine,
                size=payload.size,
                crc=payload.crc,
                md5=payload.md5,
                sha1=payload.sha1,
                date=payload.date,
                status=payload.status,
            )
        case DiskPayload():
            return Disk(
                name=payload.name,
                machine=machine,
                md5=payload.md5,
                sha1=payload.sha1,
                status=payload.status,
            )
        case ReleasePayload():
            return Release(
                name=payload.name,
                machine=machine,
                region=payload.region,
                language=payload.language,
                date=payload.date,
                is_default=payload.is_default,
            )
        case BiosSetPayload():
            return BiosSet(
                name=payload.name,
                machine=machine,
                description=payload.description,
                is_default=payload.is_default,
            )
        case SamplePayload():
            return Sample(name=payload.name, machine=machine)
        case ArchivePayload():
            return Archive(name=payload.name, machine=machine)


def item_to_payload(item: DatItem) -> AnyItemPayload:
    match item:
        case Rom():
            return RomPayload(
                name=item.name,
                size=item.size,
                crc=item.crc,
                md5=item.md5,
                sha1=item.sha1,
                date=item.date,
                status=item.status,
            )
        case Disk():
            return DiskPayload(name=item.name, md5=item.md5, sha1=item.sha1, status=item.status)
        case Release():
            return ReleasePayload(
                name=item.name,
                region=item.region,
                language=item.language,
                date=item.date,
                is_default=item.is_default,
            )
        case BiosSet():
            return BiosSetPayload(
                name=item.name, description=item.description, is_default=item.is_default
            )
        case Sample():
            return SamplePayload(name=item.name)
        case _:
            return ArchivePayload(name=item.name)
