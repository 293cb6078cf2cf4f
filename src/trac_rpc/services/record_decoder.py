"""Record decoder — turns loosely-typed JSON results into typed entities.

Field names arriving from Trac are matched case-insensitively against an
explicit table per record type.  Each table maps the normalised wire name
to the attribute it fills and the kind of value it holds.  Unknown wire
names are ignored; a value that cannot be converted fails the whole record,
so no partially-populated entity ever escapes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

from trac_rpc.domain.entities import (
    APIVersion,
    Attachment,
    Component,
    Milestone,
    PageInfo,
    Ticket,
    TicketField,
    Version,
)
from trac_rpc.domain.exceptions import DecodeError
from trac_rpc.services.codec import (
    decode_binary_hint,
    decode_datetime_hint,
    is_class_hint,
)

R = TypeVar("R")


class FieldKind(str, Enum):
    """How a wire value is converted before it is assigned."""

    TEXT = "text"
    INT = "int"
    BOOL = "bool"
    TIME = "time"
    TEXT_LIST = "text_list"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    attr: str
    kind: FieldKind = FieldKind.TEXT


FieldTable = Mapping[str, FieldSpec]


def _table(record: type, *, skip: tuple[str, ...] = (), **overrides: FieldSpec) -> dict[str, FieldSpec]:
    """Build a table covering every attribute of ``record`` except ``skip``.

    Attributes default to TEXT keyed by their own name; ``overrides`` maps a
    wire name to a different spec.  Import fails if an attribute is left
    without an entry.
    """
    table: dict[str, FieldSpec] = {}
    for f in fields(record):
        if f.name in skip:
            continue
        table[f.name] = FieldSpec(f.name)
    for wire_name, spec in overrides.items():
        table.pop(spec.attr, None)
        table[wire_name.lower()] = spec

    covered = {spec.attr for spec in table.values()}
    missing = {f.name for f in fields(record)} - covered - set(skip)
    if missing:
        raise RuntimeError(f"{record.__name__} field table misses {sorted(missing)}")
    return table


TICKET_FIELDS = _table(
    Ticket,
    skip=("id",),
    time=FieldSpec("time", FieldKind.TIME),
    changetime=FieldSpec("changetime", FieldKind.TIME),
)

TICKET_FIELD_FIELDS = _table(
    TicketField,
    options=FieldSpec("options", FieldKind.TEXT_LIST),
    order=FieldSpec("order", FieldKind.INT),
    custom=FieldSpec("custom", FieldKind.BOOL),
    optional=FieldSpec("optional", FieldKind.BOOL),
)

COMPONENT_FIELDS = _table(Component)

MILESTONE_FIELDS = _table(
    Milestone,
    due=FieldSpec("due", FieldKind.TIME),
    completed=FieldSpec("completed", FieldKind.TIME),
)

VERSION_FIELDS = _table(Version, time=FieldSpec("time", FieldKind.TIME))

PAGE_INFO_FIELDS = _table(
    PageInfo,
    version=FieldSpec("version", FieldKind.INT),
    lastModified=FieldSpec("last_modified", FieldKind.TIME),
)


# ── Field conversion ────────────────────────────────────────────────────────


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _convert(value: Any, spec: FieldSpec, wire_name: str) -> Any:
    kind = spec.kind
    if kind is FieldKind.TIME:
        if is_class_hint(value):
            return decode_datetime_hint(value)
        # Trac sends 0 for "no date"
        if value is None or value == 0 or value == "":
            return None
        raise DecodeError(f"Field {wire_name!r}: expected a datetime, got {value!r}")

    if kind is FieldKind.TEXT:
        if isinstance(value, str):
            return value
        if value is None:
            return ""
        if _is_int(value) or isinstance(value, float):
            return str(value)
        raise DecodeError(f"Field {wire_name!r}: expected text, got {type(value).__name__}")

    if kind is FieldKind.INT:
        return expect_int(value, f"field {wire_name!r}")

    if kind is FieldKind.BOOL:
        if isinstance(value, bool):
            return value
        if _is_int(value):
            return bool(value)
        raise DecodeError(f"Field {wire_name!r}: expected a boolean, got {value!r}")

    if kind is FieldKind.TEXT_LIST:
        return expect_str_list(value, f"field {wire_name!r}")

    raise AssertionError(f"unhandled field kind {kind}")


def decode_fields(raw: Mapping[str, Any], table: FieldTable) -> dict[str, Any]:
    """Map wire entries onto attribute values using ``table``.

    Iteration order of ``raw`` does not matter: each attribute is keyed by
    its normalised wire name.
    """
    values: dict[str, Any] = {}
    for wire_name, value in raw.items():
        spec = table.get(str(wire_name).lower())
        if spec is None:
            continue
        values[spec.attr] = _convert(value, spec, wire_name)
    return values


def _decode_record(
    raw: Any, table: FieldTable, factory: Callable[..., R], what: str
) -> R:
    if not isinstance(raw, Mapping):
        raise DecodeError(f"Expected a {what} object, got {type(raw).__name__}")
    values = decode_fields(raw, table)
    if "name" not in values:
        raise DecodeError(f"{what} has no name")
    return factory(**values)


# ── Records ─────────────────────────────────────────────────────────────────


def decode_ticket(raw: Any) -> Ticket:
    """Decode ``[id, {field: value, ...}]``.

    Trac's ``ticket.get`` actually replies ``[id, created, changed, attrs]``;
    class hints that follow the id are taken as ``time`` then ``changetime``,
    and matching entries in the attribute mapping override them.
    """
    if not isinstance(raw, (list, tuple)) or not raw:
        raise DecodeError(f"Expected a ticket array, got {raw!r}")
    ticket_id = raw[0]
    if isinstance(ticket_id, float) and ticket_id.is_integer():
        ticket_id = int(ticket_id)
    if not _is_int(ticket_id):
        raise DecodeError(f"Ticket id must be an integer, got {ticket_id!r}")

    values: dict[str, Any] = {}
    positional: list[datetime] = []
    for element in raw[1:]:
        if is_class_hint(element):
            positional.append(decode_datetime_hint(element))
        elif isinstance(element, Mapping):
            values.update(decode_fields(element, TICKET_FIELDS))

    for attr, stamp in zip(("time", "changetime"), positional):
        values.setdefault(attr, stamp)
    return Ticket(id=ticket_id, **values)


def decode_attachment(raw: Any) -> Attachment:
    """Decode ``[filename, description, size, time, author(, content)]``."""
    if not isinstance(raw, (list, tuple)) or len(raw) < 5:
        raise DecodeError(f"Expected a 5-element attachment array, got {raw!r}")
    filename, description, size, time, author = raw[:5]
    content = decode_binary_hint(raw[5]) if len(raw) > 5 and raw[5] is not None else None
    return Attachment(
        filename=expect_str(filename, "attachment filename"),
        description=expect_str(description, "attachment description"),
        size=expect_int(size, "attachment size"),
        time=decode_datetime_hint(time),
        author=expect_str(author, "attachment author"),
        content=content,
    )


def decode_api_version(raw: Any) -> APIVersion:
    """Decode ``[epoch, major, minor]``."""
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise DecodeError(f"Expected [epoch, major, minor], got {raw!r}")
    epoch, major, minor = (expect_int(v, "API version") for v in raw)
    return APIVersion(epoch=epoch, major=major, minor=minor)


def decode_page_info(raw: Any) -> PageInfo:
    return _decode_record(raw, PAGE_INFO_FIELDS, PageInfo, "page info")


def decode_component(raw: Any) -> Component:
    return _decode_record(raw, COMPONENT_FIELDS, Component, "component")


def decode_milestone(raw: Any) -> Milestone:
    return _decode_record(raw, MILESTONE_FIELDS, Milestone, "milestone")


def decode_version(raw: Any) -> Version:
    return _decode_record(raw, VERSION_FIELDS, Version, "version")


def decode_ticket_field(raw: Any) -> TicketField:
    return _decode_record(raw, TICKET_FIELD_FIELDS, TicketField, "ticket field")


def decode_list(raw: Any, item: Callable[[Any], R], what: str) -> list[R]:
    if not isinstance(raw, list):
        raise DecodeError(f"Expected a list of {what}, got {type(raw).__name__}")
    return [item(entry) for entry in raw]


# ── Scalars ─────────────────────────────────────────────────────────────────


def expect_int(raw: Any, what: str = "result", *, allow_null: bool = False) -> int:
    if allow_null and raw is None:
        return 0
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if not _is_int(raw):
        raise DecodeError(f"Expected an integer {what}, got {raw!r}")
    return raw


def expect_numeric_str(raw: Any, what: str = "result") -> int:
    """Decode an integer that the server sends as a string, e.g. ``"3"``."""
    if _is_int(raw):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise DecodeError(f"Expected a numeric {what}, got {raw!r}") from exc
    raise DecodeError(f"Expected a numeric {what}, got {raw!r}")


def expect_str(raw: Any, what: str = "result") -> str:
    if not isinstance(raw, str):
        raise DecodeError(f"Expected a string {what}, got {raw!r}")
    return raw


def expect_bool(raw: Any, what: str = "result") -> bool:
    if not isinstance(raw, bool):
        raise DecodeError(f"Expected a boolean {what}, got {raw!r}")
    return raw


def expect_str_list(raw: Any, what: str = "result") -> list[str]:
    if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
        raise DecodeError(f"Expected a list of strings for {what}, got {raw!r}")
    return list(raw)


def expect_int_list(raw: Any, what: str = "result") -> list[int]:
    if not isinstance(raw, list):
        raise DecodeError(f"Expected a list of integers for {what}, got {raw!r}")
    return [expect_int(v, what) for v in raw]
