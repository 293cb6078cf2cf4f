from __future__ import annotations

from datetime import datetime, timezone

import pytest

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
from trac_rpc.services.record_decoder import (
    TICKET_FIELDS,
    decode_api_version,
    decode_attachment,
    decode_component,
    decode_milestone,
    decode_page_info,
    decode_ticket,
    decode_ticket_field,
    decode_version,
    expect_int,
    expect_int_list,
    expect_numeric_str,
    expect_str_list,
)

UTC = timezone.utc


def dt(value: str) -> dict[str, list[str]]:
    return {"__jsonclass__": ["datetime", value]}


# ── Tickets ─────────────────────────────────────────────────────────────────


def test_decode_ticket_matches_field_names_case_insensitively() -> None:
    ticket = decode_ticket([42, {"Status": "closed", "Owner": "alice"}])
    assert ticket == Ticket(id=42, status="closed", owner="alice")
    assert ticket.summary == ""
    assert ticket.time is None


def test_decode_ticket_is_independent_of_mapping_order() -> None:
    attrs = {
        "summary": "Crash on save",
        "status": "new",
        "time": dt("2024-03-01T10:15:30"),
        "keywords": "io",
    }
    forward = decode_ticket([7, attrs])
    backward = decode_ticket([7, dict(reversed(list(attrs.items())))])
    assert forward == backward
    assert forward.time == datetime(2024, 3, 1, 10, 15, 30, tzinfo=UTC)


def test_decode_ticket_ignores_unknown_fields() -> None:
    ticket = decode_ticket([1, {"status": "new", "_ts": "1709288130", "x_custom": "y"}])
    assert ticket == Ticket(id=1, status="new")
    assert not hasattr(ticket, "x_custom")


def test_decode_ticket_accepts_trac_reply_shape() -> None:
    raw = [
        3,
        dt("2024-01-01T00:00:00"),
        dt("2024-01-02T00:00:00"),
        {"summary": "s", "changetime": dt("2024-01-03T00:00:00")},
    ]
    ticket = decode_ticket(raw)
    assert ticket.time == datetime(2024, 1, 1, tzinfo=UTC)
    # attribute mapping wins over the positional stamp
    assert ticket.changetime == datetime(2024, 1, 3, tzinfo=UTC)
    assert ticket.summary == "s"


def test_decode_ticket_stringifies_numeric_text_fields() -> None:
    assert decode_ticket([5, {"priority": 3}]).priority == "3"


def test_decode_ticket_fails_whole_record_on_bad_date() -> None:
    with pytest.raises(DecodeError):
        decode_ticket([5, {"status": "new", "time": dt("03/01/2024")}])


def test_decode_ticket_rejects_binary_in_time_field() -> None:
    with pytest.raises(DecodeError):
        decode_ticket([5, {"time": {"__jsonclass__": ["binary", "aGVsbG8="]}}])


@pytest.mark.parametrize("raw", [[], {"id": 1}, ["1", {}], [True, {}], None])
def test_decode_ticket_requires_leading_integer_id(raw: object) -> None:
    with pytest.raises(DecodeError):
        decode_ticket(raw)


def test_ticket_field_table_covers_every_attribute() -> None:
    attrs = {spec.attr for spec in TICKET_FIELDS.values()}
    assert attrs == set(Ticket.__dataclass_fields__) - {"id"}


def test_ticket_attributes_skip_identity_and_empty_values() -> None:
    stamp = datetime(2024, 3, 1, tzinfo=UTC)
    ticket = Ticket(id=9, summary="s", description="d", owner="bob", time=stamp)
    assert ticket.attributes() == {"owner": "bob", "time": stamp}


# ── Attachments ─────────────────────────────────────────────────────────────


def test_decode_attachment() -> None:
    raw = ["log.txt", "server log", 120, dt("2024-03-01T10:15:30"), "alice"]
    assert decode_attachment(raw) == Attachment(
        filename="log.txt",
        description="server log",
        size=120,
        time=datetime(2024, 3, 1, 10, 15, 30, tzinfo=UTC),
        author="alice",
    )


def test_decode_attachment_with_content() -> None:
    raw = ["a.bin", "", 5, dt("2024-03-01T10:15:30"), "bob", {"__jsonclass__": ["binary", "aGVsbG8="]}]
    assert decode_attachment(raw).content == b"hello"


def test_decode_attachment_with_bad_base64_fails() -> None:
    raw = ["a.bin", "", 5, dt("2024-03-01T10:15:30"), "bob", {"__jsonclass__": ["binary", "%%%"]}]
    with pytest.raises(DecodeError):
        decode_attachment(raw)


def test_decode_attachment_requires_time_hint() -> None:
    with pytest.raises(DecodeError):
        decode_attachment(["a", "", 1, "2024-03-01T10:15:30", "bob"])


# ── Mapping records ─────────────────────────────────────────────────────────


def test_decode_page_info() -> None:
    raw = {
        "name": "WikiStart",
        "author": "alice",
        "version": 4,
        "lastModified": dt("2024-03-01T10:15:30"),
        "comment": "typo",
    }
    assert decode_page_info(raw) == PageInfo(
        name="WikiStart",
        author="alice",
        version=4,
        last_modified=datetime(2024, 3, 1, 10, 15, 30, tzinfo=UTC),
        comment="typo",
    )


def test_decode_page_info_keys_are_case_insensitive() -> None:
    info = decode_page_info({"Name": "A", "LASTMODIFIED": dt("2024-03-01T10:15:30")})
    assert info.name == "A"
    assert info.last_modified is not None


def test_decode_milestone_treats_zero_as_no_date() -> None:
    raw = {"name": "1.0", "description": "", "due": dt("2024-06-01T00:00:00"), "completed": 0}
    assert decode_milestone(raw) == Milestone(
        name="1.0", due=datetime(2024, 6, 1, tzinfo=UTC), completed=None
    )


def test_decode_version() -> None:
    raw = {"name": "2.1", "description": "LTS", "time": dt("2024-06-01T00:00:00")}
    assert decode_version(raw) == Version(
        name="2.1", description="LTS", time=datetime(2024, 6, 1, tzinfo=UTC)
    )


def test_decode_component() -> None:
    raw = {"name": "core", "owner": "alice", "description": "Core bits"}
    assert decode_component(raw) == Component(name="core", owner="alice", description="Core bits")


def test_decode_ticket_field() -> None:
    raw = {
        "name": "priority",
        "label": "Priority",
        "type": "select",
        "value": "major",
        "options": ["blocker", "major", "minor"],
        "order": 2,
        "optional": False,
        "custom": True,
    }
    assert decode_ticket_field(raw) == TicketField(
        name="priority",
        label="Priority",
        type="select",
        value="major",
        options=["blocker", "major", "minor"],
        order=2,
        custom=True,
    )


def test_mapping_records_require_a_name() -> None:
    with pytest.raises(DecodeError, match="no name"):
        decode_component({"owner": "alice"})


def test_mapping_records_require_an_object() -> None:
    with pytest.raises(DecodeError):
        decode_version(["2.1", "LTS"])


# ── Scalars ─────────────────────────────────────────────────────────────────


def test_decode_api_version() -> None:
    assert decode_api_version([1, 1, 2]) == APIVersion(epoch=1, major=1, minor=2)
    with pytest.raises(DecodeError):
        decode_api_version([1, 1])


def test_scalar_helpers() -> None:
    assert expect_int(None, allow_null=True) == 0
    assert expect_numeric_str("3") == 3
    assert expect_int_list([1, 2]) == [1, 2]
    assert expect_str_list(["a"]) == ["a"]
    with pytest.raises(DecodeError):
        expect_int(None)
    with pytest.raises(DecodeError):
        expect_int(True)
    with pytest.raises(DecodeError):
        expect_numeric_str("three")
    with pytest.raises(DecodeError):
        expect_str_list(["a", 1])
