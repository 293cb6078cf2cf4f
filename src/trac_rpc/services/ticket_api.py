"""``ticket.*`` — tickets, their attachments and the ticket enumerations.

Sub-namespaces such as ``ticket.component.*`` are reached through
attributes mirroring the remote name, e.g. ``client.ticket.component.get``.
Ticket ids are sent as strings, which is what Trac's RPC plugin expects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Generic, TypeVar

from trac_rpc.domain.entities import (
    Attachment,
    Component,
    Milestone,
    Ticket,
    TicketField,
    Version,
)
from trac_rpc.domain.ports.transport import RpcTransport
from trac_rpc.services.codec import decode_binary_hint
from trac_rpc.services.endpoint import Endpoint
from trac_rpc.services.record_decoder import (
    decode_attachment,
    decode_component,
    decode_list,
    decode_milestone,
    decode_ticket,
    decode_ticket_field,
    decode_version,
    expect_bool,
    expect_int,
    expect_int_list,
    expect_numeric_str,
)

R = TypeVar("R")

# ``ticket.query`` filter used by :meth:`TicketApi.get_ids`
OPEN_TICKETS_QUERY = "max=0&status!=closed"


# ── Sub-namespaces ──────────────────────────────────────────────────────────


class RecordNamespace(Endpoint, Generic[R]):
    """``ticket.<kind>.*`` where each entry is a named record."""

    def __init__(
        self,
        transport: RpcTransport,
        namespace: str,
        decode: Callable[[Any], R],
    ) -> None:
        super().__init__(transport)
        self._ns = namespace
        self._decode = decode

    def get_all(self) -> list[str]:
        return self._names(f"{self._ns}.getAll")

    def get(self, name: str) -> R:
        return self._decode(self._call(f"{self._ns}.get", name))

    def create(self, name: str, record: R) -> int:
        return expect_int(self._call(f"{self._ns}.create", name, record), allow_null=True)

    def update(self, name: str, record: R) -> int:
        return expect_int(self._call(f"{self._ns}.update", name, record), allow_null=True)

    def delete(self, name: str) -> int:
        return expect_int(self._call(f"{self._ns}.delete", name), allow_null=True)


class EnumNamespace(Endpoint):
    """``ticket.<enum>.*`` where each entry maps a name to an ordering value."""

    def __init__(self, transport: RpcTransport, namespace: str) -> None:
        super().__init__(transport)
        self._ns = namespace

    def get_all(self) -> list[str]:
        return self._names(f"{self._ns}.getAll")

    def get(self, name: str) -> int:
        # The value comes back as a string, e.g. "3"
        return expect_numeric_str(self._call(f"{self._ns}.get", name), f"{self._ns}.get")

    def create(self, name: str, value: int) -> int:
        return expect_int(self._call(f"{self._ns}.create", name, value), allow_null=True)

    def update(self, name: str, value: int) -> int:
        return expect_int(self._call(f"{self._ns}.update", name, value), allow_null=True)

    def delete(self, name: str) -> int:
        return expect_int(self._call(f"{self._ns}.delete", name), allow_null=True)


# ── Tickets ─────────────────────────────────────────────────────────────────


class TicketApi(Endpoint):
    def __init__(self, transport: RpcTransport) -> None:
        super().__init__(transport)
        self.component: RecordNamespace[Component] = RecordNamespace(
            transport, "ticket.component", decode_component
        )
        self.milestone: RecordNamespace[Milestone] = RecordNamespace(
            transport, "ticket.milestone", decode_milestone
        )
        self.version: RecordNamespace[Version] = RecordNamespace(
            transport, "ticket.version", decode_version
        )
        self.priority = EnumNamespace(transport, "ticket.priority")
        self.resolution = EnumNamespace(transport, "ticket.resolution")
        self.severity = EnumNamespace(transport, "ticket.severity")
        self.type = EnumNamespace(transport, "ticket.type")

    def get_ids(self) -> list[int]:
        """Return the ids of all open tickets."""
        return self.query(OPEN_TICKETS_QUERY)

    def get(self, number: int) -> Ticket:
        return decode_ticket(self._call("ticket.get", str(number)))

    def query(self, qstr: str) -> list[int]:
        """Run a ticket query and return the matching ids.

        Paging follows the server's stored settings unless ``qstr`` sets
        ``max``/``page`` itself.
        """
        return expect_int_list(self._call("ticket.query", qstr), "ticket.query")

    def create(self, ticket: Ticket, *, notify: bool = False) -> int:
        """Create ``ticket`` and return its new id.

        Overriding ``time`` requires admin permission on the server.
        """
        params: list[Any] = [ticket.summary, ticket.description, ticket.attributes()]
        if notify:
            params.append(True)
        return expect_int(self._call("ticket.create", *params), "ticket.create")

    def delete(self, number: int) -> int:
        return expect_int(self._call("ticket.delete", str(number)), allow_null=True)

    def fields(self) -> list[TicketField]:
        """Return the description of every ticket field, custom ones included."""
        return decode_list(
            self._call("ticket.getTicketFields"), decode_ticket_field, "ticket fields"
        )

    def statuses(self) -> list[str]:
        """Return all ticket states described by the active workflow."""
        return self._names("ticket.status.getAll")

    # ── Attachments ─────────────────────────────────────────────────────

    def attachments(self, number: int) -> list[Attachment]:
        """Return attachment metadata for ticket ``number``."""
        return decode_list(
            self._call("ticket.listAttachments", str(number)),
            decode_attachment,
            "attachments",
        )

    def attachment(self, number: int, filename: str) -> bytes:
        """Return the content of one attachment."""
        return decode_binary_hint(
            self._call("ticket.getAttachment", str(number), filename)
        )

    def delete_attachment(self, number: int, filename: str) -> bool:
        return expect_bool(
            self._call("ticket.deleteAttachment", str(number), filename),
            "ticket.deleteAttachment",
        )

    # ── Unsupported ─────────────────────────────────────────────────────

    def add_attachment(
        self, number: int, filename: str, description: str, data: bytes
    ) -> str:
        self._unsupported("ticket.putAttachment")

    def recent_changes(self, since: datetime) -> list[int]:
        self._unsupported("ticket.getRecentChanges")

    def actions(self, number: int) -> list[str]:
        self._unsupported("ticket.getActions")

    def update(self, number: int, comment: str, attributes: dict[str, Any]) -> Ticket:
        self._unsupported("ticket.update")

    def changelog(self, number: int) -> list[tuple[Any, ...]]:
        self._unsupported("ticket.changeLog")
