"""Domain entities — transient records rebuilt from every response."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Ticket:
    """A Trac ticket.

    Only ``id`` is guaranteed; every other attribute keeps its default when
    the server does not send it.
    """

    id: int = 0
    time: datetime | None = None
    changetime: datetime | None = None
    owner: str = ""
    reporter: str = ""
    cc: str = ""
    summary: str = ""
    description: str = ""
    project: str = ""
    status: str = ""
    type: str = ""
    priority: str = ""
    milestone: str = ""
    component: str = ""
    blockedby: str = ""
    blocking: str = ""
    keywords: str = ""
    parents: str = ""
    resolution: str = ""
    version: str = ""

    def attributes(self) -> dict[str, Any]:
        """Return the non-empty attributes sent alongside summary/description.

        ``id``, ``summary`` and ``description`` travel as separate call
        parameters and are therefore left out.
        """
        attrs: dict[str, Any] = {}
        for f in fields(self):
            if f.name in ("id", "summary", "description"):
                continue
            value = getattr(self, f.name)
            if value is None or value == "":
                continue
            attrs[f.name] = value
        return attrs


@dataclass(frozen=True, slots=True)
class TicketField:
    """Description of one ticket field as returned by ``ticket.getTicketFields``."""

    name: str
    label: str = ""
    type: str = ""
    value: str = ""
    format: str = ""
    options: list[str] = field(default_factory=list)
    order: int = 0
    custom: bool = False
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Component:
    name: str
    owner: str = ""
    description: str = ""

    def attributes(self) -> dict[str, Any]:
        return {"name": self.name, "owner": self.owner, "description": self.description}


@dataclass(frozen=True, slots=True)
class Milestone:
    """A ticket milestone. Unset dates travel as ``0`` on the wire."""

    name: str
    description: str = ""
    due: datetime | None = None
    completed: datetime | None = None

    def attributes(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "due": self.due or 0,
            "completed": self.completed or 0,
        }


@dataclass(frozen=True, slots=True)
class Version:
    name: str
    description: str = ""
    time: datetime | None = None

    def attributes(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "time": self.time or 0,
        }


@dataclass(frozen=True, slots=True)
class Attachment:
    """Attachment metadata; ``content`` is only filled when the bytes were sent."""

    filename: str
    description: str = ""
    size: int = 0
    time: datetime | None = None
    author: str = ""
    content: bytes | None = None


@dataclass(frozen=True, slots=True)
class PageInfo:
    name: str
    author: str = ""
    version: int = 0
    last_modified: datetime | None = None
    comment: str = ""


@dataclass(frozen=True, slots=True)
class Page:
    """The latest version of a wiki page: raw markup, rendered HTML and metadata."""

    info: PageInfo
    wiki: str = ""
    html: str = ""


@dataclass(frozen=True, slots=True)
class APIVersion:
    """Remote API version.

    ``epoch`` is 0 for Trac 0.10 and 1 for Trac 0.11 or higher.
    """

    epoch: int
    major: int
    minor: int
