"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Self
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_INVOICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class LeanpubInvoiceId:
    """Invoice ID of a Leanpub purchase, also used to identify the member who claimed it."""

    value: str

    def __post_init__(self) -> None:
        if not _INVOICE_ID_PATTERN.match(self.value):
            raise ValueError("Invoice ID must be a non-empty, URL-safe string")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EmailAddress:
    value: str

    def __post_init__(self) -> None:
        local_part, at, domain = self.value.rpartition("@")
        if not at or not local_part or not domain or "@" in local_part:
            raise ValueError("Invalid email address")
        object.__setattr__(self, "value", f"{local_part}@{domain.lower()}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TimeZone:
    """IANA time zone name, e.g. Europe/Amsterdam."""

    value: str

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {self.value!r}") from exc

    def as_tzinfo(self) -> tzinfo:
        return ZoneInfo(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AccessToken:
    value: str

    def __post_init__(self) -> None:
        if not self.value.strip():
            raise ValueError("Access token cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Capacity:
    """Maximum number of attendees for a session."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be at least 1")


@dataclass(frozen=True)
class ScheduledDate:
    """Timezone-aware moment at which a session takes place."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None or self.value.utcoffset() is None:
            raise ValueError("Scheduled date must be timezone-aware")

    def in_time_zone(self, time_zone: TimeZone) -> datetime:
        return self.value.astimezone(time_zone.as_tzinfo())
