"""Data shapes exchanged with the Gleap API."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from .errors import SerializationError

_Parser = Callable[[Any, str], Any]
# A spec entry without a parser keeps the raw JSON value as it is.
_Spec = Iterable[tuple[str, str, Optional[_Parser]]]


class _WireEnum(str, Enum):
    """String enum that maps any unrecognised value to UNKNOWN."""

    @classmethod
    def _missing_(cls, value: object) -> Any:
        if isinstance(value, str):
            return cls["UNKNOWN"]
        return None


class TicketType(_WireEnum):
    BUG = "BUG"
    FEATURE_REQUEST = "FEATURE_REQUEST"
    INQUIRY = "INQUIRY"
    BOT = "BOT"
    UNKNOWN = "UNKNOWN"


class TicketStatus(_WireEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "INPROGRESS"
    DONE = "DONE"
    UNKNOWN = "UNKNOWN"


class TicketPriority(_WireEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"


class MessageType(_WireEnum):
    TEXT = "TEXT"
    NOTE = "NOTE"
    BOT = "BOT"
    BOT_REPLY = "BOT_REPLY"
    USER_TEXT = "USER_TEXT"
    SHARED_COMMENT = "SHARED_COMMENT"
    FEEDBACK_UPDATED = "FEEDBACK_UPDATED"
    UNKNOWN = "UNKNOWN"


def _fail(key: str, expected: str, value: Any) -> None:
    raise SerializationError(
        f"invalid type for field `{key}`: expected {expected}, found {type(value).__name__}"
    )


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        _fail(key, "a string", value)
    return value


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        _fail(key, "a boolean", value)
    return value


def _uint(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        _fail(key, "a non-negative integer", value)
    return value


def _enum(cls: type[_WireEnum]) -> _Parser:
    def parse(value: Any, key: str) -> _WireEnum:
        if not isinstance(value, str):
            _fail(key, "a string", value)
        return cls(value)

    return parse


def _obj(cls: Any) -> _Parser:
    def parse(value: Any, key: str) -> Any:
        return cls.from_dict(value)

    return parse


def _list(item: _Parser) -> _Parser:
    def parse(value: Any, key: str) -> list:
        if not isinstance(value, list):
            _fail(key, "an array", value)
        return [item(entry, key) for entry in value]

    return parse


def _parse_fields(
    data: Any,
    spec: _Spec,
    type_name: str,
    required: Iterable[str] = (),
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Decode known keys by ``spec``; return (attribute values, leftover keys)."""
    if not isinstance(data, dict):
        raise SerializationError(
            f"expected an object for {type_name}, found {type(data).__name__}"
        )
    required = set(required)
    values: dict[str, Any] = {}
    known: set[str] = set()
    for attr, key, parse in spec:
        known.add(key)
        raw = data.get(key)
        if raw is None:
            if key in required:
                raise SerializationError(f"missing field `{key}` in {type_name}")
            values[attr] = None
        elif parse is None:
            values[attr] = raw
        else:
            values[attr] = parse(raw, key)
    extra = {key: value for key, value in data.items() if key not in known}
    return values, extra


def _dump(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_dump(entry) for entry in value]
    return value


def _dump_fields(obj: Any, spec: _Spec, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    out = {key: _dump(getattr(obj, attr)) for attr, key, _ in spec}
    for key, value in (extra or {}).items():
        out.setdefault(key, value)
    return out


@dataclass
class UserRef:
    id: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    _FIELDS = (
        ("id", "id", _str),
        ("email", "email", _str),
        ("first_name", "firstName", _str),
        ("last_name", "lastName", _str),
    )

    @classmethod
    def from_dict(cls, data: Any) -> UserRef:
        values, _ = _parse_fields(data, cls._FIELDS, "UserRef")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS)


@dataclass
class SessionRef:
    id: str | None = None
    email: str | None = None
    name: str | None = None

    _FIELDS = (
        ("id", "id", _str),
        ("email", "email", _str),
        ("name", "name", _str),
    )

    @classmethod
    def from_dict(cls, data: Any) -> SessionRef:
        values, _ = _parse_fields(data, cls._FIELDS, "SessionRef")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS)


@dataclass
class Attachment:
    name: str | None = None
    url: str | None = None
    content_type: str | None = None

    _FIELDS = (
        ("name", "name", _str),
        ("url", "url", _str),
        ("content_type", "type", _str),
    )

    @classmethod
    def from_dict(cls, data: Any) -> Attachment:
        values, _ = _parse_fields(data, cls._FIELDS, "Attachment")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS)


@dataclass
class MessageData:
    """Message payload; ``content`` is plain text or a rich document."""

    content: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = (("content", "content", None),)

    @classmethod
    def from_dict(cls, data: Any) -> MessageData:
        values, extra = _parse_fields(data, cls._FIELDS, "MessageData")
        return cls(**values, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS, self.extra)


@dataclass
class Ticket:
    id: str
    title: str | None = None
    ticket_type: TicketType | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    description: str | None = None
    form_data: Any = None
    custom_data: Any = None
    processing_user: UserRef | None = None
    session: SessionRef | None = None
    latest_comment: Any = None
    tags: list[str] | None = None
    image_url: str | None = None
    archived: bool | None = None
    is_spam: bool | None = None
    created_at: str | None = None
    updated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = (
        ("id", "id", _str),
        ("title", "title", _str),
        ("ticket_type", "type", _enum(TicketType)),
        ("status", "status", _enum(TicketStatus)),
        ("priority", "priority", _enum(TicketPriority)),
        ("description", "description", _str),
        ("form_data", "formData", None),
        ("custom_data", "customData", None),
        ("processing_user", "processingUser", _obj(UserRef)),
        ("session", "session", _obj(SessionRef)),
        ("latest_comment", "latestComment", None),
        ("tags", "tags", _list(_str)),
        ("image_url", "imageUrl", _str),
        ("archived", "archived", _bool),
        ("is_spam", "isSpam", _bool),
        ("created_at", "createdAt", _str),
        ("updated_at", "updatedAt", _str),
    )

    @classmethod
    def from_dict(cls, data: Any) -> Ticket:
        values, extra = _parse_fields(data, cls._FIELDS, "Ticket", required=("id",))
        return cls(**values, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS, self.extra)


@dataclass
class TicketListResponse:
    tickets: list[Ticket]
    count: int | None = None
    total_count: int | None = None

    _FIELDS = (
        ("tickets", "tickets", _list(_obj(Ticket))),
        ("count", "count", _uint),
        ("total_count", "totalCount", _uint),
    )

    @classmethod
    def from_dict(cls, data: Any) -> TicketListResponse:
        values, _ = _parse_fields(
            data, cls._FIELDS, "TicketListResponse", required=("tickets",)
        )
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS)


def _param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class TicketFilters:
    status: str | None = None
    ticket_type: str | None = None
    priority: str | None = None
    archived: bool | None = None
    is_spam: bool | None = None
    sort: str | None = None
    limit: int | None = None
    skip: int | None = None

    def to_params(self) -> list[tuple[str, str]]:
        """Query parameters for the set filters, in a fixed order."""
        pairs = (
            ("status", self.status),
            ("type", self.ticket_type),
            ("priority", self.priority),
            ("archived", self.archived),
            ("isSpam", self.is_spam),
            ("sort", self.sort),
            ("limit", self.limit),
            ("skip", self.skip),
        )
        return [(key, _param(value)) for key, value in pairs if value is not None]


@dataclass
class Message:
    id: str
    ticket: str | None = None
    comment: Any = None
    message_type: MessageType | None = None
    data: MessageData | None = None
    bot: bool | None = None
    is_note: bool | None = None
    is_reply: bool | None = None
    user: UserRef | None = None
    session: SessionRef | None = None
    attachments: list[Attachment] | None = None
    index: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = (
        ("id", "id", _str),
        ("ticket", "ticket", _str),
        ("comment", "comment", None),
        ("message_type", "type", _enum(MessageType)),
        ("data", "data", _obj(MessageData)),
        ("bot", "bot", _bool),
        ("is_note", "isNote", _bool),
        ("is_reply", "isReply", _bool),
        ("user", "user", _obj(UserRef)),
        ("session", "session", _obj(SessionRef)),
        ("attachments", "attachments", _list(_obj(Attachment))),
        ("index", "index", _uint),
        ("created_at", "createdAt", _str),
        ("updated_at", "updatedAt", _str),
    )

    @classmethod
    def from_dict(cls, data: Any) -> Message:
        values, extra = _parse_fields(data, cls._FIELDS, "Message", required=("id",))
        return cls(**values, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self, self._FIELDS, self.extra)


@dataclass
class CreateMessageRequest:
    ticket: str
    comment: Any
    is_note: bool | None = None
    session: str | None = None
    attachments: list[Attachment] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Request body; unset optional fields are left out."""
        body: dict[str, Any] = {"ticket": self.ticket, "comment": self.comment}
        if self.is_note is not None:
            body["isNote"] = self.is_note
        if self.session is not None:
            body["session"] = self.session
        if self.attachments is not None:
            body["attachments"] = [a.to_dict() for a in self.attachments]
        return body


@dataclass
class MessageFilters:
    ticket: str | None = None
    message_type: str | None = None
    bot: bool | None = None
    limit: int | None = None
    skip: int | None = None

    def to_params(self) -> list[tuple[str, str]]:
        """Query parameters for the set filters, in a fixed order."""
        pairs = (
            ("ticket", self.ticket),
            ("type", self.message_type),
            ("bot", self.bot),
            ("limit", self.limit),
            ("skip", self.skip),
        )
        return [(key, _param(value)) for key, value in pairs if value is not None]