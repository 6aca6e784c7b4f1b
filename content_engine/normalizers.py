"""
Value normalization helpers shared by the component builders.

The upstream agent sends loosely-typed JSON with many spellings of the same
field. These helpers implement the lookup rule used everywhere: take the
first alias key that is present (JSON null counts as absent), then coerce
that one value. A present value of the wrong type yields None; the lookup
does not fall through to later aliases.
"""

import logging
import math
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

_MISSING = object()

# Tried in order before falling back to ISO-8601
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
)

# (key, required substring) pairs; None means any string is accepted
MEETING_URL_KEYS = (
    ("hangoutLink", None),
    ("joinUrl", None),
    ("joinLink", None),
    ("meet", None),
    ("meetingUrl", None),
    ("meetingLink", None),
    ("conferenceUrl", None),
    ("videoCall", None),
    ("zoomUrl", None),
    ("zoom", "zoom"),
    ("teamsUrl", None),
    ("teams", "teams"),
    ("hangoutsUrl", None),
    ("hangout", None),
)

GENERIC_URL_KEYS = ("url", "link")

ATTENDEE_KEYS = ("attendees", "participants", "guests", "invitees", "members", "people")
ATTENDEE_NAME_KEYS = ("name", "displayName", "fullName")


def first_present(obj: Dict[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    """Value of the first key in ``keys`` present in ``obj`` with a non-null value."""
    for key in keys:
        value = obj.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def has_any(obj: Dict[str, Any], keys: Sequence[str]) -> bool:
    return any(obj.get(key) is not None for key in keys)


def as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def as_non_empty_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def as_float(value: Any) -> Optional[float]:
    """Finite JSON number or numeric string to float. Booleans are not numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> Optional[int]:
    number = as_float(value)
    return int(number) if number is not None else None


def as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
    return None


def as_str_list(value: Any) -> Optional[List[str]]:
    """List of strings, or None if ``value`` is not a list made only of strings."""
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def as_object_list(value: Any) -> List[Dict[str, Any]]:
    """Keep only the object entries of a list; anything else gives an empty list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def is_object_list(value: Any) -> bool:
    """Non-empty list whose first element is an object."""
    return isinstance(value, list) and bool(value) and isinstance(value[0], dict)


def generate_id() -> str:
    return uuid.uuid4().hex


def resolve_id(obj: Dict[str, Any], keys: Sequence[str] = ("id",)) -> str:
    """Producer-supplied id (numbers stringified), else a fresh unique token."""
    value = first_present(obj, keys)
    if isinstance(value, str) and value:
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return generate_id()


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a loosely formatted date string.

    Tries DATE_FORMATS in order, then ISO-8601. Unparseable input gives None,
    never an error.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable date {text!r}")
        return None


def extract_meeting_url(event: Dict[str, Any]) -> Optional[str]:
    """
    Find a video-call link on an event.

    Probes the known meeting keys, then Google Calendar style
    ``conferenceData.entryPoints``, then generic url/link keys that look
    like http(s) URLs.
    """
    for key, marker in MEETING_URL_KEYS:
        url = event.get(key)
        if isinstance(url, str) and (marker is None or marker in url):
            return url

    conference = event.get("conferenceData")
    if isinstance(conference, dict):
        for entry in as_object_list(conference.get("entryPoints")):
            uri = entry.get("uri")
            if entry.get("entryPointType") == "video" and isinstance(uri, str):
                return uri

    for key in GENERIC_URL_KEYS:
        url = event.get(key)
        if isinstance(url, str) and url.startswith("http"):
            return url

    return None


def _attendee_label(attendee: Dict[str, Any]) -> Optional[str]:
    name = as_str(first_present(attendee, ATTENDEE_NAME_KEYS))
    email = as_str(attendee.get("email"))
    if name is not None:
        if email is not None and "@" not in name:
            return f"{name} ({email})"
        return name
    if email is not None:
        return email
    return as_str(attendee.get("emailAddress"))


def normalize_attendees(event: Dict[str, Any]) -> List[str]:
    """
    Attendee display strings from any of the supported shapes.

    - list of strings: used as-is
    - list of objects: "Name (email)", name, email or emailAddress per entry
    - comma separated string: split and trimmed
    """
    raw = first_present(event, ATTENDEE_KEYS)

    names = as_str_list(raw)
    if names is not None:
        return names

    if isinstance(raw, list):
        labels = (_attendee_label(item) for item in raw if isinstance(item, dict))
        return [label for label in labels if label is not None]

    if isinstance(raw, str):
        return [piece.strip() for piece in raw.split(",")]

    return []
