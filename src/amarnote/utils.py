import re
import secrets
from datetime import UTC, datetime

DAY_MS = 24 * 60 * 60 * 1000
HOUR_MS = 60 * 60 * 1000

_UNSAFE_FILENAME_RE = re.compile(r'[\\/?%*:|"<>]')
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_EXTENSION_RE = re.compile(r"\.[0-9a-z]+$", re.IGNORECASE)


def now() -> datetime:
    return datetime.now(UTC)


def now_ms() -> int:
    return to_ms(now())


def to_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, UTC)


def start_of_day_ms(value: datetime) -> int:
    """Midnight (UTC) of the day containing value, as ms epoch."""
    return to_ms(value.replace(hour=0, minute=0, second=0, microsecond=0))


def generate_id(prefix: str = "") -> str:
    return f"{prefix}{secrets.token_hex(8)}"


def sanitize_filename(name: str, max_length: int = 50) -> str:
    """Make a note title safe to use as a download file name."""
    safe = _UNSAFE_FILENAME_RE.sub("_", name)
    safe = _CONTROL_CHARS_RE.sub("", safe).strip()
    if len(safe) > max_length:
        match = _EXTENSION_RE.search(safe)
        extension = match.group(0) if match else ""
        base = safe[: len(safe) - len(extension)] if extension else safe
        safe = base[: max_length - len(extension)] + extension
    return safe or "note"
