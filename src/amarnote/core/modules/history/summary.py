from amarnote.core.modules.history.models import NoteHistory
from amarnote.utils import DAY_MS, HOUR_MS, from_ms

MINUTE_MS = 60 * 1000


def time_ago(timestamp: int, now: int) -> str:
    elapsed = now - timestamp
    if elapsed < MINUTE_MS:
        return "just now"
    if elapsed < HOUR_MS:
        return _plural(elapsed // MINUTE_MS, "minute")
    if elapsed < DAY_MS:
        return _plural(elapsed // HOUR_MS, "hour")
    if elapsed < 30 * DAY_MS:
        return _plural(elapsed // DAY_MS, "day")
    return from_ms(timestamp).date().isoformat()


def version_summary(history: list[NoteHistory], index: int, now: int) -> str:
    """One-line description of a history entry, e.g. "v3 • 5 minutes ago • auto-saved version"."""
    if index < 0 or index >= len(history):
        return ""
    entry = history[index]
    return f"{entry.version} • {time_ago(entry.updated_at, now)} • {entry.message}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"
