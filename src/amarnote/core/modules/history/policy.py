"""When an update earns a history snapshot, and how history is bounded."""

import re
from dataclasses import dataclass
from datetime import timedelta

from amarnote.config import Config
from amarnote.core.modules.content.models import Content
from amarnote.core.modules.history.diff import compare_versions
from amarnote.core.modules.history.models import NoteHistory

_VERSION_RE = re.compile(r"^v(\d+)")


@dataclass(frozen=True)
class SnapshotPolicy:
    """Snapshot the previous content when it changed and either enough time
    passed since the last snapshot or enough blocks changed at once."""

    min_interval: timedelta = timedelta(hours=24)
    change_threshold: int | None = 3
    history_limit: int = 20

    @classmethod
    def from_config(cls, config: Config) -> "SnapshotPolicy":
        return cls(
            min_interval=timedelta(seconds=config.snapshot_interval_seconds),
            change_threshold=config.snapshot_change_threshold,
            history_limit=config.history_limit,
        )

    def should_snapshot(
        self, previous: Content, new: Content, history: list[NoteHistory], created_at: int, now: int
    ) -> bool:
        if previous.same_blocks(new):
            return False

        last_snapshot_at = history[-1].updated_at if history else created_at
        if now - last_snapshot_at >= self.min_interval.total_seconds() * 1000:
            return True

        if self.change_threshold is None:
            return False
        baseline = history[-1].content if history else previous
        return len(compare_versions(baseline, new)) > self.change_threshold

    def trim(self, history: list[NoteHistory]) -> list[NoteHistory]:
        """Drop the oldest entries beyond the limit."""
        return history[-self.history_limit :]


def next_version(current: str, history_length: int) -> str:
    """Next label in the v1, v2, ... sequence."""
    match = _VERSION_RE.match(current)
    number = int(match.group(1)) if match else history_length
    return f"v{number + 1}"
