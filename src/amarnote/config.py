from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = ""  # MongoDB URL; empty keeps notes in memory
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []
    history_limit: int = Field(20, ge=1)  # Maximum snapshots kept per note
    snapshot_interval_seconds: int = Field(24 * 60 * 60, ge=0)  # Minimum time between automatic snapshots
    snapshot_change_threshold: int | None = 3  # Block diffs that force a snapshot early; None disables
    storage_quota_bytes: int | None = None  # Only enforced by the in-memory store
    max_attachment_size: int = 10 * 1024 * 1024

    model_config = {
        "env_file": [".env"],
        "env_prefix": "AMARNOTE_",
        "extra": "ignore",
    }
