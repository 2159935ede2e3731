from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from flask import current_app


DEFAULT_PARTICIPANTS = (
    "GrandPa",
    "GrandMa",
    "Arnaud",
    "Julie",
    "Valérie",
    "Maxime",
    "Fanny",
    "Corentin",
)
DEFAULT_STORAGE_KEY = "cacahuete_secret_santa_v1"
DEFAULT_RESET_CODE = "MON_CODE_SECRET_2025"
# Exclusive cutoff: the app is expired from this instant on.
DEFAULT_EXPIRES_AT = "2025-12-27T00:00:00+00:00"


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class ParticipantRegistry:
    """Fixed, ordered list of the people taking part in the draw."""

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if any(not name for name in self.names):
            raise ConfigurationError("Participant names must not be blank.")
        if len(set(self.names)) != len(self.names):
            raise ConfigurationError("Participant names must be unique.")
        if len(self.names) < 2:
            raise ConfigurationError("Need at least 2 participants for a draw.")

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)


def parse_participants(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        raw = raw.split(",")
    return tuple(name.strip() for name in raw)


def parse_instant(raw: str | datetime) -> datetime:
    """Parse an ISO-8601 instant. Naive values are taken as UTC."""
    if isinstance(raw, datetime):
        value = raw
    else:
        text = (raw or "").strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise ConfigurationError(f"Invalid expiration instant: {raw!r}") from e

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DrawSettings:
    registry: ParticipantRegistry
    storage_key: str
    reset_code: str
    expires_at: datetime

    @classmethod
    def from_config(cls, config: Mapping) -> DrawSettings:
        storage_key = (config.get("CACAHUETE_STORAGE_KEY") or "").strip()
        if not storage_key:
            raise ConfigurationError("CACAHUETE_STORAGE_KEY must not be empty.")

        return cls(
            registry=ParticipantRegistry(parse_participants(config.get("CACAHUETE_PARTICIPANTS", DEFAULT_PARTICIPANTS))),
            storage_key=storage_key,
            reset_code=config.get("CACAHUETE_RESET_CODE") or "",
            expires_at=parse_instant(config.get("CACAHUETE_EXPIRES_AT", DEFAULT_EXPIRES_AT)),
        )


def get_settings() -> DrawSettings:
    return current_app.extensions["cacahuete"]
