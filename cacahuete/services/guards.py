from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..logging_config import get_logger
from ..settings import DrawSettings
from .draw import Screen
from .store import RecordStore


logger = get_logger(__name__)


def is_expired(now: datetime, expires_at: datetime) -> bool:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now >= expires_at


def reset_requested(reset_param: Optional[str], reset_code: str) -> bool:
    return bool(reset_param) and reset_param == reset_code


def run_startup_guards(
    store: RecordStore,
    settings: DrawSettings,
    now: datetime,
    reset_param: Optional[str] = None,
) -> Optional[Screen]:
    """
    Run the expiration guard, then the secret-reset guard.

    Returns the terminal screen to show when one fires (the record is wiped
    first), or None to carry on with the normal flow. Expiration wins over a
    reset request made on the same load.
    """
    if is_expired(now, settings.expires_at):
        store.clear(reason="expired")
        logger.info("guard_fired", guard="expiration", expires_at=settings.expires_at.isoformat())
        return Screen.expired()

    if reset_requested(reset_param, settings.reset_code):
        store.clear(reason="secret_reset")
        logger.info("guard_fired", guard="secret_reset")
        return Screen.reset_done()

    return None
