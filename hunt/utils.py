"""
Design (utils.py)
- Purpose: Reusable helpers: reward banner text, reward notifications, timestamp display,
           and reading a picked photo from disk.
- Inputs: Various helper parameters (counts, tiers, datetimes, paths).
- Outputs: Helper results (strings, bytes, bools).
- Side effects: send_notification shows an OS notification; read_photo reads a file.
- Thread-safety: Stateless; safe to call from any thread.
"""

from datetime import datetime
from pathlib import Path

from plyer import notification

from .config import APP_NAME, BANNER_DEFAULT, BANNER_DISCOUNT, BANNER_DRAW, DISCOUNT_THRESHOLD
from .logger import get_logger
from .repository import TIER_DISCOUNT, TIER_DRAW, TIER_NONE

logger = get_logger(__name__)

_TIER_RANK = {TIER_NONE: 0, TIER_DISCOUNT: 1, TIER_DRAW: 2}


def reward_message(tier: str, total: int) -> str:
    """
    Purpose: Text for the banner above the list.
    Inputs: tier (HuntStore.reward_tier), total item count.
    """
    if tier == TIER_DRAW:
        return BANNER_DRAW.format(total=total)
    if tier == TIER_DISCOUNT:
        return BANNER_DISCOUNT.format(threshold=DISCOUNT_THRESHOLD)
    return BANNER_DEFAULT.format(threshold=DISCOUNT_THRESHOLD, total=total)


def reward_notification(previous: str, current: str, total: int) -> str | None:
    """
    Purpose: Message to announce when the reward tier went up; None when it did not
             (unchanged, or lowered by a reset).
    """
    if _TIER_RANK.get(current, 0) <= _TIER_RANK.get(previous, 0):
        return None
    return reward_message(current, total)


def send_notification(message: str, title: str = APP_NAME) -> bool:
    """
    Purpose: Show a desktop notification. Missing notification backends are logged only.
    Outputs: True if the backend accepted the notification.
    """
    try:
        notification.notify(title=title, message=message, app_name=APP_NAME, timeout=5)
    except NotImplementedError:
        logger.warning("Notifications are not available on this platform")
        return False
    except Exception:
        logger.exception("Notification failed")
        return False
    return True


def format_found_at(ts: datetime | None) -> str:
    """Local-time display string for a found timestamp ('' if None)."""
    if ts is None:
        return ""
    return ts.astimezone().strftime("%b %d, %Y %I:%M %p")


def read_photo(path: str | Path) -> bytes | None:
    """
    Purpose: Read picked photo bytes.
    Outputs: File contents, or None if the file cannot be read or is empty.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        logger.warning("Could not read photo %s: %s", path, exc)
        return None
    return data or None
