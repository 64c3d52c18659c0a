"""
Design (storage.py)
- Purpose: Load and save the hunt list to/from disk (JSON).
- Inputs: Path (from get_hunt_path()), list of HuntItem for save.
- Outputs: list[HuntItem] on load (None when there is no usable saved state); bool on save.
- Side effects: Reads/writes file. Failures are logged, never raised to the caller.
- Thread-safety: Call from one thread at a time (HuntStore saves under its lock).
"""

import base64
import binascii
import json
import os
import sys
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from .config import APP_NAME, HUNT_FILENAME
from .logger import get_logger
from .models import HuntItem

logger = get_logger(__name__)


class StorageError(ValueError):
    """Raised when a saved record cannot be decoded."""


def get_hunt_path() -> Path:
    """
    Resolve path for hunt.json. Prefer the per-user app data dir so progress survives
    reinstalls. Fallback to dir next to executable (or project dir when running as script).
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) / APP_NAME if appdata else None
    else:
        base = Path.home() / ".city_scavenger_hunt"
    if base is not None:
        try:
            base.mkdir(parents=True, exist_ok=True)
            return base / HUNT_FILENAME
        except OSError:
            pass
    if getattr(sys, "frozen", False):
        base = Path(sys.executable).parent
    else:
        base = Path(__file__).resolve().parent.parent
    return base / HUNT_FILENAME


# -------- codec --------

def item_to_dict(item: HuntItem) -> Dict[str, Any]:
    """
    Purpose: Encode one item. Optional fields are omitted when None, so "absent" and
             "present but empty" (e.g. address == "") stay distinguishable.
    """
    data: Dict[str, Any] = {
        "id": str(item.id),
        "title": item.title,
        "hint": item.hint,
        "found": item.found,
    }
    if item.photo_data is not None:
        data["photoData"] = base64.b64encode(item.photo_data).decode("ascii")
    if item.found_at is not None:
        data["foundAt"] = item.found_at.isoformat()
    if item.address is not None:
        data["address"] = item.address
    return data


def _required(data: Dict[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if not isinstance(value, kind):
        raise StorageError(f"field {key!r} missing or not {kind.__name__}")
    return value


def _optional(data: Dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise StorageError(f"field {key!r} is not a string")
    return value


def item_from_dict(data: Any) -> HuntItem:
    """
    Purpose: Decode one item. Strict: any missing/invalid field raises StorageError.
    Inputs: One element of the saved JSON array.
    """
    if not isinstance(data, dict):
        raise StorageError("record is not an object")
    try:
        item_id = uuid.UUID(_required(data, "id", str))
    except ValueError as exc:
        raise StorageError(f"invalid id: {exc}") from exc

    photo = _optional(data, "photoData")
    if photo is not None:
        try:
            photo = base64.b64decode(photo, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise StorageError(f"invalid photoData: {exc}") from exc

    found_at = _optional(data, "foundAt")
    if found_at is not None:
        try:
            found_at = datetime.fromisoformat(found_at)
        except ValueError as exc:
            raise StorageError(f"invalid foundAt: {exc}") from exc

    return HuntItem(
        id=item_id,
        title=_required(data, "title", str),
        hint=_required(data, "hint", str),
        found=_required(data, "found", bool),
        photo_data=photo,
        found_at=found_at,
        address=_optional(data, "address"),
    )


def encode_items(items: List[HuntItem]) -> bytes:
    return json.dumps([item_to_dict(i) for i in items], indent=2, ensure_ascii=False).encode("utf-8")


def decode_items(raw: bytes) -> List[HuntItem]:
    """
    Purpose: Decode a whole saved file. Raises StorageError on invalid JSON, a non-list
             root, any bad record, or duplicate ids.
    """
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and the int digit limit; RecursionError deep nesting
        raise StorageError(f"not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise StorageError("root is not a list")
    items = [item_from_dict(entry) for entry in data]
    if len({i.id for i in items}) != len(items):
        raise StorageError("duplicate ids")
    return items


# -------- file I/O --------

def load_items(path: Path) -> List[HuntItem] | None:
    """
    Load items from JSON file. Returns None (no saved state) on missing file,
    read error or any decode error.
    """
    if not path.exists():
        logger.info("No saved hunt at %s", path)
        return None
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.warning("Load error: cannot read %s: %s", path, exc)
        return None
    try:
        items = decode_items(raw)
    except StorageError as exc:
        logger.warning("Load error: discarding %s: %s", path, exc)
        return None
    logger.info("Loaded %d hunt items from %s", len(items), path)
    return items


def save_items(items: List[HuntItem], path: Path) -> bool:
    """
    Save the full list atomically: write a temp file in the same directory, then
    os.replace() it over the target. Returns False (and logs) on OSError.
    """
    payload = encode_items(items)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        logger.error("Save error: %s: %s", path, exc)
        return False
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
    logger.debug("Saved %d hunt items to %s", len(items), path)
    return True
