"""
Design (repository.py)
- Purpose: Encapsulate the hunt list behind a tiny API (and a lock), so the UI never touches
           the list directly. Every mutation persists the full list and then notifies listeners.
- Inputs: Item ids, photo bytes, address strings.
- Outputs: Snapshots (copies) of items; derived counts/flags.
- Side effects: Writes hunt.json through storage.save_items after each mutation.
- Thread-safety: All mutating/reading methods take the internal lock; listeners run
                 outside the lock on the caller's thread.
"""

import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List

from .config import DISCOUNT_THRESHOLD, SEED_ITEMS
from .logger import get_logger
from .models import HuntItem
from .storage import load_items, save_items

logger = get_logger(__name__)

Listener = Callable[[], None]

TIER_NONE = "none"
TIER_DISCOUNT = "discount"
TIER_DRAW = "draw"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def seed_items() -> List[HuntItem]:
    """Fresh default items (new ids every call)."""
    return [HuntItem(title=title, hint=hint) for title, hint in SEED_ITEMS]


class HuntStore:
    """
    Design (HuntStore)
    - State:
        _items: ordered list of HuntItem (insertion order, never sorted)
        _listeners: callables invoked after each successful mutation
        _lock: threading.Lock protecting _items
    - Lifecycle: HuntStore(path) -> open() (load or seed) -> mutations -> close() (final flush).
    """

    def __init__(self, path: Path, clock: Callable[[], datetime] = utc_now) -> None:
        self.path = path
        self._clock = clock
        self._lock = threading.Lock()
        self._items: List[HuntItem] = []
        self._listeners: List[Listener] = []
        self._opened = False

    @classmethod
    def open_at(cls, path: Path, clock: Callable[[], datetime] = utc_now) -> "HuntStore":
        store = cls(path, clock=clock)
        store.open()
        return store

    # -------- lifecycle --------

    def open(self) -> None:
        """
        Purpose: Load saved state; if missing or unreadable, seed the default items and
                 persist them right away.
        Side effects: May write hunt.json.
        """
        loaded = load_items(self.path)
        with self._lock:
            self._opened = True
            if loaded is not None:
                self._items = loaded
                return
            logger.info("Seeding %d default hunt items", len(SEED_ITEMS))
            self._items = seed_items()
        self._persist()

    def close(self) -> None:
        """Write a final snapshot (only if open() ran) and drop all listeners."""
        if self._opened and not self._persist():
            logger.error("Final save failed; progress since the last successful save is lost")
        self._listeners.clear()

    # -------- listeners --------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Purpose: Register a zero-argument callback run after every successful mutation.
        Outputs: A function that unregisters the listener (safe to call twice).
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Store listener %r failed", listener)

    # -------- reads --------

    @property
    def items(self) -> List[HuntItem]:
        """Copies of all items in order; mutating them does not affect the store."""
        with self._lock:
            return [item.copy() for item in self._items]

    def get(self, item_id: uuid.UUID) -> HuntItem | None:
        with self._lock:
            item = self._find(item_id)
            return item.copy() if item is not None else None

    @property
    def total_count(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def found_count(self) -> int:
        with self._lock:
            return sum(1 for item in self._items if item.found)

    @property
    def all_found(self) -> bool:
        with self._lock:
            return sum(1 for item in self._items if item.found) == len(self._items)

    @property
    def has_discount(self) -> bool:
        return self.found_count >= DISCOUNT_THRESHOLD

    @property
    def reward_tier(self) -> str:
        """'draw' when everything is found, else 'discount' at the threshold, else 'none'."""
        if self.all_found:
            return TIER_DRAW
        if self.has_discount:
            return TIER_DISCOUNT
        return TIER_NONE

    # -------- mutations --------

    def mark_found(self, item_id: uuid.UUID, photo_data: bytes | None = None,
                   address: str | None = None) -> bool:
        """
        Purpose: Mark one item found, stamping found_at with the current time.
        Inputs: item_id, photo_data (overwrites), address (overwrites; None clears).
        Outputs: True if the item exists; False (no write, no notification) otherwise.
        Side effects: Persists and notifies listeners.
        """
        with self._lock:
            item = self._find(item_id)
            if item is None:
                logger.debug("mark_found: unknown id %s", item_id)
                return False
            item.found = True
            item.found_at = self._clock()
            item.photo_data = photo_data
            item.address = address
            title = item.title
        logger.info("Marked found: %s", title)
        self._persist()
        self._notify()
        return True

    def remove_photo(self, item_id: uuid.UUID) -> bool:
        """
        Purpose: Clear the photo only; found/found_at/address are kept.
        Outputs: True if the item exists; False otherwise.
        """
        with self._lock:
            item = self._find(item_id)
            if item is None:
                logger.debug("remove_photo: unknown id %s", item_id)
                return False
            item.photo_data = None
        self._persist()
        self._notify()
        return True

    def reset_all(self) -> None:
        """Clear progress on every item (ids, titles and hints are kept)."""
        with self._lock:
            for item in self._items:
                item.clear_progress()
        logger.info("Hunt progress reset")
        self._persist()
        self._notify()

    # -------- internals --------

    def _find(self, item_id: uuid.UUID) -> HuntItem | None:
        # caller holds _lock
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def _persist(self) -> bool:
        with self._lock:
            if not self._opened:
                # before open() the in-memory list is not the saved state
                logger.warning("Not saving %s: store was never opened", self.path)
                return False
            return save_items(self._items, self.path)
