"""
Design (main.py)
- Purpose: Application root. Build the store, location service and UI, wire listeners,
           run the Tk loop, then flush and stop everything on exit.
- Side effects: Reads/writes hunt.json; may start GPS; shows desktop notifications.
"""

import logging
import tkinter as tk

from hunt.location import LocationService
from hunt.logger import get_logger, setup_logging
from hunt.repository import HuntStore
from hunt.storage import get_hunt_path
from hunt.ui import AppUI
from hunt.utils import reward_notification, send_notification

logger = get_logger("hunt.main")


class RewardWatcher:
    """Store listener that fires a desktop notification when the reward tier goes up."""

    def __init__(self, store: HuntStore):
        self.store = store
        self.tier = store.reward_tier

    def __call__(self) -> None:
        current = self.store.reward_tier
        message = reward_notification(self.tier, current, self.store.total_count)
        self.tier = current
        if message:
            send_notification(message)


def main() -> None:
    setup_logging(logging.INFO)

    store = HuntStore.open_at(get_hunt_path())
    location = LocationService()
    logger.info("Hunt loaded: %d of %d found", store.found_count, store.total_count)

    root = tk.Tk()
    ui = AppUI(root, store, location)
    store.subscribe(ui.schedule_refresh)
    store.subscribe(RewardWatcher(store))
    location.subscribe(ui.schedule_refresh)

    try:
        root.mainloop()
    finally:
        ui.log_handler.detach()
        location.stop()
        store.close()


if __name__ == "__main__":
    main()
