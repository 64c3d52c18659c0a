"""
Design (config.py)
- Purpose: Centralize constants and configuration.
- Inputs: None.
- Outputs: Constants (seed list, reward thresholds, geocoder endpoint, log limits).
- Side effects: None.
- Thread-safety: N/A (read-only constants).
"""

APP_NAME = "City Scavenger Hunt"

# Persistence: filename for the saved hunt list (path resolved in storage module)
HUNT_FILENAME = "hunt.json"

# Seed data used on first run (or when the saved file cannot be read): (title, hint)
SEED_ITEMS = [
    ("City Bookstore", "Find the aisle with local authors."),
    ("Main Street Café", "Smells like fresh croissants at 8am."),
    ("Riverside Park", "Near the big fountain."),
    ("Museum Lobby", "Stand by the dinosaur."),
    ("Cinema Lobby", "Poster wall of classic films."),
    ("City Hall", "Look for the statue out front."),
    ("Ice Cream Shop", "Blue bench by the door."),
    ("Tech Hub", "Cowork space on 2nd floor."),
    ("Art Gallery", "Red abstract piece in entry."),
    ("Train Station", "Platform 2 timetable."),
]

## Rewards
DISCOUNT_THRESHOLD = 7    # found items needed for the 20% discount
BANNER_DRAW = "All {total} found! You're entered into the $5,000 draw."
BANNER_DISCOUNT = "20% discount unlocked! ({threshold}+ items found)"
BANNER_DEFAULT = "Find {threshold} for 20% off — find all {total} for the $5,000 draw!"

## Reverse geocoding (OpenStreetMap Nominatim)
GEOCODER_URL = "https://nominatim.openstreetmap.org/reverse"
GEOCODER_USER_AGENT = "city-scavenger-hunt/1.0"
GEOCODER_TIMEOUT_SEC = 10

# plyer.gps update request: one fix is enough, service is stopped after it arrives
GPS_MIN_TIME_MS = 1000
GPS_MIN_DISTANCE_M = 0

## Logging
LOG_MAX_LINES = 1000      # maximum number of log lines kept in the Logs panel (oldest trimmed)
LOG_FORMAT = "%(asctime)s [%(threadName)s] %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Photo preview in the detail dialog is subsampled until it fits this box (pixels)
PHOTO_PREVIEW_MAX = 320
