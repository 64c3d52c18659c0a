"""City Scavenger Hunt: a ten-location checklist with photos, timestamps and addresses."""

__version__ = "1.0.0"
