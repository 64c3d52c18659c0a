"""
Design (models.py)
- Purpose: Define the data structure for one hunt target (HuntItem).
- Inputs: Field values.
- Outputs: Dataclass instances.
- Side effects: None.
- Thread-safety: Dataclasses are plain containers; HuntStore protects concurrent access.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(eq=False)
class HuntItem:
    """
    Design (HuntItem)
    - Purpose: Represents a single location in the hunt.
    - Fields:
        id: unique identifier, assigned at creation and never regenerated.
        title: display name.
        hint: clue text shown under the title.
        found: True once the player marked the location as found.
        photo_data: raw image bytes attached by the player (None if absent).
        found_at: UTC timestamp of the last mark-found (None if never found / reset).
        address: reverse-geocoded address captured when marking found (None if absent).
    - Equality: two items are equal when their ids are equal.
    """
    title: str
    hint: str
    found: bool = False
    photo_data: bytes | None = None
    found_at: datetime | None = None
    address: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HuntItem):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def copy(self) -> "HuntItem":
        """Independent copy with the same id (bytes/datetime/str are immutable)."""
        return replace(self)

    def clear_progress(self) -> None:
        """Back to the unfound state; id, title and hint are kept."""
        self.found = False
        self.photo_data = None
        self.found_at = None
        self.address = None
