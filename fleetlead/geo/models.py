from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Place:
    city: str = ""
    state: str = ""

    def label(self) -> str:
        """Human readable "City, State" with blanks dropped."""
        return ", ".join(part for part in (self.city, self.state) if part)
