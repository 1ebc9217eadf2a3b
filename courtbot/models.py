from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Slot:
    id: Any
    starttime: str          # "HH:MM"
    location: str
    total_reservations: int = 0

    @property
    def available(self) -> bool:
        return self.total_reservations == 0

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Slot":
        return cls(
            id=raw.get("id"),
            starttime=str(raw.get("starttime", "")),
            location=str(raw.get("location", "")),
            total_reservations=int(raw.get("TotalReservations") or 0),
        )

    def to_public(self) -> Dict[str, Any]:
        return {"id": self.id, "time": self.starttime, "location": self.location, "available": self.available}


@dataclass(frozen=True)
class Reservation:
    id: Any
    activity: Optional[str]
    location: Optional[str]
    datetime: Optional[str]
    time: Optional[str]

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Reservation":
        return cls(
            id=raw.get("id"),
            activity=raw.get("activityName") or raw.get("name"),
            location=raw.get("location"),
            datetime=raw.get("reservationdate"),
            time=raw.get("starttime"),
        )

    def to_public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "activity": self.activity,
            "location": self.location,
            "datetime": self.datetime,
            "time": self.time,
        }


@dataclass(frozen=True)
class UpstreamSession:
    token: Optional[str]
    user_id: Any
