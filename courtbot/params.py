from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .errors import INVALID_ACTION, INVALID_PARAMETER, MISSING_PARAMETER, ReservationError
from .settings import Settings
from .slot_selector import parse_preferences
from .wire import ACTION_AUTO_RESERVE, ACTION_CANCEL_RESERVATION, ACTIONS


@dataclass(frozen=True)
class ReservationParams:
    action: str = ACTION_AUTO_RESERVE
    day_of_week: int = 1
    days_ahead: int = 1
    preferred_times: List[str] = field(default_factory=list)
    preferred_locations: List[str] = field(default_factory=list)
    guest_id: str = ""
    reservation_id: Optional[str] = None

    @classmethod
    def parse(cls, raw: Mapping[str, Any] | None, cfg: Settings) -> "ReservationParams":
        """
        Apply defaults to the loosely-typed query/body mapping and validate it.
        Everything past this point can trust the field types.
        """
        raw = raw or {}

        action = _as_text(raw, "action", ACTION_AUTO_RESERVE) or ACTION_AUTO_RESERVE
        if action.upper() not in ACTIONS:
            raise ReservationError(f"Invalid action: {action}", INVALID_ACTION)
        action = action.upper()

        reservation_id = _as_text(raw, "reservationId", None)
        if action == ACTION_CANCEL_RESERVATION and not reservation_id:
            raise ReservationError("reservationId required", MISSING_PARAMETER)

        return cls(
            action=action,
            day_of_week=_as_int(raw, "dayOfWeek", "1"),
            days_ahead=_as_int(raw, "daysAhead", "1"),
            preferred_times=_as_preferences(raw, "preferredTimes", cfg.preferred_times),
            preferred_locations=_as_preferences(raw, "preferredLocations", cfg.preferred_locations),
            guest_id=_as_text(raw, "guestId", cfg.guest_id),
            reservation_id=reservation_id or None,
        )


def _invalid(key: str, expected: str, value: Any) -> ReservationError:
    return ReservationError(f"{key} must be {expected}, got {value!r}", INVALID_PARAMETER)


def _as_text(raw: Mapping[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    if key not in raw:
        return default
    value = raw[key]
    # ids may arrive as JSON numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise _invalid(key, "a string", value)
    return value


def _as_int(raw: Mapping[str, Any], key: str, default: str) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise _invalid(key, "an integer", value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise _invalid(key, "an integer", value) from None


def _as_preferences(raw: Mapping[str, Any], key: str, default: str) -> List[str]:
    """Comma-separated string, or a JSON list of strings."""
    value = raw.get(key, default)
    if isinstance(value, str):
        return parse_preferences(value)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return [v.strip() for v in value]
    raise _invalid(key, "a comma-separated string or a list of strings", value)
