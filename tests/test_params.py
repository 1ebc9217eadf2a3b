import pytest

from courtbot.errors import INVALID_ACTION, INVALID_PARAMETER, MISSING_PARAMETER, ReservationError
from courtbot.params import ReservationParams


def test_defaults_come_from_settings(cfg):
    p = ReservationParams.parse({}, cfg)
    assert p.action == "AUTO_RESERVE"
    assert (p.day_of_week, p.days_ahead) == (1, 1)
    assert p.preferred_times == ["19:00"]
    assert p.preferred_locations == ["Cancha de Tenis 2"]
    assert p.guest_id == "1234567"
    assert p.reservation_id is None


def test_values_are_coerced(cfg):
    p = ReservationParams.parse(
        {
            "action": "check_slots",
            "dayOfWeek": 5,
            "daysAhead": " 2 ",
            "preferredTimes": "20:00, 21:00",
            "preferredLocations": "Cancha 1,Cancha 3",
            "guestId": "999",
        },
        cfg,
    )
    assert p.action == "CHECK_SLOTS"
    assert (p.day_of_week, p.days_ahead) == (5, 2)
    assert p.preferred_times == ["20:00", "21:00"]
    assert p.preferred_locations == ["Cancha 1", "Cancha 3"]
    assert p.guest_id == "999"


def test_unknown_action(cfg):
    with pytest.raises(ReservationError) as ei:
        ReservationParams.parse({"action": "BOOK_EVERYTHING"}, cfg)
    assert ei.value.kind == INVALID_ACTION
    assert str(ei.value) == "Invalid action: BOOK_EVERYTHING"


def test_cancel_requires_reservation_id(cfg):
    with pytest.raises(ReservationError) as ei:
        ReservationParams.parse({"action": "CANCEL_RESERVATION"}, cfg)
    assert ei.value.kind == MISSING_PARAMETER
    assert ei.value.failure.status_code == 500

    p = ReservationParams.parse({"action": "CANCEL_RESERVATION", "reservationId": 77}, cfg)
    assert p.reservation_id == "77"


def test_non_integer_day(cfg):
    with pytest.raises(ReservationError) as ei:
        ReservationParams.parse({"dayOfWeek": "monday"}, cfg)
    assert ei.value.kind == INVALID_PARAMETER


def test_preference_lists_are_accepted_as_is(cfg):
    p = ReservationParams.parse({"preferredTimes": ["21:00", " 19:00"], "preferredLocations": ["Cancha 1"]}, cfg)
    assert p.preferred_times == ["21:00", "19:00"]
    assert p.preferred_locations == ["Cancha 1"]


@pytest.mark.parametrize(
    "raw",
    [
        {"preferredTimes": ["21:00", 19]},
        {"preferredTimes": None},
        {"preferredLocations": {"name": "Cancha 1"}},
        {"guestId": None},
        {"guestId": ["123"]},
        {"action": ["AUTO_RESERVE"]},
        {"daysAhead": None},
        {"dayOfWeek": True},
    ],
)
def test_wrongly_typed_values_are_rejected(cfg, raw):
    with pytest.raises(ReservationError) as ei:
        ReservationParams.parse(raw, cfg)
    assert ei.value.kind == INVALID_PARAMETER


def test_numeric_ids_become_text(cfg):
    p = ReservationParams.parse({"guestId": 4567890}, cfg)
    assert p.guest_id == "4567890"
