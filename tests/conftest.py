from typing import Any, Dict, List

import pytest

from courtbot.models import Reservation, Slot, UpstreamSession
from courtbot.settings import Settings


@pytest.fixture(autouse=True)
def _test_env(tmp_path, monkeypatch):
    # Ensure tests don’t write to repo root
    audit_dir = tmp_path / "audit"
    audit_dir.mkdir(exist_ok=True)
    monkeypatch.setenv("COURTBOT_AUDIT_FILE", str(audit_dir / "requests.ndjson"))
    yield


@pytest.fixture
def cfg(tmp_path):
    return Settings(
        api_key="test-secret-key-0123456789",
        email="player@example.com",
        password="pw",
        guest_id="1234567",
        upstream_url="https://agenda.test",
        preferred_times="19:00",
        preferred_locations="Cancha de Tenis 2",
        audit_file=str(tmp_path / "audit" / "requests.ndjson"),
        request_log=False,
    )


class FakeClient:
    """In-memory stand-in for UpstreamClient."""

    def __init__(self, slots=None, reservations=None, fail: Dict[str, Exception] | None = None):
        self.slots: List[Slot] = list(slots or [])
        self.reservations: List[Reservation] = list(reservations or [])
        self.fail = fail or {}
        self.calls: List[tuple] = []
        self.closed = False

    def __call__(self, cfg):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True

    def _maybe_fail(self, name):
        if name in self.fail:
            raise self.fail[name]

    async def login(self, email, password):
        self.calls.append(("login", email))
        self._maybe_fail("login")
        return UpstreamSession(token="tok", user_id=42)

    async def list_slots(self, session, day_of_week):
        self.calls.append(("list_slots", day_of_week))
        self._maybe_fail("list_slots")
        return self.slots

    async def create_reservation(self, session, slot_id, days_ahead, guest_id) -> Any:
        self.calls.append(("create_reservation", slot_id, days_ahead, guest_id))
        self._maybe_fail("create_reservation")
        return {"id": 900, "at": slot_id}

    async def list_reservations(self, session):
        self.calls.append(("list_reservations",))
        return self.reservations

    async def cancel_reservation(self, session, reservation_id):
        self.calls.append(("cancel_reservation", reservation_id))
        self._maybe_fail("cancel_reservation")


@pytest.fixture
def fake_client():
    """Factory: fake_client(slots, reservations=..., fail={...})."""
    return FakeClient
