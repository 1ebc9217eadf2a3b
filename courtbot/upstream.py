from __future__ import annotations
from typing import Any, List, Optional

import httpx

from .errors import NetworkError, UpstreamAuthError, UpstreamError
from .models import Reservation, Slot, UpstreamSession
from .settings import Settings, settings as default_settings


class UpstreamClient:
    """
    Async client for the club's agenda API.

    Usage:
        async with UpstreamClient() as client:
            session = await client.login(email, password)
            slots = await client.list_slots(session, day_of_week=1)

    Every failed call raises UpstreamError (non-2xx answer) or NetworkError
    (no answer at all). Nothing is retried.
    """

    def __init__(self, cfg: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = cfg or default_settings
        self.base_url = self.cfg.upstream_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=self.cfg.upstream_timeout, transport=transport)

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        body: Optional[dict] = None,
        token: Optional[str] = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = await self._client.request(method, url, headers=headers, json=body, params=params)
        except httpx.TransportError:
            raise NetworkError(url) from None

        try:
            data = resp.json() if resp.content else None
        except ValueError:
            data = resp.text

        if resp.is_error:
            raise UpstreamError(resp.status_code, data)
        if isinstance(data, str):
            raise UpstreamError(resp.status_code, f"invalid JSON: {data[:200]}")
        return data

    # ------------------ Auth ------------------
    async def login(self, email: str, password: str) -> UpstreamSession:
        data = await self._request("PUT", "/signin", {"user": email, "password": password}) or {}

        files = data.get("user_files") or [{}]
        user_id = (files[0] or {}).get("userId") or data.get("userId") or data.get("id")
        if not user_id:
            raise UpstreamAuthError("Login failed: Could not retrieve user ID")

        return UpstreamSession(token=data.get("token"), user_id=user_id)

    # ------------------ Slots ------------------
    async def list_slots(self, session: UpstreamSession, day_of_week: int) -> List[Slot]:
        params = {"id": self.cfg.activity_id, "dow": day_of_week, "userId": session.user_id}
        data = await self._request("GET", "/activitytime/", token=session.token, params=params) or {}
        return [Slot.from_api(s) for s in data.get("description") or []]

    # ------------------ Reservations ------------------
    async def create_reservation(
        self,
        session: UpstreamSession,
        slot_id: Any,
        days_ahead: int,
        guest_id: str,
    ) -> Any:
        body = {"usr": session.user_id, "at": slot_id, "day": days_ahead, "description": guest_id}
        return await self._request("POST", "/reservation/", body, token=session.token)

    async def list_reservations(self, session: UpstreamSession) -> List[Reservation]:
        data = await self._request("GET", "/reservation/", token=session.token) or {}
        return [Reservation.from_api(r) for r in data.get("description") or []]

    async def cancel_reservation(self, session: UpstreamSession, reservation_id: Any) -> None:
        await self._request("DELETE", "/reservation/", token=session.token, params={"id": reservation_id})
