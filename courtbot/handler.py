from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from .auth import authenticate
from .errors import (
    CONFIGURATION_ERROR,
    INTERNAL_ERROR,
    INVALID_PARAMETER,
    MISSING_CREDENTIAL,
    RATE_LIMIT_EXCEEDED,
    Failure,
    ReservationError,
)
from .logging import NDJSONLogger, RequestLog, RichLogger
from .models import UpstreamSession
from .params import ReservationParams
from .rate_limiter import Limiter, limiter as default_limiter
from .settings import Settings, settings as default_settings
from .slot_selector import available_slots, select_best
from .upstream import UpstreamClient
from .wire import (
    ACTION_AUTO_RESERVE,
    ACTION_CANCEL_RESERVATION,
    ACTION_CHECK_SLOTS,
    ACTION_VIEW_RESERVATIONS,
    IDENTIFIER_PREFIX_LEN,
)

ClientFactory = Callable[[Settings], UpstreamClient]
Action = Callable[[UpstreamClient, UpstreamSession, ReservationParams, RequestLog], Awaitable[Dict[str, Any]]]


@dataclass
class Reply:
    status_code: int
    body: Dict[str, Any]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def client_ip(headers: Mapping[str, str]) -> str:
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return headers.get("x-real-ip") or "unknown"


class ReservationHandler:
    """
    One call per incoming request:
      authenticate -> rate limit -> login -> action -> reply.

    Admission failures (401/429/500) return early; everything after admission
    runs inside a single boundary that turns any error into a failure reply.
    The reply body always carries the accumulated `logs` and a `timestamp`.
    """

    def __init__(
        self,
        cfg: Settings | None = None,
        limiter: Limiter | None = None,
        client_factory: ClientFactory | None = None,
        audit: Optional[NDJSONLogger] = None,
    ):
        self.cfg = cfg if cfg is not None else default_settings
        self.limiter = limiter if limiter is not None else default_limiter
        self.client_factory = client_factory if client_factory is not None else UpstreamClient
        self.audit = audit
        self._actions: Dict[str, Action] = {
            ACTION_AUTO_RESERVE: self._auto_reserve,
            ACTION_CHECK_SLOTS: self._check_slots,
            ACTION_VIEW_RESERVATIONS: self._view_reservations,
            ACTION_CANCEL_RESERVATION: self._cancel_reservation,
        }

    async def handle(
        self,
        headers: Mapping[str, str],
        params: Optional[Mapping[str, Any]],
        body_error: Optional[str] = None,
    ) -> Reply:
        t0 = time.monotonic()
        h = {k.lower(): v for k, v in headers.items()}
        log = RequestLog(echo=self.cfg.request_log)
        ip = client_ip(h)

        log(*RichLogger.started(_now_iso()))
        log(RichLogger.client_ip(ip))

        reply = self._admit(h, ip, log)
        if reply is None:
            try:
                result = await self._run(params, body_error, log)
                log(RichLogger.completed((time.monotonic() - t0) * 1000))
                reply = Reply(200, result)
            except ReservationError as e:
                reply = self._failed(e.failure, log)
            except Exception as e:
                reply = self._failed(Failure(INTERNAL_ERROR, str(e) or type(e).__name__), log)

        reply.body["logs"] = log.lines
        reply.body["timestamp"] = _now_iso()
        self._record(params, ip, reply, t0)
        return reply

    # ------------------ Admission ------------------
    def _admit(self, h: Mapping[str, str], ip: str, log: RequestLog) -> Optional[Reply]:
        provided = h.get("x-api-key")
        failure = authenticate(self.cfg.api_key, provided)
        if failure is not None:
            if failure.kind == CONFIGURATION_ERROR:
                log(RichLogger.key_not_configured())
            elif failure.kind == MISSING_CREDENTIAL:
                log(RichLogger.key_missing(ip))
            else:
                log(RichLogger.key_invalid(ip, provided or ""))
            body: Dict[str, Any] = {"success": False, "error": failure.message}
            if failure.kind == MISSING_CREDENTIAL:
                body["hint"] = "Include X-API-Key header in your request"
            return Reply(failure.status_code, body)
        log(RichLogger.key_valid())

        identifier = provided[:IDENTIFIER_PREFIX_LEN]
        if not self.limiter.admit(identifier, self.cfg.rate_limit_max, self.cfg.rate_limit_window_ms):
            log(RichLogger.rate_limited(identifier, ip))
            failure = Failure(RATE_LIMIT_EXCEEDED, "Too many requests. Please try again later.")
            return Reply(
                failure.status_code,
                {
                    "success": False,
                    "error": failure.message,
                    "retryAfter": self.cfg.rate_limit_window_s,
                    "limit": self.cfg.rate_limit_text,
                },
            )
        log(RichLogger.rate_ok())
        return None

    def _failed(self, failure: Failure, log: RequestLog) -> Reply:
        log(RichLogger.error(failure.message))
        return Reply(failure.status_code, {"success": False, "error": failure.message})

    # ------------------ Execution ------------------
    async def _run(
        self,
        raw: Optional[Mapping[str, Any]],
        body_error: Optional[str],
        log: RequestLog,
    ) -> Dict[str, Any]:
        if not self.cfg.email or not self.cfg.password:
            raise ReservationError("Missing EMAIL or PASSWORD environment variables", CONFIGURATION_ERROR)
        if body_error:
            raise ReservationError(body_error, INVALID_PARAMETER)

        p = ReservationParams.parse(raw, self.cfg)
        log(*RichLogger.request(p.action, p.day_of_week))

        async with self.client_factory(self.cfg) as client:
            log(RichLogger.login_start())
            session = await client.login(self.cfg.email, self.cfg.password)
            log(RichLogger.login_ok(session.user_id))
            log(RichLogger.mode(p.action))
            return await self._actions[p.action](client, session, p, log)

    async def _auto_reserve(self, client, session, p, log):
        slots = await client.list_slots(session, p.day_of_week)
        log(f"Found {len(slots)} total slots")

        best = select_best(slots, p.preferred_times, p.preferred_locations)
        if best is None:
            log(RichLogger.no_slot())
            return {
                "success": False,
                "message": "No available slots matching preferences",
                "totalSlots": len(slots),
                "availableSlots": 0,
            }

        log(RichLogger.best_slot(best.starttime, best.location))
        reservation = await client.create_reservation(session, best.id, p.days_ahead, p.guest_id)
        log(RichLogger.reserved())
        return {
            "success": True,
            "message": "Reservation completed",
            "slot": {"time": best.starttime, "location": best.location},
            "reservation": reservation,
        }

    async def _check_slots(self, client, session, p, log):
        slots = await client.list_slots(session, p.day_of_week)
        available = available_slots(slots)
        log(RichLogger.slots_found(len(slots), len(available)))
        return {
            "success": True,
            "totalSlots": len(slots),
            "availableSlots": len(available),
            "slots": [s.to_public() for s in slots],
        }

    async def _view_reservations(self, client, session, p, log):
        reservations = await client.list_reservations(session)
        log(RichLogger.reservations_found(len(reservations)))
        return {
            "success": True,
            "count": len(reservations),
            "reservations": [r.to_public() for r in reservations],
        }

    async def _cancel_reservation(self, client, session, p, log):
        log(RichLogger.cancel(p.reservation_id))
        await client.cancel_reservation(session, p.reservation_id)
        log(RichLogger.canceled())
        return {"success": True, "message": "Reservation canceled", "reservationId": p.reservation_id}

    # ------------------ Audit ------------------
    def _record(self, raw: Optional[Mapping[str, Any]], ip: str, reply: Reply, t0: float) -> None:
        if self.audit is None:
            return
        self.audit.write(
            {
                "evt": "request",
                "t": time.time(),
                "action": str((raw or {}).get("action") or ACTION_AUTO_RESERVE).upper(),
                "status": reply.status_code,
                "success": bool(reply.body.get("success")),
                "ip": ip,
                "duration_ms": int((time.monotonic() - t0) * 1000),
            }
        )
