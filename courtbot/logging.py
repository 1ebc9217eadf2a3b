"""
Rich logging utilities for the reservation endpoint.
Provides emoji-enhanced log lines that are both printed and returned to the caller.
"""

import time
from typing import Any, List


class RichLogger:
    """Enhanced logging with emojis and structured output for the reservation flow."""

    @staticmethod
    def _format_time() -> str:
        return time.strftime("%H:%M:%S", time.localtime())

    @staticmethod
    def _format_duration(ms: float) -> str:
        if ms < 1000:
            return f"{ms:.0f}ms"
        return f"{ms/1000:.1f}s"

    @staticmethod
    def started(iso_time: str) -> List[str]:
        return ["🚀 Tennis Reservation Automation Started (SECURED)", f"⏰ Time: {iso_time}"]

    @staticmethod
    def client_ip(ip: str) -> str:
        return f"📍 Client IP: {ip}"

    @staticmethod
    def key_not_configured() -> str:
        return "⚠️  WARNING: API_KEY not configured in environment variables"

    @staticmethod
    def key_missing(ip: str) -> str:
        return f"❌ Unauthorized attempt from IP: {ip} - Missing API key"

    @staticmethod
    def key_invalid(ip: str, provided: str) -> str:
        return f"❌ Unauthorized attempt from IP: {ip} - Invalid API key: {provided[:10]}..."

    @staticmethod
    def key_valid() -> str:
        return "✅ API key validated"

    @staticmethod
    def rate_limited(identifier: str, ip: str) -> str:
        return f"⚠️  Rate limit exceeded for key: {identifier}... from IP: {ip}"

    @staticmethod
    def rate_ok() -> str:
        return "✅ Rate limit check passed"

    @staticmethod
    def request(action: str, day_of_week: int) -> List[str]:
        return [f"📋 Action: {action}", f"📅 Day of Week: {day_of_week}"]

    @staticmethod
    def login_start() -> str:
        return "🔐 Logging in to upstream..."

    @staticmethod
    def login_ok(user_id: Any) -> str:
        return f"✅ Login successful! User: {user_id}"

    @staticmethod
    def mode(action: str) -> str:
        icon = {
            "AUTO_RESERVE": "🎾",
            "CHECK_SLOTS": "🔍",
            "VIEW_RESERVATIONS": "📋",
        }.get(action, "🔧")
        return f"{icon} {action.replace('_', ' ')} MODE"

    @staticmethod
    def slots_found(total: int, available: int) -> str:
        return f"Total: {total}, Available: {available}"

    @staticmethod
    def best_slot(time_: str, location: str) -> str:
        return f"🎯 Best slot: {time_} at {location}"

    @staticmethod
    def no_slot() -> str:
        return "❌ No suitable slots available"

    @staticmethod
    def reserved() -> str:
        return "✅ Reservation completed!"

    @staticmethod
    def reservations_found(count: int) -> str:
        return f"Found {count} reservations"

    @staticmethod
    def cancel(reservation_id: Any) -> str:
        return f"❌ CANCEL RESERVATION: {reservation_id}"

    @staticmethod
    def canceled() -> str:
        return "✅ Canceled successfully"

    @staticmethod
    def completed(duration_ms: float) -> str:
        return f"✅ Script completed successfully ({RichLogger._format_duration(duration_ms)})"

    @staticmethod
    def error(error_msg: str) -> str:
        return f"❌ Error: {error_msg}"


class RequestLog:
    """Collects one request's log lines for the response and echoes them to stdout."""

    def __init__(self, echo: bool = True):
        self.lines: List[str] = []
        self.echo = echo

    def __call__(self, *messages: str) -> None:
        for message in messages:
            self.lines.append(message)
            if self.echo:
                print(f"[{RichLogger._format_time()}] {message}")


class NDJSONLogger:
    """Audit logger for structured per-request records."""

    def __init__(self, path: str):
        from pathlib import Path
        import orjson

        self.path = Path(path)
        self._orjson = orjson

    def write(self, event: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(self._orjson.dumps(event).decode("utf-8") + "\n")
        except OSError as e:
            print(f"[{RichLogger._format_time()}] {RichLogger.error(f'audit write failed: {e}')}")

    def clear(self) -> None:
        if self.path.exists():
            with self.path.open("w") as f:
                f.truncate(0)
