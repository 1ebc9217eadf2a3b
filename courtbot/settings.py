from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

# Load .env if present
try:
    from dotenv import load_dotenv, find_dotenv  # type: ignore
    load_dotenv(find_dotenv(), override=False)
except Exception:
    pass

def _get_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")

@dataclass(frozen=True)
class Settings:
    host: str = os.getenv("COURTBOT_HOST", "0.0.0.0")
    port: int = int(os.getenv("COURTBOT_PORT", "8080"))

    # Shared secret callers must send in X-API-Key
    api_key: Optional[str] = os.getenv("API_KEY")

    # Upstream club account
    email: Optional[str] = os.getenv("EMAIL")
    password: Optional[str] = os.getenv("PASSWORD")
    guest_id: str = os.getenv("GUEST_ID", "")

    upstream_url: str = os.getenv("COURTBOT_UPSTREAM_URL", "https://api-agenda.nacionalclubsocial.uy")
    activity_id: int = int(os.getenv("COURTBOT_ACTIVITY_ID", "54"))
    upstream_timeout: float = float(os.getenv("COURTBOT_UPSTREAM_TIMEOUT", "10.0"))

    # Rate limiting (per API key prefix)
    rate_limit_max: int = int(os.getenv("COURTBOT_RATE_LIMIT_MAX", "10"))
    rate_limit_window_ms: int = int(os.getenv("COURTBOT_RATE_LIMIT_WINDOW_MS", "60000"))

    @property
    def rate_limit_window_s(self) -> int:
        return self.rate_limit_window_ms // 1000

    @property
    def rate_limit_text(self) -> str:
        if self.rate_limit_window_ms == 60000:
            return f"{self.rate_limit_max} requests per minute"
        return f"{self.rate_limit_max} requests per {self.rate_limit_window_s} seconds"

    # Request defaults
    preferred_times: str = os.getenv("COURTBOT_PREFERRED_TIMES", "19:00")
    preferred_locations: str = os.getenv("COURTBOT_PREFERRED_LOCATIONS", "Cancha de Tenis 2")

    # Audit / logs
    audit_file: str = os.getenv("COURTBOT_AUDIT_FILE", "./audit/requests.ndjson")
    request_log: bool = _get_bool("COURTBOT_LOG", True)   # echo per-request logs to stdout


settings = Settings()
