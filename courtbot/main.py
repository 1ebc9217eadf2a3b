from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import orjson
from fastapi import FastAPI, Request
from fastapi.responses import Response

from .handler import ReservationHandler
from .logging import NDJSONLogger
from .metrics import summarize_file
from .settings import settings
from .wire import CORS_HEADERS

app = FastAPI(title="courtbot")

# Log server startup configuration
print("🚀 CourtBot Server Starting")
print(f"🎾 Upstream: {settings.upstream_url} (activity {settings.activity_id}) | 🌐 {settings.host}:{settings.port}")
print(f"🚦 Rate limit: {settings.rate_limit_text} | 🔐 API key: {'set' if settings.api_key else 'MISSING'}")
print("=" * 60)

audit = NDJSONLogger(settings.audit_file)
handler = ReservationHandler(settings, audit=audit)


def _json(status_code: int, body: Dict[str, Any]) -> Response:
    return Response(
        content=orjson.dumps(body),
        status_code=status_code,
        media_type="application/json",
        headers=CORS_HEADERS,
    )


async def _read_params(request: Request) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    if request.method != "POST":
        return dict(request.query_params), None
    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        obj = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None, "Invalid JSON body"
    if not isinstance(obj, dict):
        return None, "JSON body must be an object"
    return obj, None


# ----------------------------
# Reservation endpoint
# ----------------------------
@app.options("/api/reserve")
def reserve_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@app.api_route("/api/reserve", methods=["GET", "POST"])
async def reserve(request: Request):
    params, body_error = await _read_params(request)
    reply = await handler.handle(request.headers, params, body_error)
    return _json(reply.status_code, reply.body)


# ----------------------------
# Health & request metrics view
# ----------------------------
@app.get("/health")
def health():
    return {"ok": True}

@app.get("/metrics")
def metrics_summary():
    return _json(200, summarize_file(audit.path))

@app.delete("/metrics")
def reset_metrics():
    """Clear the request audit log."""
    try:
        audit.clear()
        return {"message": "Metrics cleared successfully"}
    except OSError as e:
        return _json(500, {"error": f"Failed to clear metrics: {e}"})
