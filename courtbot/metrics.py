from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import orjson

from .settings import settings


@dataclass
class Percentiles:
    count: int
    p50: int
    p95: int


def _percentile(sorted_vals: List[int], p: float) -> int:
    if not sorted_vals:
        return 0
    if p <= 0:
        return int(sorted_vals[0])
    if p >= 1:
        return int(sorted_vals[-1])
    k = p * (len(sorted_vals) - 1)
    f = int(k)
    c = min(f + 1, len(sorted_vals) - 1)
    if f == c:
        return int(sorted_vals[f])
    # linear interpolation
    return int(round(sorted_vals[f] + (sorted_vals[c] - sorted_vals[f]) * (k - f), 0))


def _summarize(vals: List[int]) -> Percentiles:
    vals_sorted = sorted(int(v) for v in vals if v is not None)
    return Percentiles(
        count=len(vals_sorted),
        p50=_percentile(vals_sorted, 0.50),
        p95=_percentile(vals_sorted, 0.95),
    )


def read_request_records(path: str | Path) -> List[Dict]:
    p = Path(path)
    if not p.exists():
        return []
    out: List[Dict] = []
    with p.open("rb") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                obj = orjson.loads(line)
            except orjson.JSONDecodeError:
                continue
            if isinstance(obj, dict) and obj.get("evt") == "request":
                out.append(obj)
    return out


def summarize_requests(records: List[Dict]) -> Dict:
    durations = [int(r["duration_ms"]) for r in records if isinstance(r.get("duration_ms"), (int, float))]
    s = _summarize(durations)
    return {
        "by_status": dict(Counter(str(r.get("status")) for r in records)),
        "by_action": dict(Counter(str(r.get("action")) for r in records)),
        "duration_ms": {"count": s.count, "p50": s.p50, "p95": s.p95},
    }


def summarize_file(path: str | Path | None = None) -> Dict:
    path = path or settings.audit_file
    records = read_request_records(path)
    return {
        "requests": len(records),
        "metrics": summarize_requests(records),
    }
