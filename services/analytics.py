# services/analytics.py
import os, json, threading
from datetime import datetime, timezone
from typing import Any, Dict

_LOCK = threading.Lock()

ANALYTICS_ENABLE = os.getenv("ANALYTICS_ENABLE", "0") == "1"
ANALYTICS_PATH = os.getenv("ANALYTICS_PATH", os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "events.jsonl"))

def _ensure_dir(path: str):
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)

def validation_event(order_number: str, result: Any) -> Dict[str, Any]:
    """
    Flatten a ValidationResult into an event row (no company names, ids only).
    """
    return {
        "type": "validate_allocation",
        "order_number": order_number or None,
        "ok": result.ok,
        "violations": [v.kind.value for v in result.violations],
        "transporters": len(result.transporters),
        "total_allocated": result.total_allocated,
        "total_trucks": result.total_trucks,
        "duration_days": result.duration_days,
    }

def log_event(event: Dict[str, Any]) -> None:
    """
    Append a single JSON event to analytics file if enabled.
    """
    if not ANALYTICS_ENABLE:
        return
    _ensure_dir(ANALYTICS_PATH)
    event = dict(event)
    event["ts_iso"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    line = json.dumps(event, separators=(",", ":"), ensure_ascii=False)
    with _LOCK:
        with open(ANALYTICS_PATH, "a", encoding="utf-8") as f:
            f.write(line + "\n")
