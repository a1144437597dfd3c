#!/usr/bin/env python3
import json
import argparse
from pathlib import Path

import requests

API_URL = "http://127.0.0.1:8000/allocation/validate"

def load_plan(path):
    """
    Plan file is the /allocation/validate body:
      {"order": {...}, "companies": [...], "sites": [...], "allocations": [...], "fleet_availability": {...}}
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if "order" not in data:
        raise SystemExit(f"{path}: missing 'order'")
    return data

def print_report(data):
    summary = data.get("summary", {})
    progress = summary.get("progress", {})
    print(f"Allocated {progress.get('allocated_weight')} of {progress.get('total_weight')} kg "
          f"over {summary.get('duration_days')} day(s), {summary.get('total_trucks')} truck(s)")
    for t in summary.get("transporters", []):
        print(f" - {t['company_id']}: {t['allocated_weight']} kg, {t['number_of_trucks']} trucks "
              f"(min {t['required_trucks']}, available {t['available_trucks']})")
    for w in data.get("warnings", []):
        print(f"WARNING: {w}")
    if data.get("ok"):
        print("Allocation accepted.")
        return
    print("Allocation rejected:")
    for v in data.get("violations", []):
        print(f" [{v['kind']}] {v['detail']}")

def main():
    parser = argparse.ArgumentParser(description="POST a plan file to /allocation/validate and print violations.")
    parser.add_argument("plan", help="JSON plan file")
    parser.add_argument("--url", default=API_URL)
    parser.add_argument("--json", action="store_true", help="print the raw response")
    args = parser.parse_args()

    payload = load_plan(args.plan)
    r = requests.post(args.url, json=payload, timeout=30)
    if r.status_code == 422:
        print(json.dumps(r.json(), indent=2))
        raise SystemExit("Plan rejected by request validation (see above).")
    r.raise_for_status()
    data = r.json()

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print_report(data)
    if not data.get("ok"):
        raise SystemExit(1)

if __name__ == "__main__":
    main()
