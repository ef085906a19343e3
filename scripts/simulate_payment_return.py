#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import Any

import httpx
from httpx import ConnectError


def build_draft(consultant_id: str, date: str, time: str, price: float) -> dict[str, Any]:
    return {
        "values": {
            "date": date,
            "time": f"{date}T{time}:00",
            "consultationType": "financial",
            "details": "Smoke test booking",
            "paymentMethod": "card",
        },
        "consultant": {"id": consultant_id, "name": "Smoke Consultant", "pricePerSession": price, "duration": 60},
        "service": None,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Save a booking draft and replay a gateway return")
    parser.add_argument("--base-url", default="http://127.0.0.1:8001")
    parser.add_argument("--consultant", default="consultant_123")
    parser.add_argument("--date", default="2025-06-01")
    parser.add_argument("--time", default="14:30")
    parser.add_argument("--price", type=float, default=500.0)
    parser.add_argument("--status", default="paid", help="paid | failed | anything else")
    parser.add_argument("--payment-id", default="pay_smoke_1")
    parser.add_argument("--message", default=None, help="Gateway failure message")
    args = parser.parse_args()

    try:
        saved = httpx.put(
            f"{args.base_url}/client/bookings/draft",
            json=build_draft(args.consultant, args.date, args.time, args.price),
            timeout=10.0,
        )
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn app.main:app --reload --port 8001")
        return

    print("draft:", saved.status_code, saved.text)
    attempt_id = saved.json().get("attemptId") if saved.status_code == 200 else None

    params = {"status": args.status, "id": args.payment_id}
    if args.message:
        params["message"] = args.message
    if attempt_id:
        params["attempt"] = attempt_id

    resp = httpx.get(f"{args.base_url}/client/payment-result", params=params, timeout=30.0)
    print("payment-result:", resp.status_code)
    if resp.text:
        print(resp.text)


if __name__ == "__main__":
    main()
