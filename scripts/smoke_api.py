#!/usr/bin/env python3
"""
Smoke test for a running dealership backend
Logs in as admin, creates a car, checks the public list, deletes it again
and stores one contact message and one valuation request.

Usage: BASE_URL=http://localhost:8080 ADMIN_PASSWORD=... python scripts/smoke_api.py
"""
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from frontend.api_client import APIError, DealershipAPI

BASE_URL = os.getenv("BASE_URL", "http://localhost:8080")


def check(label: str, condition: bool) -> bool:
    print(f"{'✅' if condition else '❌'} {label}")
    return condition


def main() -> int:
    api = DealershipAPI(BASE_URL, timeout=10)
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        print("❌ ADMIN_PASSWORD must be set")
        return 1

    results = []
    login = api.admin_login(password)
    results.append(check("Admin login", bool(login and login.get("token"))))
    if not results[-1]:
        return 1
    token = login["token"]

    try:
        api.create_car({"make": "Audi", "model": "A4"}, "not-a-token")
        results.append(check("Create without valid token is rejected", False))
    except APIError as e:
        results.append(check("Create without valid token is rejected", e.status_code == 401))

    car = api.create_car({"make": "Audi", "model": "A4", "description": "smoke test"}, token)
    results.append(check(f"Create car {car.get('id')}", car.get("status") == "verkauf"))

    listed = [c["id"] for c in api.get_cars()]
    results.append(check("Car is listed publicly", car["id"] in listed))

    api.delete_car(car["id"], token)
    listed = [c["id"] for c in api.get_cars()]
    results.append(check("Car is gone after delete", car["id"] not in listed))

    results.append(check("Contact message stored", api.submit_message({"vorname": "Smoke", "nachricht": "Test"}).get("ok")))
    results.append(check("Valuation request stored", api.submit_valuation({"marke": "VW", "modell": "Golf"}).get("ok")))

    passed = sum(1 for r in results if r)
    print(f"\n📊 {passed}/{len(results)} checks passed")
    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
