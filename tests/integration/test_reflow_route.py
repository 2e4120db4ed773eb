"""Integration tests for the trip itinerary endpoints."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from backend.reflow.db.engine import get_store
from backend.reflow.db.inmemory import InMemoryItineraryStore
from backend.reflow.main import app
from backend.reflow.models import Itinerary


def make_itinerary_payload() -> dict[str, Any]:
    """Helper to create a two-day itinerary in wire format."""

    def activity(
        activity_id: str, lng: float, start: str, end: str, cost: float, locked: bool = False
    ) -> dict[str, Any]:
        return {
            "id": activity_id,
            "place": {
                "id": f"place-{activity_id}",
                "name": activity_id,
                "category": "sight",
                "coordinate": {"lat": 35.68, "lng": lng},
            },
            "timeSlot": {"start": start, "end": end},
            "durationMinutes": 60,
            "locked": locked,
            "costEstimate": cost,
        }

    return {
        "days": [
            {
                "activities": [
                    activity("a1", 139.70, "09:00", "10:00", 30.0, locked=True),
                    activity("a2", 139.71, "13:00", "14:00", 20.0),
                ]
            },
            {"activities": [activity("b1", 139.75, "10:00", "11:00", 50.0)]},
        ]
    }


@pytest.fixture
def store() -> InMemoryItineraryStore:
    """In-memory store seeded with version 1 of trip-1."""
    store = InMemoryItineraryStore()
    store.put("trip-1", 1, Itinerary.model_validate(make_itinerary_payload()))
    return store


@pytest.fixture
def client(store: InMemoryItineraryStore) -> Iterator[TestClient]:
    """Test client wired to the seeded store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_reflow_success(client: TestClient, store: InMemoryItineraryStore) -> None:
    """Test a successful reflow response envelope."""
    response = client.post(
        "/trips/trip-1/reflow",
        json={
            "baseVersion": 1,
            "changeSet": {
                "addedActivities": [
                    {
                        "name": "Meiji Shrine",
                        "location": {"lat": 35.68, "lng": 139.72, "name": "Harajuku"},
                        "category": "sight",
                        "durationMinutes": 90,
                        "dayIndex": 0,
                    }
                ],
                "modifiedActivities": [
                    {"id": "a2", "changes": {"op": "annotate", "notes": "book ahead"}}
                ],
            },
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["version"] == 2
    summary = data["changeSummary"]
    assert {k: summary[k] for k in ("modified", "removed", "added", "locksPreserved")} == {
        "modified": 1,
        "removed": 0,
        "added": 1,
        "locksPreserved": 1,
    }
    assert summary["travelDistanceKm"] > 0
    assert data["warnings"] == []

    day0 = data["itinerary"]["days"][0]["activities"]
    locked = next(a for a in day0 if a["id"] == "a1")
    assert locked["timeSlot"] == {"start": "09:00", "end": "10:00"}
    assert locked["locked"] is True
    assert len(day0) == 3
    assert data["itinerary"]["reflowCount"] == 1
    assert store.latest_version("trip-1") == 2


def test_reflow_unknown_trip(client: TestClient) -> None:
    """Test 404 for a missing trip."""
    response = client.post("/trips/missing/reflow", json={"baseVersion": 1})

    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert data["error"]["kind"] == "not_found"
    assert data["error"]["details"]["tripId"] == "missing"


def test_reflow_stale_base_version(client: TestClient) -> None:
    """Test 409 when the base version is no longer the latest."""
    first = client.post("/trips/trip-1/reflow", json={"baseVersion": 1})
    second = client.post("/trips/trip-1/reflow", json={"baseVersion": 1})

    assert first.status_code == 200
    assert second.status_code == 409
    error = second.json()["error"]
    assert error["kind"] == "version_conflict"
    assert error["details"] == {"tripId": "trip-1", "baseVersion": 1, "latestVersion": 2}


def test_reflow_budget_exceeded(client: TestClient, store: InMemoryItineraryStore) -> None:
    """Test 422 with the attempted itinerary and nothing persisted."""
    response = client.post(
        "/trips/trip-1/reflow",
        json={
            "baseVersion": 1,
            "changeSet": {"budgetConstraints": {"maxTotal": 60, "maxPerCategory": {"sight": 90}}},
        },
    )

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["error"]["kind"] == "budget_exceeded"
    assert data["error"]["details"]["scope"] == "total"
    assert data["error"]["details"]["overage"] == 40.0
    assert [v["code"] for v in data["error"]["details"]["violations"]] == [
        "OVER_BUDGET_TOTAL",
        "OVER_BUDGET_CATEGORY",
    ]
    assert data["attemptedItinerary"]["reflowCount"] == 1
    assert store.latest_version("trip-1") == 1


def test_reflow_day_index_out_of_range(client: TestClient) -> None:
    """Test 400 naming the offending field."""
    response = client.post(
        "/trips/trip-1/reflow",
        json={
            "baseVersion": 1,
            "changeSet": {
                "addedActivities": [
                    {
                        "name": "Nowhere",
                        "location": {"lat": 0, "lng": 0, "name": "x"},
                        "category": "sight",
                        "dayIndex": 5,
                    }
                ]
            },
        },
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["kind"] == "invalid_change_set"
    assert error["details"]["field"] == "addedActivities[0].dayIndex"


def test_reflow_malformed_body(client: TestClient, store: InMemoryItineraryStore) -> None:
    """Test that request validation errors become invalid change sets."""
    response = client.post(
        "/trips/trip-1/reflow",
        json={
            "baseVersion": 1,
            "changeSet": {"modifiedActivities": [{"id": "a2", "changes": {"op": "teleport"}}]},
        },
    )

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"]["kind"] == "invalid_change_set"
    assert data["error"]["details"]["field"].startswith("changeSet.modifiedActivities")
    assert store.latest_version("trip-1") == 1


def test_reflow_missing_base_version(client: TestClient) -> None:
    """Test that a body without baseVersion is rejected as invalid."""
    response = client.post("/trips/trip-1/reflow", json={"changeSet": {}})

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "baseVersion"


def test_reflow_reports_advisory_warnings(client: TestClient) -> None:
    """Test that advisory warnings accompany a successful reflow."""
    response = client.post(
        "/trips/trip-1/reflow",
        json={
            "baseVersion": 1,
            "changeSet": {
                "lockedActivityIds": ["a2"],
                "modifiedActivities": [{"id": "a2", "changes": {"op": "rename", "name": "x"}}],
            },
        },
    )

    assert response.status_code == 200
    warnings = response.json()["warnings"]
    assert [w["code"] for w in warnings] == ["LOCKED_MODIFICATION_IGNORED"]
    assert warnings[0]["severity"] == "advisory"
    assert warnings[0]["affectedActivityIds"] == ["a2"]


def test_get_latest_and_specific_versions(client: TestClient) -> None:
    """Test itinerary reads after a reflow."""
    client.post(
        "/trips/trip-1/reflow",
        json={"baseVersion": 1, "changeSet": {"removedActivities": ["b1"]}},
    )

    latest = client.get("/trips/trip-1/itinerary")
    assert latest.status_code == 200
    assert latest.json()["version"] == 2
    assert latest.json()["tripId"] == "trip-1"
    assert latest.json()["itinerary"]["days"][1]["activities"] == []

    first = client.get("/trips/trip-1/itinerary/1")
    assert first.status_code == 200
    assert first.json()["itinerary"]["days"][1]["activities"][0]["id"] == "b1"


def test_get_missing_itinerary(client: TestClient) -> None:
    """Test 404s on itinerary reads."""
    assert client.get("/trips/missing/itinerary").status_code == 404
    assert client.get("/trips/trip-1/itinerary/7").status_code == 404
