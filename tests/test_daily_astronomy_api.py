"""HTTP surface for daily astronomy, locations, preferences, jobs and lunar tags."""

import os

os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

from datetime import date

import pytest
from fastapi.testclient import TestClient

from lunarcal.app import app
from lunarcal.services.job_store import STORE


client = TestClient(app)

DEN_HAAG = {"name": "Den Haag", "lat": 52.0705, "lon": 4.3007, "isPrimary": True}
OCT = {"startDate": "2025-10-01", "endDate": "2025-10-03"}


@pytest.fixture
def saved(store, short_horizon):
    resp = client.post("/v1/saved-locations", json=DEN_HAAG)
    assert resp.status_code == 201
    body = resp.json()
    loc_id = body["location"]["id"]
    # pin October 2025 regardless of the current date
    job = client.post(f"/v1/saved-locations/{loc_id}/regenerate", json=OCT)
    assert STORE.wait(job.json()["jobId"], timeout=60)["status"] == "done"
    return body


def test_health():
    r = client.get("/__health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_missing_bounds_rejected(store):
    r = client.get("/v1/daily-astronomy", params={"startDate": "2025-10-01"})
    assert r.status_code == 422


def test_no_location_configured(store):
    r = client.get("/v1/daily-astronomy", params=OCT)
    assert r.status_code == 409
    assert r.json()["code"] == "NO_ACTIVE_LOCATION"


def test_inverted_range(store):
    r = client.get("/v1/daily-astronomy", params={"startDate": "2025-10-03", "endDate": "2025-10-01"})
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_DATE_RANGE"


def test_create_location_and_read_range(saved):
    today = date.today()
    assert saved["rows"] == (date(today.year, 12, 31) - today).days + 1
    assert saved["location"]["isPrimary"] is True
    assert saved["location"]["recordCount"] == saved["rows"]

    r = client.get("/v1/daily-astronomy", params=OCT)
    assert r.status_code == 200
    body = r.json()
    assert body["source"] == "saved"
    assert body["count"] == 3
    assert body["locationName"] == "Den Haag"
    assert [d["date"] for d in body["dailyAstronomy"]] == ["2025-10-01", "2025-10-02", "2025-10-03"]
    for day in body["dailyAstronomy"]:
        assert day["locationId"] == saved["location"]["id"]
        assert 0 <= day["percentageVisible"] <= 100
        assert day["sunrise"] < day["sunset"]


def test_stored_matches_compute(saved):
    stored = client.get("/v1/daily-astronomy", params=OCT).json()["dailyAstronomy"][1]
    computed = client.get(
        "/v1/daily-astronomy/compute", params={"lat": 52.0705, "lon": 4.3007, "date": "2025-10-02"}
    ).json()
    stored.pop("locationId")
    assert computed.pop("locationId") is None
    assert stored == computed


def test_temp_location_precedence(saved):
    r = client.put("/v1/preferences/temp-location", json={"name": "Tokyo", "lat": 35.6762, "lon": 139.6503})
    assert r.status_code == 200
    assert r.json()["tempLocation"]["name"] == "Tokyo"

    body = client.get("/v1/daily-astronomy", params=OCT).json()
    assert body["source"] == "temporary"
    assert body["locationName"] == "Tokyo"
    assert all(d["locationId"] is None for d in body["dailyAstronomy"])

    assert client.delete("/v1/preferences/temp-location").json()["tempLocation"] is None
    assert client.get("/v1/daily-astronomy", params=OCT).json()["source"] == "saved"


def test_temp_location_bad_coordinates(store):
    r = client.put("/v1/preferences/temp-location", json={"lat": 95.0, "lon": 0.0})
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_COORDINATES"
    assert client.get("/v1/preferences").json()["tempLocation"] is None


def test_saved_location_validation(store):
    r = client.post("/v1/saved-locations", json={"name": "Nowhere", "lat": 95.0, "lon": 0.0})
    assert r.status_code == 422
    assert client.get("/v1/saved-locations").json() == []


def test_unknown_location(store):
    r = client.get("/v1/saved-locations/999")
    assert r.status_code == 404
    assert r.json()["code"] == "LOCATION_NOT_FOUND"
    r = client.put("/v1/preferences/active-location", json={"locationId": 999})
    assert r.status_code == 404


def test_deferred_creation_runs_as_job(store, short_horizon):
    r = client.post("/v1/saved-locations", params={"wait": "false"}, json={"name": "Quito", "lat": -0.18, "lon": -78.47})
    assert r.status_code == 202
    body = r.json()
    assert body["rows"] == 0
    job_id = body["jobId"]
    assert job_id

    STORE.wait(job_id, timeout=60)
    status = client.get(f"/v1/jobs/{job_id}").json()
    assert status["status"] == "done"
    assert status["locationId"] == body["location"]["id"]
    assert status["rows"] > 0
    loc = client.get(f"/v1/saved-locations/{body['location']['id']}").json()
    assert loc["recordCount"] == status["rows"]


def test_unknown_job(store):
    r = client.get("/v1/jobs/gen_nope")
    assert r.status_code == 404
    assert r.json()["code"] == "JOB_NOT_FOUND"


def test_regenerate_validates_range(saved):
    loc_id = saved["location"]["id"]
    r = client.post(f"/v1/saved-locations/{loc_id}/regenerate", json={"startDate": "2025-10-05"})
    assert r.status_code == 400
    r = client.post(
        f"/v1/saved-locations/{loc_id}/regenerate", json={"startDate": "2025-10-05", "endDate": "2025-10-01"}
    )
    assert r.json()["code"] == "INVALID_DATE_RANGE"


def test_update_and_delete_location(saved):
    loc_id = saved["location"]["id"]
    r = client.patch(f"/v1/saved-locations/{loc_id}", json={"name": "The Hague"})
    assert r.status_code == 200
    assert r.json()["name"] == "The Hague"

    assert client.delete(f"/v1/saved-locations/{loc_id}").status_code == 204
    assert client.get("/v1/preferences").json()["activeLocationId"] is None
    r = client.get("/v1/daily-astronomy", params=OCT)
    assert r.status_code == 409


def test_active_location_switch(saved, short_horizon):
    other = client.post("/v1/saved-locations", json={"name": "Quito", "lat": -0.18, "lon": -78.47}).json()
    other_id = other["location"]["id"]
    r = client.put("/v1/preferences/active-location", json={"locationId": other_id})
    assert r.status_code == 200
    assert r.json()["activeLocationId"] == other_id
    names = [loc["name"] for loc in client.get("/v1/saved-locations").json()]
    assert names == ["Den Haag", "Quito"]


def test_display_preferences(store):
    r = client.patch("/v1/preferences", json={"defaultView": "week", "notifications": True})
    assert r.status_code == 200
    body = r.json()
    assert body["defaultView"] == "week"
    assert body["notifications"] is True
    assert body["showLunarInfo"] is True
    assert client.patch("/v1/preferences", json={"defaultView": "year"}).status_code == 422


def test_compute_rejects_bad_coordinates():
    r = client.get("/v1/daily-astronomy/compute", params={"lat": 91, "lon": 0, "date": "2025-10-01"})
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_COORDINATES"


def test_sun_times_polar_night():
    r = client.get("/v1/daily-astronomy/sun", params={"lat": 69.6492, "lon": 18.9553, "date": "2025-12-21"})
    assert r.status_code == 200
    body = r.json()
    assert body["sunrise"] is None and body["sunset"] is None
    assert body["solarNoon"] is not None


def test_lunar_endpoints():
    r = client.get("/v1/lunar/suggest", params={"date": "2025-10-12", "lat": 52.0705, "lon": 4.3007})
    assert r.status_code == 200
    suggestion = r.json()
    assert suggestion["paksha"] == "krishna"
    assert 16 <= suggestion["tithiNumber"] <= 30

    r = client.post(
        "/v1/lunar/check",
        json={
            "date": "2025-10-12",
            "lat": 52.0705,
            "lon": 4.3007,
            "tithi": suggestion["tithi"],
            "paksha": "krishna",
        },
    )
    assert r.status_code == 200
    assert r.json()["agrees"] == {"tithi": True, "paksha": True, "nakshatra": None}

    r = client.post(
        "/v1/lunar/check",
        json={"date": "2025-10-12", "lat": 52.0705, "lon": 4.3007, "tithi": "Purnima", "paksha": "krishna"},
    )
    assert r.status_code == 400
