"""API tests: locations endpoints using test DB (client fixture overrides get_db)."""
import pytest

from directory_core.status import LocationStatus
from repositories.location_repository import update_location

pytestmark = pytest.mark.api

LIST_KEYS = {"id", "titolo", "indirizzo", "latitude", "longitude", "stato"}


def test_search_finds_unique_location(client, make_location):
    """GET /api/locations/search returns the matching location in a data envelope."""
    make_location(title="Unique Test Location", address="Via Unica 7, Roma")
    r = client.get("/api/locations/search", params={"search": "Unique Test Location"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert len(data) == 1
    assert data[0]["titolo"] == "Unique Test Location"
    assert data[0]["indirizzo"] == "Via Unica 7, Roma"
    assert data[0]["stato"] == "attivo"


def test_list_items_have_no_detail_fields(client, make_location):
    """List rows expose only map fields; description is never included."""
    make_location(title="Colosseo", description="Anfiteatro")
    r = client.get("/api/locations/search", params={"search": "Colosseo"})
    (item,) = r.json()["data"]
    assert set(item) == LIST_KEYS
    assert "descrizione" not in item


def test_search_by_status(client, make_location):
    make_location(title="Active One", status=LocationStatus.Active)
    make_location(title="Inactive One", status=LocationStatus.Inactive)

    active = client.get("/api/locations/search", params={"stato": "attivo"}).json()["data"]
    inactive = client.get("/api/locations/search", params={"stato": "disattivo"}).json()["data"]
    assert [i["titolo"] for i in active] == ["Active One"]
    assert [i["titolo"] for i in inactive] == ["Inactive One"]


def test_search_combines_text_and_status(client, make_location):
    make_location(title="Parco Nord", status=LocationStatus.Active)
    make_location(title="Parco Sud", status=LocationStatus.InAlarm)
    r = client.get("/api/locations/search", params={"search": "parco", "stato": "in_allarme"})
    assert [i["titolo"] for i in r.json()["data"]] == ["Parco Sud"]


def test_search_without_filters_returns_all_ordered(client, make_location):
    make_location(title="Zeta")
    make_location(title="Alpha")
    r = client.get("/api/locations/search")
    assert [i["titolo"] for i in r.json()["data"]] == ["Alpha", "Zeta"]


def test_search_invalid_status_returns_422(client):
    """Strict search rejects an unknown status with a machine-readable body."""
    r = client.get("/api/locations/search", params={"stato": "chiuso"})
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "INVALID_SEARCH_PARAMETERS"
    assert body["message"] == "Invalid location search parameters"
    assert "stato" in body["errors"]


def test_search_too_long_returns_422(client):
    r = client.get("/api/locations/search", params={"search": "x" * 256})
    assert r.status_code == 422
    assert "search" in r.json()["errors"]


def test_index_is_lenient_about_status(client, make_location):
    """GET /api/locations ignores an unknown status instead of rejecting it."""
    make_location(title="Alpha")
    make_location(title="Beta", status=LocationStatus.Inactive)
    r = client.get("/api/locations", params={"stato": "chiuso", "search": "  "})
    assert r.status_code == 200
    body = r.json()
    assert body["filters"] == {"search": "", "stato": None}
    assert [i["titolo"] for i in body["locations"]] == ["Alpha", "Beta"]
    assert isinstance(body["google_maps_api_key_missing"], bool)


def test_root_renders_map_page_with_filters(client, make_location):
    """GET / returns the same page props as /api/locations, with filters echoed."""
    make_location(title="Colosseo")
    make_location(title="Pantheon")
    r = client.get("/", params={"search": " Colosseo ", "stato": "attivo"})
    assert r.status_code == 200
    body = r.json()
    assert body["filters"] == {"search": "Colosseo", "stato": "attivo"}
    assert [i["titolo"] for i in body["locations"]] == ["Colosseo"]


def test_show_location(client, make_location):
    loc = make_location(
        title="Torre di Pisa",
        description="Campanile",
        status=LocationStatus.InAlarm,
        website="https://example.org",
        visitor_notes="Accesso contingentato",
    )
    r = client.get(f"/api/locations/{loc.id}")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["id"] == loc.id
    assert data["titolo"] == "Torre di Pisa"
    assert data["descrizione"] == "Campanile"
    assert data["stato"] == {
        "value": "in_allarme",
        "label": "In Allarme",
        "color": "#EF4444",
        "css_class": "danger",
    }
    assert data["sito_web"] == "https://example.org"
    assert data["note_visitatori"] == "Accesso contingentato"
    assert data["orari_apertura"] is None
    assert {"prezzo_biglietto", "telefono", "created_at", "updated_at"} <= set(data)


def test_details_matches_show(client, make_location):
    loc = make_location(title="Uffizi")
    show = client.get(f"/api/locations/{loc.id}").json()
    details = client.get(f"/api/locations/{loc.id}/details").json()
    assert show == details


@pytest.mark.parametrize("path", ["/api/locations/999999", "/api/locations/999999/details"])
def test_unknown_location_returns_404(client, path):
    r = client.get(path)
    assert r.status_code == 404
    assert r.json() == {"message": "Location not found", "error": "LOCATION_NOT_FOUND"}


def test_non_integer_id_is_rejected(client):
    r = client.get("/api/locations/abc")
    assert r.status_code == 422


def test_map_dataset(client, make_location):
    make_location(title="Beta")
    make_location(title="Alpha")
    r = client.get("/api/locations/map")
    assert r.status_code == 200
    data = r.json()["data"]
    assert [i["titolo"] for i in data] == ["Alpha", "Beta"]
    assert all(set(i) == LIST_KEYS for i in data)


def test_nearby(client, make_location):
    make_location(title="Vicino", latitude=41.9009, longitude=12.5)
    make_location(title="Lontano", latitude=43.7, longitude=11.25)
    r = client.get("/api/locations/nearby", params={"lat": 41.9, "lng": 12.5})
    assert r.status_code == 200
    (item,) = r.json()["data"]
    assert item["titolo"] == "Vicino"
    assert item["distance_km"] == pytest.approx(0.1, abs=0.01)


def test_nearby_with_radius(client, make_location):
    make_location(title="Lontano", latitude=43.7, longitude=11.25)
    r = client.get("/api/locations/nearby", params={"lat": 41.9, "lng": 12.5, "radius": 300})
    assert [i["titolo"] for i in r.json()["data"]] == ["Lontano"]


@pytest.mark.parametrize(
    "params",
    [
        {"lng": 12.5},
        {"lat": 91, "lng": 12.5},
        {"lat": 41.9, "lng": 181},
        {"lat": 41.9, "lng": 12.5, "radius": 0},
    ],
)
def test_nearby_rejects_bad_params(client, params):
    assert client.get("/api/locations/nearby", params=params).status_code == 422


def test_within_bounds(client, make_location):
    make_location(title="Dentro", latitude=41.5, longitude=12.5)
    make_location(title="Fuori", latitude=45.0, longitude=9.0)
    r = client.get(
        "/api/locations/within-bounds",
        params={"min_lat": 41.0, "min_lng": 12.0, "max_lat": 42.0, "max_lng": 13.0},
    )
    assert r.status_code == 200
    assert [i["titolo"] for i in r.json()["data"]] == ["Dentro"]


def test_within_bounds_rejects_inverted_box(client):
    r = client.get(
        "/api/locations/within-bounds",
        params={"min_lat": 42.0, "min_lng": 12.0, "max_lat": 41.0, "max_lng": 13.0},
    )
    assert r.status_code == 422


def test_details_reflect_committed_update(client, db_session, make_location):
    """Cached details are dropped when the location is updated and committed."""
    loc = make_location(title="Prima")
    assert client.get(f"/api/locations/{loc.id}").json()["data"]["titolo"] == "Prima"
    assert client.get("/api/locations/map").json()["data"][0]["titolo"] == "Prima"

    update_location(db_session, loc.id, title="Dopo")

    assert client.get(f"/api/locations/{loc.id}").json()["data"]["titolo"] == "Dopo"
    assert client.get("/api/locations/map").json()["data"][0]["titolo"] == "Dopo"
