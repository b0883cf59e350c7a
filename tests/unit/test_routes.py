"""
API tests for the proximity, location and report routes.

Run: pytest tests/unit/test_routes.py -v
"""

import json
from decimal import Decimal

from models.inventory import DirectionalFace
from models.reservation import ReservationFaceType
from routes.errors import handle_error
from exceptions import UnknownDimensionError
from tests.factories import InventoryItemFactory, ReservationFactory, ZoneFactory


# ===================
# APP
# ===================

class TestAppEndpoints:

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_lists_endpoints(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["proximity"] == "/api/proximity"


# ===================
# PROXIMITY
# ===================

class TestProximityRoutes:

    def test_classify(self, test_client):
        body = {
            "items": [
                InventoryItemFactory.create_payload(id="near", lat=19.4326, lng=-99.1332),
                InventoryItemFactory.create_payload(id="far", lat=19.4426, lng=-99.1332),
                InventoryItemFactory.create_payload(id="nowhere", lat=None),
            ],
            "zones": [ZoneFactory.create_payload(radius_m=300)],
        }

        response = test_client.post("/api/proximity/classify", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["active"] is True
        assert data["in_range"] == ["near"]
        assert data["out_of_range"] == ["far"]

    def test_classify_without_zones(self, test_client):
        body = {"items": [InventoryItemFactory.create_payload()]}

        response = test_client.post("/api/proximity/classify", json=body)

        assert response.json() == {"active": False, "in_range": [], "out_of_range": []}

    def test_markers(self, test_client):
        body = {
            "items": [
                InventoryItemFactory.create_payload(id="sel"),
                InventoryItemFactory.create_payload(id="res", already_reserved_elsewhere=True),
                InventoryItemFactory.create_payload(id="far", lat=25.6866, lng=-100.3161),
            ],
            "zones": [ZoneFactory.create_payload(radius_m=500)],
            "selected_ids": ["sel"],
        }

        response = test_client.post("/api/proximity/markers", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        states = {m["id"]: (m["state"], m["color"]) for m in data["data"]}
        assert states["sel"] == ("selected", "#facc15")
        assert states["res"] == ("already_reserved", "#22c55e")
        assert states["far"] == ("out_of_range", "#6b7280")

    def test_invalid_zone_rejected(self, test_client):
        body = {
            "items": [],
            "zones": [{"id": "z", "center": {"lat": 19.4, "lng": -99.1}, "radius_m": 0}],
        }

        response = test_client.post("/api/proximity/classify", json=body)

        assert response.status_code == 422


# ===================
# LOCATIONS
# ===================

class TestLocationRoutes:

    def test_location_groups(self, test_client):
        body = {
            "items": [
                InventoryItemFactory.create_payload(id="f", directional_face=DirectionalFace.FLUJO),
                InventoryItemFactory.create_payload(id="c", directional_face=DirectionalFace.CONTRAFLUJO),
            ]
        }

        response = test_client.post("/api/locations/groups", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["locations"] == [
            {"key": "19.43260,-99.13320", "has_flujo": True, "has_contraflujo": True}
        ]
        faces = {i["id"]: (i["stored_face"], i["display_face"]) for i in data["items"]}
        assert faces["f"] == ("Flujo", "Completo")
        assert faces["c"] == ("Contraflujo", "Completo")

    def test_distance_groups(self, test_client):
        body = {
            "items": [
                InventoryItemFactory.create_payload(id="A", lat=19.400, lng=-99.13),
                InventoryItemFactory.create_payload(id="B", lat=19.401, lng=-99.13),
                InventoryItemFactory.create_payload(id="X", lat=None),
            ],
            "group_size": 5,
            "min_distance_m": 500,
        }

        response = test_client.post("/api/locations/distance-groups", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [g["name"] for g in data["data"]] == ["Grupo 1", "Grupo 2", "Sin ubicación"]


# ===================
# REPORTS
# ===================

class TestReportRoutes:

    def test_group_report(self, test_client):
        body = {
            "records": [
                ReservationFactory.create_payload(id="r1", plaza="Monterrey", article="Muro"),
                ReservationFactory.create_payload(id="r2", plaza="Mérida", article="Muro"),
                ReservationFactory.create_payload(id="r3", plaza="Monterrey", article="Parabús"),
            ],
            "dimensions": ["plaza", "article"],
            "filter_text": "monterrey",
        }

        response = test_client.post("/api/reports/group", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["total_groups"] == 2
        assert data["total_items"] == 2
        assert [g["key"] for g in data["data"]] == ["Monterrey | MURO", "Monterrey | PARABÚS"]
        assert data["tree"][0]["value"] == "Monterrey"
        assert len(data["tree"][0]["children"]) == 2

    def test_group_report_with_conditions(self, test_client):
        body = {
            "records": [
                ReservationFactory.create_payload(id="r1", units=1),
                ReservationFactory.create_payload(id="r2", units=4),
            ],
            "dimensions": [],
            "conditions": [{"field": "units", "operator": ">=", "value": "2"}],
        }

        response = test_client.post("/api/reports/group", json=body)

        data = response.json()
        assert data["data"][0]["key"] == "Todos"
        assert [m["id"] for m in data["data"][0]["members"]] == ["r2"]

    def test_unknown_dimension(self, test_client):
        body = {"records": [], "dimensions": ["color"]}

        response = test_client.post("/api/reports/group", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "UNKNOWN_DIMENSION"

    def test_summary(self, test_client):
        body = {
            "records": [
                ReservationFactory.create_payload(rate=Decimal("1200")),
                ReservationFactory.create_payload(face_type=ReservationFaceType.CONTRAFLUJO, rate=Decimal("800")),
                ReservationFactory.create_payload(face_type=ReservationFaceType.BONIFICACION, rate=Decimal("0")),
            ]
        }

        response = test_client.post("/api/reports/summary", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["renta"] == 2
        assert data["bonificadas"] == 1
        assert Decimal(data["money_total"]) == Decimal("2000")


# ===================
# ERROR ENVELOPE
# ===================

class TestHandleError:
    """Tests for routes.errors.handle_error()"""

    def test_app_error_keeps_status_and_code(self):
        response = handle_error(UnknownDimensionError("color", ["plaza"]))

        assert response.status_code == 422
        assert json.loads(response.body)["error"]["code"] == "UNKNOWN_DIMENSION"

    def test_unexpected_error_is_internal(self):
        response = handle_error(RuntimeError("boom"))

        assert response.status_code == 500
        assert json.loads(response.body)["error"]["code"] == "INTERNAL_ERROR"
