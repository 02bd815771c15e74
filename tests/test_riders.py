"""
API tests for rider listings, activation and dashboard metrics
"""

from datetime import datetime, timedelta, timezone

from app.auth.permissions import Role
from app.models.enums import OrderStatus, RiderStatus
from app.schemas.rider import RiderResponse
from app.services.metrics import MetricsService

class TestRiderListing:
    """Test cases for rider endpoints"""

    def test_list_riders_with_active_orders(self, client, make_profile, make_rider, make_order, auth_headers):
        soporte = make_profile(Role.SOPORTE)
        busy = make_rider(full_name="Marta", status=RiderStatus.BUSY.value)
        make_rider(full_name="Pedro")
        make_order(delivery_id=busy.id, status=OrderStatus.ASSIGNED.value)
        make_order(delivery_id=busy.id, status=OrderStatus.IN_TRANSIT.value)
        make_order(delivery_id=busy.id, status=OrderStatus.DELIVERED.value)

        response = client.get("/api/v1/riders/", headers=auth_headers(soporte))

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        loads = {r["full_name"]: r["active_orders"] for r in data["riders"]}
        assert loads == {"Marta": 2, "Pedro": 0}

    def test_filter_and_search(self, client, make_profile, make_rider, auth_headers):
        admin = make_profile(Role.ADMIN)
        make_rider(full_name="Luisa Gómez", status=RiderStatus.OFFLINE.value)
        make_rider(full_name="Mario Díaz")
        headers = auth_headers(admin)

        offline = client.get("/api/v1/riders/?status=offline", headers=headers).json()
        search = client.get("/api/v1/riders/?search=Mario", headers=headers).json()

        assert [r["full_name"] for r in offline["riders"]] == ["Luisa Gómez"]
        assert [r["full_name"] for r in search["riders"]] == ["Mario Díaz"]

    def test_available_riders_least_loaded_first(self, client, make_profile, make_rider, make_order, auth_headers):
        soporte = make_profile(Role.SOPORTE)
        loaded = make_rider(full_name="Alba")
        make_rider(full_name="Zulema")
        make_rider(full_name="Inactiva", is_active=False)
        make_order(delivery_id=loaded.id, status=OrderStatus.IN_TRANSIT.value)

        response = client.get("/api/v1/riders/available", headers=auth_headers(soporte))

        data = response.json()
        assert [r["full_name"] for r in data["riders"]] == ["Zulema", "Alba"]
        assert [r["active_orders"] for r in data["riders"]] == [0, 1]

    def test_get_rider(self, client, make_profile, make_rider, auth_headers):
        soporte = make_profile(Role.SOPORTE)
        rider = make_rider(full_name="Rosa", current_location={"lat": 10.49, "lng": -66.88})

        response = client.get(f"/api/v1/riders/{rider.id}", headers=auth_headers(soporte))

        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Rosa"
        assert data["current_location"] == {"lat": 10.49, "lng": -66.88}
        assert data["active_orders"] == 0

    def test_response_reads_orm_rider(self, make_rider):
        rider = make_rider(full_name="Nelson", vehicle_plate="AB123CD")

        response = RiderResponse.model_validate(rider)

        assert RiderResponse.model_config["from_attributes"] is True
        assert response.full_name == "Nelson"
        assert response.vehicle_plate == "AB123CD"
        assert response.status == RiderStatus.AVAILABLE.value

    def test_get_missing_rider(self, client, make_profile, auth_headers):
        soporte = make_profile(Role.SOPORTE)
        response = client.get("/api/v1/riders/nope", headers=auth_headers(soporte))
        assert response.status_code == 404

class TestRiderActivation:
    """Test cases for enabling and disabling riders"""

    def test_admin_deactivates_rider(self, client, make_profile, make_rider, make_order, auth_headers):
        admin = make_profile(Role.ADMIN)
        rider = make_rider()
        order = make_order()
        headers = auth_headers(admin)

        response = client.patch(f"/api/v1/riders/{rider.id}/active", json={"is_active": False}, headers=headers)
        assign = client.post(f"/api/v1/orders/{order.id}/assign", json={"rider_id": rider.id}, headers=headers)

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert assign.json()["code"] == "RIDER_INACTIVE"

    def test_sub_admin_cannot_toggle(self, client, make_profile, make_rider, auth_headers):
        sub_admin = make_profile(Role.SUB_ADMIN)
        rider = make_rider()

        response = client.patch(
            f"/api/v1/riders/{rider.id}/active",
            json={"is_active": False},
            headers=auth_headers(sub_admin)
        )

        assert response.status_code == 403

    def test_toggle_missing_rider(self, client, make_profile, auth_headers):
        admin = make_profile(Role.ADMIN)
        response = client.patch("/api/v1/riders/nope/active", json={"is_active": True}, headers=auth_headers(admin))
        assert response.status_code == 404

class TestDashboardMetrics:
    """Test cases for dashboard aggregates"""

    def test_metrics(self, db_session, make_rider, make_order):
        now = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)
        rider = make_rider()
        make_rider(is_active=False)
        make_rider(status=RiderStatus.BUSY.value)
        make_order()
        make_order(status=OrderStatus.ASSIGNED.value, delivery_id=rider.id)
        make_order(status=OrderStatus.IN_TRANSIT.value)
        make_order(status=OrderStatus.CANCELLED.value)
        make_order(status=OrderStatus.DELIVERED.value, total_amount=20.0, delivered_at=now - timedelta(hours=2))
        make_order(status=OrderStatus.DELIVERED.value, total_amount=15.5, delivered_at=now - timedelta(hours=1))
        make_order(status=OrderStatus.DELIVERED.value, total_amount=99.0, delivered_at=now - timedelta(days=1))

        metrics = MetricsService(db_session).dashboard(now=now)

        assert metrics == {
            "active_orders": 3,
            "available_riders": 1,
            "today_revenue": 35.5,
            "completed_today": 2,
        }

    def test_metrics_endpoint(self, client, make_profile, auth_headers):
        soporte = make_profile(Role.SOPORTE)

        response = client.get("/api/v1/metrics/dashboard", headers=auth_headers(soporte))

        assert response.status_code == 200
        assert response.json() == {
            "active_orders": 0,
            "available_riders": 0,
            "today_revenue": 0.0,
            "completed_today": 0,
        }

    def test_metrics_require_token(self, client):
        assert client.get("/api/v1/metrics/dashboard").status_code == 401
