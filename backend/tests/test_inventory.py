"""Inventory tests: restock stamping, low-stock alerts and stock status."""

import pytest

from laundry.models.inventory import InventoryAlert, InventoryItem
from laundry.schemas.inventory import InventoryItemUpdate, StockStatus
from laundry.services.inventory_service import InventoryService, crossed_below_threshold, stock_status


@pytest.fixture
def detergent(db_session) -> InventoryItem:
    item = InventoryItem(
        name="Liquid Detergent",
        category="detergent",
        unit="liters",
        quantity=100,
        minimum_level=50,
        unit_cost=2.4,
    )
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


class TestStockRules:
    @pytest.mark.parametrize(
        "quantity, minimum, expected",
        [
            (100, 50, StockStatus.OK),
            (50, 50, StockStatus.LOW),
            (26, 50, StockStatus.LOW),
            (25, 50, StockStatus.CRITICAL),
            (0, 50, StockStatus.CRITICAL),
        ],
    )
    def test_stock_status(self, quantity, minimum, expected):
        assert stock_status(quantity, minimum) == expected

    def test_threshold_crossing(self):
        assert crossed_below_threshold(60, 50, 40, 50)
        assert crossed_below_threshold(60, 50, 50, 50)
        assert not crossed_below_threshold(40, 50, 30, 50)
        assert not crossed_below_threshold(60, 50, 55, 50)
        # Raising the minimum above the current stock is a crossing too
        assert crossed_below_threshold(60, 50, 60, 70)


class TestRestockStamping:
    def test_quantity_change_stamps_last_restocked(self, db_session, detergent):
        assert detergent.last_restocked is None
        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(quantity=140))
        assert detergent.last_restocked is not None

    def test_decrease_also_stamps(self, db_session, detergent):
        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(quantity=90))
        assert detergent.last_restocked is not None

    def test_same_quantity_does_not_stamp(self, db_session, detergent):
        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(quantity=100, notes="checked"))
        assert detergent.last_restocked is None

    def test_other_fields_do_not_stamp(self, db_session, detergent):
        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(supplier="CleanCo"))
        assert detergent.last_restocked is None


class TestLowStockAlerts:
    def _alerts(self, db_session):
        return db_session.query(InventoryAlert).order_by(InventoryAlert.id).all()

    def test_crossing_below_threshold_emits_one_alert(self, db_session, detergent):
        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(quantity=40))
        alerts = self._alerts(db_session)
        assert len(alerts) == 1
        assert alerts[0].alert_type == "low_stock"
        assert alerts[0].inventory_item_id == detergent.id
        assert alerts[0].acknowledged is False
        assert "Liquid Detergent" in alerts[0].message

    def test_staying_below_threshold_does_not_reemit(self, db_session, detergent):
        service = InventoryService(db_session)
        service.update(detergent.id, InventoryItemUpdate(quantity=40))
        service.update(detergent.id, InventoryItemUpdate(quantity=30))
        service.update(detergent.id, InventoryItemUpdate(quantity=10))
        assert len(self._alerts(db_session)) == 1

    def test_recovering_and_crossing_again_emits_again(self, db_session, detergent):
        service = InventoryService(db_session)
        service.update(detergent.id, InventoryItemUpdate(quantity=40))
        service.update(detergent.id, InventoryItemUpdate(quantity=120))
        service.update(detergent.id, InventoryItemUpdate(quantity=45))
        assert len(self._alerts(db_session)) == 2

    def test_creation_below_threshold_emits_nothing(self, client, staff_headers, db_session):
        resp = client.post(
            "/api/inventory/",
            json={"name": "Softener", "category": "softener", "unit": "liters", "quantity": 5, "minimum_level": 20},
            headers=staff_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["stock_status"] == "critical"
        assert self._alerts(db_session) == []

    def test_interleaved_sessions_emit_one_alert(self, db_session, other_session, detergent):
        # other_session holds a copy loaded before the first writer commits
        stale = other_session.get(InventoryItem, detergent.id)
        assert stale.quantity == 100

        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(quantity=40))
        updated = InventoryService(other_session).update(detergent.id, InventoryItemUpdate(quantity=30))

        assert updated.quantity == 30
        assert len(self._alerts(db_session)) == 1
        db_session.refresh(detergent)
        assert detergent.quantity == 30

    def test_deleting_item_removes_its_alerts(self, db_session, detergent):
        InventoryService(db_session).update(detergent.id, InventoryItemUpdate(quantity=40))
        InventoryService(db_session).delete(detergent.id)
        assert self._alerts(db_session) == []


class TestInventoryApi:
    def test_crud_cycle(self, client, staff_headers, admin_headers):
        created = client.post(
            "/api/inventory/",
            json={
                "name": "Laundry Bags",
                "category": "bags",
                "unit": "boxes",
                "quantity": 30,
                "minimum_level": 10,
                "unit_cost": 12.5,
                "location": "Store A",
            },
            headers=staff_headers,
        )
        assert created.status_code == 201
        item = created.json()
        assert item["stock_status"] == "ok"
        assert item["last_restocked"] is None

        updated = client.patch(f"/api/inventory/{item['id']}", json={"quantity": 8}, headers=staff_headers)
        assert updated.status_code == 200
        assert updated.json()["stock_status"] == "low"
        assert updated.json()["last_restocked"] is not None

        listed = client.get("/api/inventory/", params={"category": "bags"}, headers=staff_headers).json()
        assert listed["total"] == 1

        assert client.delete(f"/api/inventory/{item['id']}", headers=staff_headers).status_code == 403
        assert client.delete(f"/api/inventory/{item['id']}", headers=admin_headers).json() == {
            "success": True,
            "message": None,
        }
        assert client.get(f"/api/inventory/{item['id']}", headers=staff_headers).status_code == 404

    def test_last_restocked_is_not_client_writable(self, client, staff_headers, detergent):
        resp = client.patch(
            f"/api/inventory/{detergent.id}",
            json={"last_restocked": "2020-01-01T00:00:00Z", "notes": "audit"},
            headers=staff_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["last_restocked"] is None

    def test_negative_quantity_rejected(self, client, staff_headers, detergent):
        resp = client.patch(f"/api/inventory/{detergent.id}", json={"quantity": -1}, headers=staff_headers)
        assert resp.status_code == 400

    def test_low_stock_alerts_and_acknowledge(self, client, staff_headers, detergent):
        client.patch(f"/api/inventory/{detergent.id}", json={"quantity": 20}, headers=staff_headers)

        low = client.get("/api/inventory/low-stock", headers=staff_headers).json()
        assert [i["id"] for i in low] == [detergent.id]
        assert low[0]["stock_status"] == "critical"

        alerts = client.get("/api/inventory/alerts", params={"acknowledged": False}, headers=staff_headers).json()
        assert alerts["total"] == 1
        alert_id = alerts["items"][0]["id"]

        ack = client.post(f"/api/inventory/alerts/{alert_id}/acknowledge", headers=staff_headers)
        assert ack.status_code == 200
        assert ack.json()["acknowledged"] is True

        pending = client.get("/api/inventory/alerts", params={"acknowledged": False}, headers=staff_headers).json()
        assert pending["total"] == 0

    def test_acknowledge_missing_alert_is_404(self, client, staff_headers):
        assert client.post("/api/inventory/alerts/999/acknowledge", headers=staff_headers).status_code == 404
