"""Tests for the public and admin business hours routes."""

from datetime import date, timedelta

import pytest

from storehours import models

# two halves covering the whole day, so the status does not depend on the clock
ALWAYS_OPEN = [{"open": "00:00", "close": "12:00"}, {"open": "12:00", "close": "00:00"}]


@pytest.fixture
def establishment(db):
    establishment = models.Establishment(
        name="Lanchonete da Praça",
        slug="lanchonete",
        timezone="America/Sao_Paulo",
        allow_orders_when_closed=False,
        show_schedule_on_menu=True,
    )
    db.add(establishment)
    db.commit()
    return establishment


def _set_week(client, estab_id, intervals, enabled=True):
    days = [{"day_of_week": d, "enabled": enabled, "intervals": intervals} for d in range(7)]
    return client.put(f"/api/v1/admin/business-hours/{estab_id}/weekly", json={"days": days})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestPublicStatus:

    def test_unknown_establishment(self, client):
        assert client.get("/api/v1/establishments/nope/hours/status").status_code == 404

    def test_without_schedule_is_closed(self, client, establishment):
        body = client.get("/api/v1/establishments/lanchonete/hours/status").json()
        assert body["has_schedule"] is False
        assert body["status"] == {"isOpen": False, "nextOpenAt": None, "nextCloseAt": None, "reason": "weekly"}
        assert body["accepting_orders"] == "rejected"

    def test_closed_queues_orders_when_allowed(self, client, establishment):
        client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/settings",
            json={"allow_orders_when_closed": True},
        )
        body = client.get("/api/v1/establishments/lanchonete/hours/status").json()
        assert body["accepting_orders"] == "queued"

    def test_open_all_day(self, client, establishment):
        assert _set_week(client, establishment.id, ALWAYS_OPEN).status_code == 200

        body = client.get("/api/v1/establishments/lanchonete/hours/status").json()
        assert body["has_schedule"] is True
        assert body["status"]["isOpen"] is True
        assert body["status"]["nextCloseAt"] is not None
        assert body["status"]["nextCloseAt"].endswith("-03:00")
        assert body["accepting_orders"] == "accepted"
        assert body["next_close_display"] is not None
        assert body["current_time"] is not None

    def test_weekly_schedule_view(self, client, establishment):
        _set_week(client, establishment.id, [{"open": "11:00", "close": "23:00"}])
        body = client.get("/api/v1/establishments/lanchonete/hours").json()
        assert len(body["weekly_hours"]) == 7
        assert body["weekly_hours"][0] == {
            "day_of_week": 0,
            "day_name": "Segunda-feira",
            "enabled": True,
            "intervals": [{"open": "11:00", "close": "23:00"}],
        }

    def test_weekly_schedule_hidden(self, client, establishment):
        client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/settings",
            json={"show_schedule_on_menu": False},
        )
        assert client.get("/api/v1/establishments/lanchonete/hours").status_code == 404


class TestAdminSettings:

    def test_update_timezone(self, client, establishment):
        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/settings",
            json={"timezone": "America/Manaus"},
        )
        assert response.status_code == 200
        assert response.json()["timezone"] == "America/Manaus"
        assert response.json()["show_schedule_on_menu"] is True

    def test_rejects_unknown_timezone(self, client, establishment):
        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/settings",
            json={"timezone": "Mars/Olympus_Mons"},
        )
        assert response.status_code == 422

    def test_unknown_establishment(self, client):
        assert client.get("/api/v1/admin/business-hours/999").status_code == 404


class TestAdminWeekly:

    def test_upsert_weekly_hours(self, client, establishment):
        _set_week(client, establishment.id, [{"open": "11:00", "close": "23:00"}])
        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/weekly",
            json={"days": [{"day_of_week": 6, "enabled": False, "intervals": []}]},
        )
        assert response.status_code == 200
        rows = {row["day_of_week"]: row for row in response.json()}
        assert len(rows) == 7
        assert rows[6]["enabled"] is False
        assert rows[6]["intervals"] == []
        assert rows[0]["intervals"] == [{"open": "11:00", "close": "23:00"}]

    def test_overnight_interval_is_accepted(self, client, establishment):
        response = _set_week(client, establishment.id, [{"open": "18:00", "close": "02:00"}])
        assert response.status_code == 200

    @pytest.mark.parametrize("interval", [
        {"open": "25:00", "close": "23:00"},
        {"open": "11h", "close": "23:00"},
        {"open": "10:00", "close": "10:00"},
    ])
    def test_rejects_bad_intervals(self, client, establishment, interval):
        assert _set_week(client, establishment.id, [interval]).status_code == 422

    def test_rejects_duplicate_days(self, client, establishment):
        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/weekly",
            json={"days": [{"day_of_week": 1, "enabled": True}, {"day_of_week": 1, "enabled": False}]},
        )
        assert response.status_code == 422

    def test_rejects_weekday_out_of_range(self, client, establishment):
        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/weekly",
            json={"days": [{"day_of_week": 7, "enabled": True}]},
        )
        assert response.status_code == 422


class TestAdminOverrides:

    def _create(self, client, estab_id, **payload):
        return client.post(f"/api/v1/admin/business-hours/{estab_id}/overrides", json=payload)

    def test_create_update_delete(self, client, establishment):
        day = (date.today() + timedelta(days=3)).isoformat()
        created = self._create(client, establishment.id, date=day, is_closed=True, note="Feriado")
        assert created.status_code == 200
        override_id = created.json()["id"]
        assert created.json()["intervals"] is None

        updated = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/overrides/{override_id}",
            json={"is_closed": False, "intervals": [{"open": "12:00", "close": "16:00"}]},
        )
        assert updated.status_code == 200
        assert updated.json()["intervals"] == [{"open": "12:00", "close": "16:00"}]
        assert updated.json()["note"] == "Feriado"

        listing = client.get(f"/api/v1/admin/business-hours/{establishment.id}").json()
        assert [o["id"] for o in listing["overrides"]] == [override_id]

        deleted = client.delete(f"/api/v1/admin/business-hours/{establishment.id}/overrides/{override_id}")
        assert deleted.status_code == 200
        listing = client.get(f"/api/v1/admin/business-hours/{establishment.id}").json()
        assert listing["overrides"] == []

    def test_duplicate_date_conflicts(self, client, establishment):
        day = (date.today() + timedelta(days=1)).isoformat()
        assert self._create(client, establishment.id, date=day, is_closed=True).status_code == 200
        assert self._create(client, establishment.id, date=day, is_closed=True).status_code == 409

    def test_closed_today_shows_in_status(self, client, establishment):
        _set_week(client, establishment.id, ALWAYS_OPEN)
        # cover both the local and the UTC date so the check is timezone-proof
        for offset in (-1, 0, 1):
            self._create(client, establishment.id, date=(date.today() + timedelta(days=offset)).isoformat(), is_closed=True)

        body = client.get("/api/v1/establishments/lanchonete/hours/status").json()
        assert body["status"]["isOpen"] is False
        assert body["status"]["reason"] == "override"

    def test_override_of_other_establishment_is_not_found(self, client, establishment, db):
        other = models.Establishment(name="Outro", slug="outro", timezone="America/Sao_Paulo")
        db.add(other)
        db.commit()
        day = (date.today() + timedelta(days=2)).isoformat()
        override_id = self._create(client, other.id, date=day, is_closed=True).json()["id"]

        response = client.delete(f"/api/v1/admin/business-hours/{establishment.id}/overrides/{override_id}")
        assert response.status_code == 404

    def test_update_rejects_null_is_closed(self, client, establishment, db):
        day = (date.today() + timedelta(days=4)).isoformat()
        override_id = self._create(client, establishment.id, date=day, is_closed=True).json()["id"]

        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/overrides/{override_id}",
            json={"is_closed": None},
        )
        assert response.status_code == 422
        assert db.get(models.EstablishmentHoursOverride, override_id).is_closed is True

    def test_update_without_is_closed_keeps_it(self, client, establishment):
        day = (date.today() + timedelta(days=5)).isoformat()
        override_id = self._create(client, establishment.id, date=day, is_closed=True).json()["id"]

        response = client.put(
            f"/api/v1/admin/business-hours/{establishment.id}/overrides/{override_id}",
            json={"note": "Inventário"},
        )
        assert response.status_code == 200
        assert response.json()["is_closed"] is True
        assert response.json()["note"] == "Inventário"


class TestAdminApiKey:

    @pytest.fixture
    def api_key(self, monkeypatch):
        from storehours.core.config import settings
        monkeypatch.setattr(settings, "ADMIN_API_KEY", "s3cret")
        return "s3cret"

    def test_missing_key_is_rejected(self, client, establishment, api_key):
        response = client.get(f"/api/v1/admin/business-hours/{establishment.id}")
        assert response.status_code == 401

    def test_wrong_key_is_rejected(self, client, establishment, api_key):
        response = client.delete(
            f"/api/v1/admin/business-hours/{establishment.id}/overrides/1",
            headers={"X-API-Key": "guess"},
        )
        assert response.status_code == 401

    def test_valid_key_is_accepted(self, client, establishment, api_key):
        response = client.get(
            f"/api/v1/admin/business-hours/{establishment.id}",
            headers={"X-API-Key": api_key},
        )
        assert response.status_code == 200

    def test_public_routes_need_no_key(self, client, establishment, api_key):
        assert client.get("/api/v1/establishments/lanchonete/hours/status").status_code == 200
