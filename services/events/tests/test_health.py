import os

import pytest
from fastapi.testclient import TestClient

from services.events.tests.events_test_base import BaseEventsTest, _reset_settings


class TestHealth(BaseEventsTest):
    def test_health(self):
        resp = self.client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_root(self):
        resp = self.client.get("/")
        assert resp.status_code == 200
        assert "Events Service" in resp.json()["message"]

    def test_request_id_echoed(self):
        resp = self.client.get("/health", headers={"X-Request-Id": "req-1234"})
        assert resp.headers["X-Request-Id"] == "req-1234"


class TestStartup(BaseEventsTest):
    def _use_timezone(self, tz_name: str) -> None:
        os.environ["EVENTS_DAY_BOUNDARY_TIMEZONE"] = tz_name
        _reset_settings()

    def test_startup_with_named_timezone(self):
        self._use_timezone("Europe/Paris")

        with TestClient(self.app) as client:
            assert client.get("/health").status_code == 200

    def test_startup_rejects_unknown_timezone(self):
        self._use_timezone("Mars/Olympus_Mons")

        with pytest.raises(ValueError, match="Unknown timezone"):
            with TestClient(self.app):
                pass
