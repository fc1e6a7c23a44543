from datetime import datetime, timezone

from services.events.models import ParticipantStatus
from services.events.tests.events_test_base import BaseEventsTest

URL = "/api/v1/events/invitations"


class TestInvitations(BaseEventsTest):
    def test_lists_pending_invitations_newest_event_first(self):
        earlier = self.create_event(
            "alice", datetime(2025, 6, 1, tzinfo=timezone.utc), title="Earlier"
        )
        later = self.create_event(
            "carol", datetime(2025, 7, 1, tzinfo=timezone.utc), title="Later"
        )
        accepted = self.create_event("alice", datetime(2025, 8, 1, tzinfo=timezone.utc))
        self.add_participants(earlier.id, ["bob"])
        self.add_participants(later.id, ["bob"])
        self.add_participants(accepted.id, ["bob"], status=ParticipantStatus.accepted)

        resp = self.client.get(URL, headers=self.headers("bob"))

        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert [i["eventId"] for i in data] == [later.id, earlier.id]
        first = data[0]
        assert first["type"] == "event"
        assert first["status"] == "pending"
        assert first["event"]["title"] == "Later"
        assert first["event"]["createdById"] == "carol"

    def test_list_requires_user(self):
        resp = self.client.get(URL, headers=self.headers(user_id=None))

        assert resp.status_code == 401

    def test_count(self):
        event = self.create_event("alice", datetime(2025, 6, 1, tzinfo=timezone.utc))
        other = self.create_event("alice", datetime(2025, 6, 2, tzinfo=timezone.utc))
        self.add_participants(event.id, ["bob"])
        self.add_participants(other.id, ["bob"], status=ParticipantStatus.accepted)

        resp = self.client.get(f"{URL}/count", headers=self.headers("bob"))

        assert resp.status_code == 200
        assert resp.json() == {"count": 1}

    def test_count_is_zero_for_anonymous_callers(self):
        resp = self.client.get(f"{URL}/count", headers=self.headers(user_id=None))

        assert resp.status_code == 200
        assert resp.json() == {"count": 0}

    def test_invitations_path_is_not_an_event_id(self):
        resp = self.client.get(URL, headers=self.headers("nobody"))

        assert resp.status_code == 200
        assert resp.json() == []
