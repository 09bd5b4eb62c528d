"""Tests for attendee registration and the organizer registrations view."""
from tests.conftest import auth, create_test_event, create_test_user, set_status


def _active_event(client, organizer, capacity="3"):
    return set_status(client, organizer, create_test_event(client, organizer, capacity=capacity), "active")


class TestRegister:

    def test_register(self, client):
        organizer = create_test_user(client, name="Organizer")
        attendee = create_test_user(client, name="Ann")
        event = _active_event(client, organizer)

        resp = client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(attendee))
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "registered"
        assert data["user_id"] == attendee["user_id"]
        assert data["user"]["name"] == "Ann"

    def test_register_draft_event_rejected(self, client):
        organizer = create_test_user(client, name="Organizer")
        attendee = create_test_user(client, name="Ann")
        event = create_test_event(client, organizer)

        resp = client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(attendee))
        assert resp.status_code == 409

    def test_register_twice_rejected(self, client):
        organizer = create_test_user(client, name="Organizer")
        attendee = create_test_user(client, name="Ann")
        event = _active_event(client, organizer)

        client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(attendee))
        resp = client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(attendee))
        assert resp.status_code == 409

    def test_register_full_event_rejected(self, client):
        organizer = create_test_user(client, name="Organizer")
        event = _active_event(client, organizer, capacity="1")
        first = create_test_user(client, name="Ann")
        second = create_test_user(client, name="Ben")

        assert client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(first)).status_code == 201
        resp = client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(second))
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Event is at full capacity"

    def test_register_missing_event(self, client):
        attendee = create_test_user(client, name="Ann")
        resp = client.post("/api/events/does-not-exist/registrations", headers=auth(attendee))
        assert resp.status_code == 404


class TestCancelRegistration:

    def test_cancel_frees_seat(self, client):
        organizer = create_test_user(client, name="Organizer")
        event = _active_event(client, organizer, capacity="1")
        first = create_test_user(client, name="Ann")
        second = create_test_user(client, name="Ben")

        client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(first))
        resp = client.delete(f"/api/events/{event['event_id']}/registrations/me", headers=auth(first))
        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"
        assert resp.json()["cancelled_at"] is not None

        resp = client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(second))
        assert resp.status_code == 201

    def test_cancel_without_registration(self, client):
        organizer = create_test_user(client, name="Organizer")
        attendee = create_test_user(client, name="Ann")
        event = _active_event(client, organizer)
        resp = client.delete(f"/api/events/{event['event_id']}/registrations/me", headers=auth(attendee))
        assert resp.status_code == 404


class TestOrganizerRegistrationsView:

    def test_show_registrations(self, client):
        organizer = create_test_user(client, name="Organizer")
        event = _active_event(client, organizer)
        ann = create_test_user(client, name="Ann")
        ben = create_test_user(client, name="Ben")
        client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(ann))
        client.post(f"/api/events/{event['event_id']}/registrations", headers=auth(ben))
        client.delete(f"/api/events/{event['event_id']}/registrations/me", headers=auth(ben))

        resp = client.get(f"/api/events/{event['event_id']}/registrations", headers=auth(organizer))
        assert resp.status_code == 200
        data = resp.json()
        assert data["event_id"] == event["event_id"]
        assert [r["user"]["email"] for r in data["registrations"]] == ["ann@example.com"]
        assert data["registration_summary"] == "1 / 3"
