"""End-to-end checks through the HTTP routes."""

from datetime import timedelta

from conftest import BOOKING_DATE, auth_headers, make_technician, make_user


def register(client, email="jamie@example.com", name="Jamie", password="password123"):
    return client.post("/api/auth/register", json={"email": email, "name": name, "password": password})


def login(client, email="jamie@example.com", password="password123"):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def booking_payload(**overrides):
    payload = {
        "name": "Jamie",
        "email": "jamie@example.com",
        "service": "Design Tier 1",
        "technician_id": "tech-ana",
        "date": BOOKING_DATE.isoformat(),
        "time": "9:00 AM",
    }
    payload.update(overrides)
    return payload


def publish(client, admin_user, slots, technician_id="tech-ana", day=BOOKING_DATE):
    resp = client.post(
        "/availability",
        params={"technician_id": technician_id},
        json={"dates": [day.isoformat()], "slots": slots},
        headers=auth_headers(admin_user),
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200


class TestAccounts:

    def test_new_accounts_start_on_the_waitlist(self, client):
        resp = register(client)
        assert resp.status_code == 201
        body = resp.json()
        assert body["role"] == "customer"
        assert body["is_approved"] is False
        assert body["has_signed_terms"] is False

    def test_duplicate_email(self, client):
        register(client)
        assert register(client, email="JAMIE@example.com").status_code == 400

    def test_configured_admin_skips_waitlist(self, client):
        body = register(client, email="owner@example.com", name="Olivia").json()
        assert body["role"] == "admin"
        assert body["is_approved"] is True

    def test_login_rejects_wrong_password(self, client):
        register(client)
        resp = client.post("/api/auth/login", json={"email": "jamie@example.com", "password": "nope-nope"})
        assert resp.status_code == 401

    def test_profile_requires_token(self, client):
        assert client.get("/users/me").status_code == 401
        assert client.get("/users/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    def test_sign_terms(self, client):
        register(client)
        headers = login(client)
        resp = client.post("/users/me/terms", json={"signature_name": " Jamie Doe "}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["has_signed_terms"] is True
        assert resp.json()["terms_signed_at"] is not None


class TestBookingFlow:

    def test_waitlist_then_terms_then_booking(self, client, admin_user, technician):
        publish(client, admin_user, ["9:00 AM", "10:00 AM"])
        user_id = register(client).json()["id"]
        headers = login(client)

        resp = client.post("/appointments", json=booking_payload(), headers=headers)
        assert resp.status_code == 403
        assert resp.json()["remediation"] == "waitlist"

        resp = client.put(f"/admin/users/{user_id}/approve", headers=auth_headers(admin_user))
        assert resp.json()["is_approved"] is True

        resp = client.post("/appointments", json=booking_payload(), headers=headers)
        assert resp.status_code == 403
        assert resp.json()["remediation"] == "terms"

        client.post("/users/me/terms", json={"signature_name": "Jamie"}, headers=headers)
        resp = client.post("/appointments", json=booking_payload(), headers=headers)
        assert resp.status_code == 201
        assert resp.json()["status"] == "pending"
        appointment_id = resp.json()["id"]

        mine = client.get("/users/me/appointments", headers=headers).json()
        assert [a["id"] for a in mine] == [appointment_id]
        assert mine[0]["time"] == "9:00 AM"
        assert mine[0]["price"] == 70

    def test_second_booking_of_same_slot_conflicts(self, client, db, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        first = client.post("/appointments", json=booking_payload(), headers=auth_headers(customer))
        assert first.status_code == 201

        other = make_user(db, email="dana@example.com", name="Dana")
        resp = client.post("/appointments", json=booking_payload(time="09:00"), headers=auth_headers(other))
        assert resp.status_code == 409
        assert resp.json()["error"] == "slot_already_booked"

    def test_unpublished_time(self, client, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        resp = client.post("/appointments", json=booking_payload(time="3:00 PM"), headers=auth_headers(customer))
        assert resp.status_code == 400
        assert resp.json()["error"] == "slot_not_available"

    def test_invalid_time_names_the_field(self, client, customer, technician):
        resp = client.post("/appointments", json=booking_payload(time="25:99"), headers=auth_headers(customer))
        assert resp.status_code == 400
        assert resp.json()["field"] == "time"

    def test_status_changes_by_admin(self, client, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        appointment_id = client.post(
            "/appointments", json=booking_payload(), headers=auth_headers(customer)
        ).json()["id"]

        resp = client.put(
            f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=auth_headers(customer)
        )
        assert resp.status_code == 403

        resp = client.put(
            f"/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=auth_headers(admin_user)
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "confirmed"

        resp = client.get("/appointments", params={"status": "confirmed"}, headers=auth_headers(admin_user))
        assert [a["id"] for a in resp.json()] == [appointment_id]

    def test_appointment_is_private(self, client, db, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        appointment_id = client.post(
            "/appointments", json=booking_payload(), headers=auth_headers(customer)
        ).json()["id"]
        stranger = make_user(db, email="stranger@example.com", name="Sam")

        assert client.get(f"/appointments/{appointment_id}", headers=auth_headers(customer)).status_code == 200
        assert client.get(f"/appointments/{appointment_id}", headers=auth_headers(stranger)).status_code == 403


class TestCalendar:

    def test_empty_day(self, client, technician):
        resp = client.get("/availability", params={"date": BOOKING_DATE.isoformat(), "technician_id": "tech-ana"})
        assert resp.status_code == 200
        assert resp.json()["slots"] == []

    def test_unknown_technician(self, client):
        resp = client.get("/availability", params={"date": BOOKING_DATE.isoformat(), "technician_id": "ghost"})
        assert resp.status_code == 404

    def test_customers_cannot_publish(self, client, customer, technician):
        resp = client.post(
            "/availability",
            params={"technician_id": "tech-ana"},
            json={"dates": [BOOKING_DATE.isoformat()], "slots": ["9:00 AM"]},
            headers=auth_headers(customer),
        )
        assert resp.status_code == 403

    def test_technician_manages_only_own_calendar(self, client, db, technician):
        make_technician(db, technician_id="tech-bea", email="bea@example.com", name="Bea")
        ana = make_user(db, email="ana@example.com", name="Ana", role="technician")
        body = {"dates": [BOOKING_DATE.isoformat()], "slots": ["14:00", "9:00 AM"]}

        resp = client.post("/availability", params={"technician_id": "tech-ana"}, json=body, headers=auth_headers(ana))
        assert resp.status_code == 200
        assert resp.json()["days"][BOOKING_DATE.isoformat()] == ["9:00 AM", "2:00 PM"]

        resp = client.post("/availability", params={"technician_id": "tech-bea"}, json=body, headers=auth_headers(ana))
        assert resp.status_code == 403

        # studio calendar is admin only
        resp = client.post("/availability", json=body, headers=auth_headers(ana))
        assert resp.status_code == 403

    def test_add_merges_and_remove_slot(self, client, admin_user, technician):
        publish(client, admin_user, ["9:00 AM"])
        data = publish(client, admin_user, ["11:00", "9:00 AM"])
        assert data["days"][BOOKING_DATE.isoformat()] == ["9:00 AM", "11:00 AM"]

        resp = client.delete(
            f"/availability/{BOOKING_DATE.isoformat()}/slot",
            params={"time": "9:00", "technician_id": "tech-ana"},
            headers=auth_headers(admin_user),
        )
        assert resp.json()["slots"] == ["11:00 AM"]

    def test_replace_range_and_delete(self, client, admin_user, technician):
        headers = auth_headers(admin_user)
        next_day = BOOKING_DATE + timedelta(days=1)
        publish(client, admin_user, ["9:00 AM"], day=next_day)

        resp = client.put(
            f"/availability/{BOOKING_DATE.isoformat()}",
            params={"technician_id": "tech-ana"},
            json={"slots": ["1:00 PM", "10:00 AM"]},
            headers=headers,
        )
        assert resp.json()["slots"] == ["1:00 PM", "10:00 AM"]

        resp = client.get(
            "/availability/range",
            params={
                "start": BOOKING_DATE.isoformat(),
                "end": (BOOKING_DATE + timedelta(days=6)).isoformat(),
                "technician_id": "tech-ana",
            },
        )
        assert set(resp.json()["days"]) == {BOOKING_DATE.isoformat(), next_day.isoformat()}

        resp = client.delete(f"/availability/{BOOKING_DATE.isoformat()}", params={"technician_id": "tech-ana"}, headers=headers)
        assert resp.json()["deleted"] is True
        resp = client.delete(f"/availability/{BOOKING_DATE.isoformat()}", params={"technician_id": "tech-ana"}, headers=headers)
        assert resp.json()["deleted"] is False

    def test_bad_slot_is_rejected(self, client, admin_user, technician):
        resp = client.post(
            "/availability",
            params={"technician_id": "tech-ana"},
            json={"dates": [BOOKING_DATE.isoformat()], "slots": ["noonish"]},
            headers=auth_headers(admin_user),
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_time"


class TestAdmin:

    def test_admin_routes_reject_customers(self, client, customer):
        headers = auth_headers(customer)
        assert client.get("/admin/dashboard", headers=headers).status_code == 403
        assert client.get("/admin/users", headers=headers).status_code == 403
        assert client.get("/appointments", headers=headers).status_code == 403
        assert client.post("/admin/cleanup", headers=headers).status_code == 403

    def test_dashboard(self, client, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        client.post("/appointments", json=booking_payload(), headers=auth_headers(customer))
        register(client, email="waiting@example.com")

        resp = client.get("/admin/dashboard", headers=auth_headers(admin_user))
        assert resp.status_code == 200
        body = resp.json()
        assert body["kpis"]["total_users"] == 3
        assert body["kpis"]["pending_approvals"] == 1
        assert body["kpis"]["total_technicians"] == 1
        assert body["kpis"]["total_appointments"] == 1
        assert body["appointments_by_status"] == {"pending": 1}
        assert len(body["upcoming_appointments"]) == 1
        assert body["reviews"]["total_reviews"] == 0

    def test_duplicate_technician_id(self, client, admin_user, technician):
        payload = {"id": "tech-ana", "name": "Other Ana", "email": "other.ana@example.com", "business_name": "Other Nails"}
        resp = client.post("/technicians", json=payload, headers=auth_headers(admin_user))
        assert resp.status_code == 409
        assert resp.json()["error"] == "already_exists"

        resp = client.post("/technicians", json=dict(payload, id="tech-other"), headers=auth_headers(admin_user))
        assert resp.status_code == 201

    def test_upcoming_sorted_by_time_of_day(self, client, db, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM", "2:00 PM"])
        other = make_user(db, email="dana@example.com", name="Dana")
        client.post("/appointments", json=booking_payload(time="2:00 PM"), headers=auth_headers(customer))
        client.post("/appointments", json=booking_payload(name="Dana", time="9:00 AM"), headers=auth_headers(other))

        body = client.get("/admin/dashboard", headers=auth_headers(admin_user)).json()
        assert [a["time"] for a in body["upcoming_appointments"]] == ["9:00 AM", "2:00 PM"]

    def test_waitlist_listing(self, client, admin_user):
        register(client)
        resp = client.get("/admin/users", params={"approved": "false"}, headers=auth_headers(admin_user))
        assert [u["email"] for u in resp.json()] == ["jamie@example.com"]

    def test_setup_and_cleanup(self, client, db, admin_user):
        headers = auth_headers(admin_user)
        resp = client.post("/admin/setup/default-technician", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["id"] == "studio-default"
        assert client.post("/admin/setup/default-technician", headers=headers).status_code == 200
        assert len(client.get("/technicians/studio-default/services").json()) == 10

        make_technician(db, technician_id="tech-cleo", email="cleo@example.com", name="Cleo")
        register(client, email="cleo@example.com", name="Cleo")
        resp = client.post("/admin/cleanup", headers=headers)
        assert resp.json()["accounts_fixed"] == 1
        assert "Added technician role for: cleo@example.com" in resp.json()["messages"]

        cleo = login(client, email="cleo@example.com")
        me = client.get("/users/me", headers=cleo).json()
        assert me["role"] == "technician"
        assert me["is_approved"] is True


class TestReviewsAndLoyalty:

    def test_review_stats_and_award(self, client, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        appointment_id = client.post(
            "/appointments", json=booking_payload(), headers=auth_headers(customer)
        ).json()["id"]

        resp = client.post(
            "/reviews",
            json={"service": "Design Tier 1", "rating": 5, "appointment_id": appointment_id},
            headers=auth_headers(customer),
        )
        assert resp.status_code == 201
        assert resp.json()["verified"] is True
        stats = client.get("/reviews/technician/tech-ana/stats").json()
        assert stats["total_reviews"] == 1
        assert stats["average_rating"] == 5.0

        resp = client.post("/loyalty/award", json={"appointment_id": appointment_id}, headers=auth_headers(admin_user))
        assert resp.status_code == 400
        assert resp.json()["field"] == "appointment_id"
        client.put(
            f"/appointments/{appointment_id}/status", json={"status": "completed"}, headers=auth_headers(admin_user)
        )

        resp = client.post("/loyalty/award", json={"appointment_id": appointment_id}, headers=auth_headers(admin_user))
        assert resp.json()["points_awarded"] == 750
        resp = client.post("/loyalty/award", json={"appointment_id": appointment_id}, headers=auth_headers(admin_user))
        assert resp.status_code == 400

        mine = client.get("/loyalty/me", headers=auth_headers(customer)).json()
        assert mine["points"] == 750
        assert mine["tier_level"] == "Gold"
        assert mine["tier_discount"] == 15

    def test_cannot_review_someone_elses_appointment(self, client, db, admin_user, customer, technician):
        publish(client, admin_user, ["9:00 AM"])
        appointment_id = client.post(
            "/appointments", json=booking_payload(), headers=auth_headers(customer)
        ).json()["id"]
        stranger = make_user(db, email="stranger@example.com", name="Sam")

        resp = client.post(
            "/reviews",
            json={"service": "Design Tier 1", "rating": 1, "appointment_id": appointment_id},
            headers=auth_headers(stranger),
        )
        assert resp.status_code == 403
        assert client.get("/reviews/technician/tech-ana/stats").json()["total_reviews"] == 0

    def test_review_rating_range(self, client, customer):
        resp = client.post("/reviews", json={"service": "Soak Off", "rating": 9}, headers=auth_headers(customer))
        assert resp.status_code == 422
