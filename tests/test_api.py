from .conftest import auth


def test_login_by_role_returns_token_for_demo_user(client):
    resp = client.post("/api/v1/session/login", json={"role": "PARTNER"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["id"] == "u2"
    assert body["token_type"] == "bearer"
    me = client.get("/api/v1/session/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["name"] == "Sophie Martin"


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/v1/session/me").status_code == 401
    assert client.get("/api/v1/bookings/me", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.get("/api/v1/session/me", headers=auth("u404")).status_code == 401


def test_create_booking(client, client_headers):
    resp = client.post(
        "/api/v1/bookings/",
        json={"experience_id": "e1", "date": "2024-04-01", "adults": 2, "children": 1},
        headers=client_headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "PENDING"
    assert body["total_price"] == 1125
    assert body["guests"] == 3


def test_booking_payload_is_validated(client, client_headers):
    resp = client.post(
        "/api/v1/bookings/",
        json={"experience_id": "e1", "date": "2024-04-01", "adults": 0},
        headers=client_headers,
    )
    assert resp.status_code == 422
    resp = client.post(
        "/api/v1/bookings/",
        json={"experience_id": "e3", "date": "2024-04-01", "adults": 7},
        headers=client_headers,
    )
    assert resp.status_code == 400


def test_only_clients_book(client, partner_headers):
    resp = client.post(
        "/api/v1/bookings/", json={"experience_id": "e1", "date": "2024-04-01"}, headers=partner_headers
    )
    assert resp.status_code == 403


def test_booking_lifecycle_over_http(client, client_headers, partner_headers, admin_headers):
    assert client.post("/api/v1/bookings/b2/cancel", headers=client_headers).status_code == 409
    assert client.post("/api/v1/bookings/b3/cancel", headers=client_headers).json()["status"] == "CANCELLED"

    assert client.post("/api/v1/bookings/b4/accept", headers=auth("u4")).status_code == 403
    assert client.post("/api/v1/bookings/b4/accept", headers=partner_headers).json()["status"] == "CONFIRMED"
    assert client.post("/api/v1/bookings/b4/complete", headers=partner_headers).json()["status"] == "COMPLETED"

    resp = client.put("/api/v1/bookings/b1/status", json={"status": "CANCELLED"}, headers=admin_headers)
    assert resp.status_code == 409
    resp = client.put("/api/v1/bookings/b5/status", json={"status": "COMPLETED"}, headers=admin_headers)
    assert resp.json()["status"] == "COMPLETED"


def test_booking_views_per_role(client, client_headers, partner_headers, admin_headers):
    mine = client.get("/api/v1/bookings/me", headers=client_headers).json()
    assert len(mine) == 5 and mine[0]["experience"]["id"] == "e1"
    partner_rows = client.get("/api/v1/partners/p1/bookings", headers=partner_headers).json()
    assert {b["id"] for b in partner_rows} == {"b1", "b3", "b4"}
    assert client.get("/api/v1/partners/p2/bookings", headers=partner_headers).status_code == 403
    all_rows = client.get("/api/v1/bookings/", headers=admin_headers).json()
    assert len(all_rows) == 5
    assert client.get("/api/v1/bookings/", headers=client_headers).status_code == 403
    assert client.get("/api/v1/bookings/b2", headers=auth("u5")).status_code == 403


def test_suspension_hides_listings(client, admin_headers):
    assert client.get("/api/v1/experiences/e1").json()["views"] == 1
    resp = client.put("/api/v1/partners/p1/status", json={"status": "SUSPENDED"}, headers=admin_headers)
    assert resp.json()["status"] == "SUSPENDED"
    listed = {e["id"] for e in client.get("/api/v1/experiences/").json()}
    assert "e1" not in listed and "e2" in listed
    assert client.get("/api/v1/experiences/e1").status_code == 404
    assert client.put("/api/v1/partners/p0/status", json={"status": "SUSPENDED"}, headers=admin_headers).status_code == 400


def test_deactivated_experience_detail_is_not_found(client, admin_headers, store):
    resp = client.patch("/api/v1/experiences/e2", json={"is_active": False}, headers=admin_headers)
    assert resp.json()["is_active"] is False
    assert client.get("/api/v1/experiences/e2").status_code == 404
    assert next(e for e in store.experiences if e.id == "e2").views == 0


def test_search_query(client):
    resp = client.get("/api/v1/experiences/", params={"city": "essaouira", "max_price": 400})
    assert [e["id"] for e in resp.json()] == ["e4"]


def test_partner_publishes_experience(client, partner_headers):
    payload = {"title": "Bivouac", "price": 900, "location": "Imlil", "images": ["https://img/b.jpg"]}
    resp = client.post("/api/v1/partners/p1/experiences", json=payload, headers=partner_headers)
    assert resp.status_code == 201
    assert resp.json()["partner_id"] == "p1"
    assert client.post("/api/v1/partners/p2/experiences", json=payload, headers=partner_headers).status_code == 403
    payload["images"] = []
    assert client.post("/api/v1/partners/p1/experiences", json=payload, headers=partner_headers).status_code == 422


def test_partner_application(client):
    resp = client.post(
        "/api/v1/partners/applications",
        json={"name": "Omar", "email": "omar@atlas.ma", "company_name": "Atlas Bikes", "city": "Imlil", "phone": "+212 6"},
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "PENDING"


def test_messaging_over_http(client, client_headers, partner_headers):
    resp = client.post("/api/v1/messages/", json={"receiver_id": "u2", "content": "Bonjour"}, headers=client_headers)
    assert resp.status_code == 201
    assert resp.json()["conversation"]["id"] == "c1"
    assert client.get("/api/v1/messages/unread-count", headers=partner_headers).json() == {"unread": 2}

    thread = client.get("/api/v1/conversations/c1/messages", headers=partner_headers).json()
    assert len(thread) == 2
    assert client.get("/api/v1/messages/unread-count", headers=partner_headers).json() == {"unread": 0}
    assert client.get("/api/v1/session/unread", headers=partner_headers).status_code == 404
    assert client.get("/api/v1/conversations/c1/messages", headers=auth("u4")).status_code == 403


def test_blank_message_is_rejected(client, client_headers):
    resp = client.post("/api/v1/messages/", json={"receiver_id": "u2", "content": "  "}, headers=client_headers)
    assert resp.status_code == 400


def test_mark_read_endpoint(client, partner_headers):
    assert client.post("/api/v1/messages/read", params={"sender_id": "u1"}, headers=partner_headers).json() == {"marked": 1}


def test_welcome_and_support_endpoints(client, client_headers):
    resp = client.post(
        "/api/v1/conversations/welcome",
        json={"experience_id": "e4"},
        headers=client_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["partner_id"] == "p3"
    assert "Cours de Surf initiation à Essaouira" in resp.json()["last_message"]
    support = client.post("/api/v1/conversations/support", headers=client_headers).json()
    assert support["id"] == "c_support_u1"
    listed = client.get("/api/v1/conversations/", headers=client_headers).json()
    assert listed[0]["id"] == "c_support_u1"
    assert listed[0]["unread"] == 1


def test_welcome_is_written_from_the_experience(client, client_headers, store):
    resp = client.post("/api/v1/conversations/welcome", json={"experience_id": "e2"}, headers=client_headers)
    assert resp.status_code == 201
    assert resp.json()["partner_id"] == "p2"
    welcome = store.messages[-1]
    assert welcome.sender_id == "u4" and welcome.receiver_id == "u1"
    assert "Dîner spectacle sous les étoiles à Agafay" in welcome.content

    assert client.post("/api/v1/conversations/welcome", json={"experience_id": "e99"}, headers=client_headers).status_code == 404
    free_text = {"partner_id": "p2", "experience_title": "Votre compte est bloqué"}
    assert client.post("/api/v1/conversations/welcome", json=free_text, headers=client_headers).status_code == 422
    assert not any("Votre compte est bloqué" in m.content for m in store.messages)


def test_admin_reading_client_thread_keeps_support_unread(client, partner_headers, admin_headers, store):
    resp = client.post("/api/v1/messages/", json={"receiver_id": "u3", "content": "Besoin d'aide"}, headers=partner_headers)
    assert resp.json()["conversation"]["id"] == "c2"
    assert client.post("/api/v1/conversations/c1/read", headers=admin_headers).json() == {"marked": 0}
    assert client.get("/api/v1/conversations/c1/messages", headers=admin_headers).status_code == 200
    assert client.get("/api/v1/messages/unread-count", headers=admin_headers).json() == {"unread": 1}
    assert not store.messages[-1].read

    assert client.post("/api/v1/conversations/c1/read", headers=partner_headers).json() == {"marked": 1}
    assert client.post("/api/v1/conversations/c2/read", headers=admin_headers).json() == {"marked": 1}


def test_close_conversation(client, client_headers):
    assert client.delete("/api/v1/conversations/c1", headers=client_headers).status_code == 204
    assert client.get("/api/v1/conversations/c1/messages", headers=client_headers).status_code == 404


def test_templates_are_admin_only(client, admin_headers, client_headers):
    assert client.get("/api/v1/templates/", headers=client_headers).status_code == 403
    keys = {t["key"] for t in client.get("/api/v1/templates/", headers=admin_headers).json()}
    assert keys == {"experience_welcome", "support_welcome_partner", "support_welcome_client"}
    resp = client.put(
        "/api/v1/templates/experience_welcome", json={"content": "Hello {experience_title}"}, headers=admin_headers
    )
    assert resp.json()["content"] == "Hello {experience_title}"
    resp = client.put("/api/v1/templates/experience_welcome", json={"content": "Hello"}, headers=admin_headers)
    assert resp.status_code == 400


def test_reviews_over_http(client, client_headers):
    resp = client.post(
        "/api/v1/reviews", json={"experience_id": "e1", "rating": 4, "booking_id": "b1"}, headers=client_headers
    )
    assert resp.status_code == 201
    assert client.get("/api/v1/experiences/e1").json()["rating"] == 4.0
    assert len(client.get("/api/v1/experiences/e1/reviews").json()) == 1
    resp = client.post(
        "/api/v1/reviews", json={"experience_id": "e1", "rating": 4, "booking_id": "b1"}, headers=client_headers
    )
    assert resp.status_code == 409


def test_statistics(client, admin_headers, partner_headers):
    overview = client.get("/api/v1/statistics/overview", headers=admin_headers).json()
    assert overview["total_partners"] == 4
    assert client.get("/api/v1/statistics/overview", headers=partner_headers).status_code == 403
    metrics = client.get("/api/v1/statistics/partners/p1", headers=partner_headers).json()
    assert metrics["total_bookings"] == 3
