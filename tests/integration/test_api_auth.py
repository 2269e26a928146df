"""Integration tests for staff authentication and service endpoints."""


def test_login_and_me(anonymous_client, staff_user):
    response = anonymous_client.post("/api/v1/auth/login", json={"username": "caisse", "password": "caisse123"})

    assert response.status_code == 200
    token = response.json()["access_token"]

    me = anonymous_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "caisse"


def test_login_with_email(anonymous_client, staff_user):
    response = anonymous_client.post(
        "/api/v1/auth/login", json={"username": "caisse@kheops.studio", "password": "caisse123"}
    )
    assert response.status_code == 200


def test_login_wrong_password(anonymous_client, staff_user):
    response = anonymous_client.post("/api/v1/auth/login", json={"username": "caisse", "password": "nope"})
    assert response.status_code == 401


def test_invalid_token_rejected(anonymous_client):
    response = anonymous_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_health(anonymous_client):
    assert anonymous_client.get("/health").json() == {"status": "healthy"}
    assert anonymous_client.get("/").json()["message"] == "KHEOPS Ledger API"


def test_bookings_and_contracts(client):
    booking = client.post("/api/v1/bookings/", json={
        "client_name": "Mamadou", "service": "Réservation Studio", "date": "2026-10-20T14:00:00Z", "amount": 30000,
    })
    assert booking.status_code == 201
    assert booking.json()["status"] == "En attente"

    contract = client.post("/api/v1/contracts/", json={"client_name": "Fatoumata", "title": "Album"})
    assert contract.status_code == 201
    assert contract.json()["payment_status"] == "Non Payé"

    assert client.get(f"/api/v1/bookings/{booking.json()['id']}").status_code == 200
    assert client.get("/api/v1/contracts/999").status_code == 404
