"""Integration tests for categories, clients and transactions APIs."""


def test_category_crud(client):
    response = client.post(
        "/api/v1/categories/",
        json={"name": "Atelier BD", "point_cost": 30, "unit_price": 10000, "icon": "book", "color": "orange"},
    )
    assert response.status_code == 201
    category = response.json()
    assert category["is_active"] is True

    duplicate = client.post("/api/v1/categories/", json={"name": "Atelier BD"})
    assert duplicate.status_code == 400

    updated = client.put(f"/api/v1/categories/{category['id']}", json={"point_cost": 35, "is_active": False})
    assert updated.json()["point_cost"] == 35

    assert client.get("/api/v1/categories/").json() == []
    assert len(client.get("/api/v1/categories/", params={"include_inactive": True}).json()) == 1
    assert client.put("/api/v1/categories/999", json={"point_cost": 1}).status_code == 404


def test_negative_point_cost_cannot_make_points_checkout_free(client, categories, loyal_client):
    studio = categories["Réservation Studio"]

    response = client.put(f"/api/v1/categories/{studio.id}", json={"point_cost": -50})
    assert response.status_code == 422
    stored = {c["name"]: c for c in client.get("/api/v1/categories/").json()}
    assert stored["Réservation Studio"]["point_cost"] == 50

    checkout = client.post("/api/v1/activities/checkout", json={
        "client_name": loyal_client.name,
        "client_id": loyal_client.id,
        "payment_type": "Points",
        "items": [
            {"description": "Session studio", "category": "Réservation Studio", "unit_price": 15000},
            {"description": "Partie", "category": "Session de jeu", "unit_price": 2000},
        ],
    })
    assert checkout.status_code == 201
    assert checkout.json()["points_debited"] == 60


def test_category_import(client, categories):
    contents = "nom,cout_points,prix_unitaire\nSession de jeu,12,2500\nAtelier BD,30,10000\n"
    response = client.post(
        "/api/v1/categories/import",
        files={"file": ("categories.csv", contents.encode("utf-8"), "text/csv")},
    )

    assert response.status_code == 200
    assert response.json()["created"] == 1
    assert response.json()["updated"] == 1


def test_category_import_bad_extension(client):
    response = client.post(
        "/api/v1/categories/import",
        files={"file": ("categories.pdf", b"%PDF", "application/pdf")},
    )
    assert response.status_code == 400


def test_client_crud_and_points(client):
    created = client.post("/api/v1/clients/", json={"name": "Awa Diallo", "phone": "620000001"}).json()
    assert created["loyalty_points"] == 0

    assert client.post("/api/v1/clients/", json={"name": "X", "loyalty_points": -5}).status_code == 422

    credited = client.post(f"/api/v1/clients/{created['id']}/points", json={"points": 50, "reason": "Parrainage"})
    assert credited.status_code == 200
    assert credited.json()["loyalty_points"] == 50

    overdraft = client.post(f"/api/v1/clients/{created['id']}/points", json={"points": -80})
    assert overdraft.status_code == 400
    assert overdraft.json()["error_type"] == "InsufficientPoints"

    renamed = client.put(f"/api/v1/clients/{created['id']}", json={"name": "Awa D."})
    assert renamed.json()["name"] == "Awa D."
    assert renamed.json()["loyalty_points"] == 50

    assert [c["name"] for c in client.get("/api/v1/clients/", params={"search": "awa"}).json()] == ["Awa D."]


def test_unknown_client(client):
    assert client.get("/api/v1/clients/999").status_code == 404
    response = client.put("/api/v1/clients/999", json={"name": "Fantôme"})
    assert response.status_code == 404
    assert response.json()["error_type"] == "ClientNotFound"


def test_client_summary(client):
    payload = {
        "client_name": "Moussa",
        "phone": "620000009",
        "items": [{"description": "Session", "category": "Réservation Studio", "quantity": 2, "unit_price": 30000}],
    }
    client.post("/api/v1/activities/checkout", json=payload)

    summaries = client.get("/api/v1/clients/summary").json()

    assert len(summaries) == 1
    assert summaries[0]["total_spent"] == 60000
    assert summaries[0]["loyalty_tier"] == "Argent"


def test_transactions_summary(client, loyal_client, categories):
    client.post("/api/v1/activities/checkout", json={
        "client_name": "Jean",
        "items": [{"description": "Session", "category": "Réservation Studio", "unit_price": 50000}],
    })
    client.post("/api/v1/activities/checkout", json={
        "client_name": loyal_client.name,
        "client_id": loyal_client.id,
        "payment_type": "Points",
        "items": [{"description": "Partie", "category": "Session de jeu", "unit_price": 2000}],
    })

    summary = client.get("/api/v1/transactions/summary").json()
    assert summary["total_revenue"] == 50000
    assert summary["total_expenses"] == -2000
    assert summary["net_profit"] == 48000
    assert summary["currency"] == "FCFA"

    expenses = client.get("/api/v1/transactions/", params={"type": "Dépense"}).json()
    assert [t["amount"] for t in expenses] == [-2000]
