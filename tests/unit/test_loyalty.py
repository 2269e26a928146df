"""Unit tests for loyalty points: cost, atomic debit, tiers and client summaries."""

from unittest.mock import patch

import pytest

from app.core.exceptions import ClientNotFound, InsufficientPoints, LedgerValidationError, UnknownCategory
from app.models.activity import PaymentType
from app.models.client import Client
from app.schemas.activity import ActivityItemCreate, ClientInfo
from app.services import loyalty
from app.services.activity_log import create_activities
from app.services.catalog import CategoryCatalog


def _item(category, quantity=1):
    return ActivityItemCreate(description="Article", category=category, quantity=quantity, unit_price=1000)


class TestPointCost:
    def test_cost_sums_point_cost_times_quantity(self, db, categories):
        items = [_item("Session de jeu", 3), _item("Achat de livre")]
        assert loyalty.checkout_point_cost(CategoryCatalog(db), items) == 50

    def test_unknown_category_refused_in_strict_mode(self, db, categories):
        with pytest.raises(UnknownCategory) as excinfo:
            loyalty.checkout_point_cost(CategoryCatalog(db), [_item("Inconnue")], strict=True)
        assert excinfo.value.category == "Inconnue"

    def test_unknown_category_costs_nothing_when_lenient(self, db, categories):
        items = [_item("Inconnue"), _item("Session de jeu")]
        assert loyalty.checkout_point_cost(CategoryCatalog(db), items, strict=False) == 10

    def test_strict_mode_follows_settings(self, db, categories):
        with patch("app.services.loyalty.settings") as fake_settings:
            fake_settings.POINTS_REQUIRE_KNOWN_CATEGORY = False
            assert loyalty.checkout_point_cost(CategoryCatalog(db), [_item("Inconnue")]) == 0

    def test_points_checkout_with_unknown_category_writes_nothing(self, db, categories, loyal_client):
        info = ClientInfo(client_name=loyal_client.name, client_id=loyal_client.id)
        with pytest.raises(UnknownCategory):
            create_activities(db, info, [_item("Inconnue")], PaymentType.POINTS)
        db.refresh(loyal_client)
        assert loyal_client.loyalty_points == 100


class TestDebit:
    def test_debit_decrements_balance(self, db, loyal_client):
        loyalty.debit(db, loyal_client.id, 40)
        db.commit()
        db.refresh(loyal_client)
        assert loyal_client.loyalty_points == 60

    def test_debit_of_whole_balance_reaches_zero(self, db, loyal_client):
        loyalty.debit(db, loyal_client.id, 100)
        db.commit()
        db.refresh(loyal_client)
        assert loyal_client.loyalty_points == 0

    def test_debit_above_balance_rejected(self, db):
        client = Client(name="Petit Solde", loyalty_points=10)
        db.add(client)
        db.commit()

        with pytest.raises(InsufficientPoints) as excinfo:
            loyalty.debit(db, client.id, 15)

        assert (excinfo.value.required, excinfo.value.available) == (15, 10)
        db.rollback()
        db.refresh(client)
        assert client.loyalty_points == 10

    def test_debit_unknown_client(self, db):
        with pytest.raises(ClientNotFound):
            loyalty.debit(db, 999, 5)

    def test_negative_debit_rejected(self, db, loyal_client):
        with pytest.raises(LedgerValidationError):
            loyalty.debit(db, loyal_client.id, -1)

    def test_adjust_points_credit_and_debit(self, db, loyal_client):
        assert loyalty.adjust_points(db, loyal_client.id, 25, "Parrainage").loyalty_points == 125
        assert loyalty.adjust_points(db, loyal_client.id, -50, "Correction").loyalty_points == 75

    def test_adjust_points_never_goes_negative(self, db, loyal_client):
        with pytest.raises(InsufficientPoints):
            loyalty.adjust_points(db, loyal_client.id, -101)
        db.refresh(loyal_client)
        assert loyal_client.loyalty_points == 100


class TestTiers:
    @pytest.mark.parametrize(
        "spent, tier",
        [
            (0, "Bronze"),
            (50_000, "Bronze"),
            (50_001, "Argent"),
            (100_001, "Or"),
            (250_001, "Platine"),
            (500_001, "Diamant"),
        ],
    )
    def test_loyalty_tier(self, spent, tier):
        assert loyalty.loyalty_tier(spent) == tier

    def test_earned_points_use_tier_rate(self):
        assert loyalty.earned_points(30_000) == 100
        assert loyalty.earned_points(60_000) == 240
        assert loyalty.earned_points(600_000) == 6000
        assert loyalty.earned_points(0) == 0


def test_client_summaries_group_by_phone(db, categories, loyal_client):
    studio = ActivityItemCreate(description="Session", category="Réservation Studio", unit_price=50000)
    create_activities(db, ClientInfo(client_name="Awa", phone="620000001"), [studio], PaymentType.DIRECT)
    create_activities(
        db, ClientInfo(client_name="Awa D.", phone="620000001"), [studio], PaymentType.INSTALLMENT, paid_amount=10000
    )
    create_activities(
        db,
        ClientInfo(client_name=loyal_client.name, phone="620000001", client_id=loyal_client.id),
        [_item("Session de jeu")],
        PaymentType.POINTS,
    )
    create_activities(db, ClientInfo(client_name="Moussa"), [studio], PaymentType.DIRECT)

    summaries = {s.name: s for s in loyalty.client_summaries(db)}

    assert set(summaries) == {"Awa", "Moussa"}
    awa = summaries["Awa"]
    assert awa.activity_count == 3
    assert awa.total_spent == 60000
    assert awa.loyalty_tier == "Argent"
    assert awa.earned_points == 240

    assert [s.name for s in loyalty.client_summaries(db, search="mous")] == ["Moussa"]
