"""Unit tests for the activity log service (checkouts, deletion, queries)."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    ActivityNotFound,
    InsufficientPoints,
    LedgerValidationError,
    NothingToCancel,
    PersistenceFailure,
)
from app.models.activity import Activity, PaymentType
from app.models.booking import BookingStatus
from app.models.client import Client
from app.models.contract import ContractPaymentStatus
from app.models.transaction import Transaction, TransactionType
from app.schemas.activity import ActivityItemCreate, ClientInfo
from app.services import activity_log
from app.services.activity_log import compute_duration, create_activities


def _studio(**overrides):
    values = dict(description="Session studio", category="Réservation Studio", quantity=1, unit_price=50000)
    values.update(overrides)
    return ActivityItemCreate(**values)


JEAN = ClientInfo(client_name="Jean Dupont", phone="620123456")


class TestDirectCheckout:
    def test_single_item_books_one_revenue(self, db, categories):
        outcome = create_activities(db, JEAN, [_studio()], PaymentType.DIRECT)

        assert outcome.count == 1
        activity = outcome.activities[0]
        assert activity.total_amount == 50000
        assert activity.paid_amount == 50000
        assert activity.remaining_amount == 0

        transactions = db.query(Transaction).all()
        assert len(transactions) == 1
        assert transactions[0].type == TransactionType.REVENUE
        assert transactions[0].amount == 50000
        assert transactions[0].activity_id == activity.id
        assert transactions[0].reference_number == outcome.checkout_ref

    def test_multi_item_checkout_shares_date_and_reference(self, db, categories):
        items = [
            _studio(),
            ActivityItemCreate(description="Roman", category="Achat de livre", quantity=3, unit_price=5000),
        ]
        outcome = create_activities(db, JEAN, items, PaymentType.DIRECT)

        assert outcome.count == 2
        assert {a.checkout_ref for a in outcome.activities} == {outcome.checkout_ref}
        assert len({a.date for a in outcome.activities}) == 1
        assert outcome.activities[1].total_amount == 15000
        assert sorted(t.amount for t in outcome.transactions) == [15000, 50000]

    def test_free_text_category_is_accepted(self, db):
        outcome = create_activities(
            db, JEAN, [ActivityItemCreate(description="Café", category="Buvette", unit_price=500)], PaymentType.DIRECT
        )
        assert outcome.activities[0].category == "Buvette"

    def test_amount_must_match_quantity_times_unit_price(self, db):
        item = _studio(quantity=2, amount=60000)
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, [item], PaymentType.DIRECT)
        assert db.query(Activity).count() == 0

    def test_amount_within_tolerance_is_accepted(self, db):
        outcome = create_activities(db, JEAN, [_studio(amount=50000.004)], PaymentType.DIRECT)
        assert outcome.activities[0].total_amount == 50000

    @pytest.mark.parametrize("field", ["unit_price", "amount"])
    def test_non_finite_price_rejected(self, db, field):
        with pytest.raises(ValidationError):
            _studio(**{field: float("inf")})

        item = ActivityItemCreate.model_construct(
            description="Session studio", category="Réservation Studio", quantity=1, unit_price=50000,
        )
        setattr(item, field, float("nan"))
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, [item], PaymentType.DIRECT)
        assert db.query(Activity).count() == 0

    def test_blank_client_name_rejected(self, db):
        with pytest.raises(LedgerValidationError):
            create_activities(db, ClientInfo(client_name="   "), [_studio()], PaymentType.DIRECT)

    def test_empty_items_rejected(self, db):
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, [], PaymentType.DIRECT)

    def test_settled_checkout_marks_booking_and_contract(self, db, booking, contract):
        create_activities(db, JEAN, [_studio()], PaymentType.DIRECT, booking_id=booking.id, contract_id=contract.id)

        db.refresh(booking)
        db.refresh(contract)
        assert booking.status == BookingStatus.PAID
        assert contract.payment_status == ContractPaymentStatus.PAID
        assert contract.paid_at is not None

    def test_unknown_booking_is_ignored(self, db):
        outcome = create_activities(db, JEAN, [_studio()], PaymentType.DIRECT, booking_id=999)
        assert outcome.activities[0].booking_id == 999


class TestInstallmentCheckout:
    def test_deposit_leaves_remaining_balance(self, db):
        outcome = create_activities(db, JEAN, [_studio()], PaymentType.INSTALLMENT, paid_amount=20000)

        activity = outcome.activities[0]
        assert activity.total_amount == 50000
        assert activity.paid_amount == 20000
        assert activity.remaining_amount == 30000
        assert [t.amount for t in outcome.transactions] == [20000]

    def test_deposit_is_spread_over_items_in_order(self, db):
        items = [_studio(unit_price=10000), _studio(unit_price=30000)]
        outcome = create_activities(db, JEAN, items, PaymentType.INSTALLMENT, paid_amount=25000)

        first, second = outcome.activities
        assert (first.paid_amount, first.remaining_amount) == (10000, 0)
        assert (second.paid_amount, second.remaining_amount) == (15000, 15000)
        assert sum(t.amount for t in outcome.transactions) == 25000

    def test_zero_deposit_books_no_revenue(self, db):
        outcome = create_activities(db, JEAN, [_studio()], PaymentType.INSTALLMENT, paid_amount=0)
        assert outcome.transactions == []
        assert outcome.activities[0].remaining_amount == 50000

    def test_missing_deposit_rejected(self, db):
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, [_studio()], PaymentType.INSTALLMENT)

    def test_deposit_above_total_rejected(self, db):
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, [_studio()], PaymentType.INSTALLMENT, paid_amount=60000)

    def test_non_finite_deposit_rejected(self, db):
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, [_studio()], PaymentType.INSTALLMENT, paid_amount=float("nan"))
        assert db.query(Activity).count() == 0

    def test_open_plan_leaves_booking_untouched(self, db, booking, contract):
        create_activities(
            db, JEAN, [_studio()], PaymentType.INSTALLMENT,
            paid_amount=20000, booking_id=booking.id, contract_id=contract.id,
        )
        db.refresh(booking)
        db.refresh(contract)
        assert booking.status == BookingStatus.PENDING
        assert contract.payment_status == ContractPaymentStatus.UNPAID


class TestPointsCheckout:
    def test_points_purchase_debits_balance(self, db, categories, loyal_client):
        info = ClientInfo(client_name=loyal_client.name, client_id=loyal_client.id)
        items = [ActivityItemCreate(description="Partie", category="Session de jeu", quantity=3, unit_price=2000)]

        outcome = create_activities(db, info, items, PaymentType.POINTS)

        db.refresh(loyal_client)
        assert loyal_client.loyalty_points == 70
        assert outcome.points_debited == 30
        activity = outcome.activities[0]
        assert activity.paid_amount == activity.total_amount == 6000
        assert activity.remaining_amount == 0

        expense = outcome.transactions[0]
        assert expense.type == TransactionType.EXPENSE
        assert expense.amount == -6000

    def test_insufficient_points_writes_nothing(self, db, categories):
        client = Client(name="Petit Solde", loyalty_points=10)
        db.add(client)
        db.commit()
        info = ClientInfo(client_name=client.name, client_id=client.id)
        items = [ActivityItemCreate(description="Partie", category="Session de jeu", quantity=2, unit_price=2000)]

        with pytest.raises(InsufficientPoints) as excinfo:
            create_activities(db, info, items, PaymentType.POINTS)

        assert excinfo.value.required == 20
        assert excinfo.value.available == 10
        db.refresh(client)
        assert client.loyalty_points == 10
        assert db.query(Activity).count() == 0
        assert db.query(Transaction).count() == 0

    def test_points_require_registered_client(self, db, categories):
        items = [ActivityItemCreate(description="Partie", category="Session de jeu", unit_price=2000)]
        with pytest.raises(LedgerValidationError):
            create_activities(db, JEAN, items, PaymentType.POINTS)


class TestAtomicity:
    def test_database_failure_rolls_back_everything(self, db, categories, loyal_client):
        info = ClientInfo(client_name=loyal_client.name, client_id=loyal_client.id)
        items = [ActivityItemCreate(description="Partie", category="Session de jeu", unit_price=2000)]

        with patch(
            "app.services.activity_log.add_transaction",
            side_effect=OperationalError("INSERT", {}, Exception("disk full")),
        ):
            with pytest.raises(PersistenceFailure):
                create_activities(db, info, items, PaymentType.POINTS)

        db.refresh(loyal_client)
        assert loyal_client.loyalty_points == 100
        assert db.query(Activity).count() == 0
        assert db.query(Transaction).count() == 0


class TestDeletion:
    def test_deleting_last_booking_activity_resets_booking(self, db, booking):
        outcome = create_activities(db, JEAN, [_studio()], PaymentType.DIRECT, booking_id=booking.id)
        db.refresh(booking)
        assert booking.status == BookingStatus.PAID

        activity_log.delete_activity(db, outcome.activities[0].id)

        db.refresh(booking)
        assert booking.status == BookingStatus.PENDING
        assert db.query(Transaction).count() == 1

    def test_booking_kept_paid_while_other_activities_remain(self, db, booking):
        outcome = create_activities(db, JEAN, [_studio(), _studio()], PaymentType.DIRECT, booking_id=booking.id)

        activity_log.delete_activity(db, outcome.activities[0].id)

        db.refresh(booking)
        assert booking.status == BookingStatus.PAID

    def test_delete_missing_activity(self, db):
        with pytest.raises(ActivityNotFound):
            activity_log.delete_activity(db, 42)

    def test_cancel_booking_payment_deletes_linked_activities(self, db, booking):
        create_activities(db, JEAN, [_studio(), _studio()], PaymentType.DIRECT, booking_id=booking.id)
        create_activities(db, JEAN, [_studio()], PaymentType.DIRECT)

        deleted = activity_log.cancel_booking_payment(db, booking.id)

        assert deleted == 2
        assert db.query(Activity).count() == 1
        db.refresh(booking)
        assert booking.status == BookingStatus.PENDING
        assert db.query(Transaction).count() == 3

    def test_cancel_without_activities(self, db, booking):
        with pytest.raises(NothingToCancel):
            activity_log.cancel_booking_payment(db, booking.id)


class TestQueries:
    def test_search_is_case_insensitive(self, db):
        create_activities(db, JEAN, [_studio(description="Mixage")], PaymentType.DIRECT)
        create_activities(db, ClientInfo(client_name="Awa"), [_studio(description="Roman")], PaymentType.DIRECT)

        assert [a.client_name for a in activity_log.list_activities(db, search_term="jean")] == ["Jean Dupont"]
        assert [a.description for a in activity_log.list_activities(db, search_term="ROMAN")] == ["Roman"]

    def test_day_filter_matches_calendar_day(self, db):
        outcome = create_activities(db, JEAN, [_studio()], PaymentType.DIRECT)
        activity = outcome.activities[0]
        yesterday = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
        activity.date = yesterday
        db.commit()

        assert activity_log.list_activities(db, day=yesterday.date()) != []
        assert activity_log.list_activities(db, day=(yesterday + timedelta(days=1)).date()) == []

    def test_revenue_counts_direct_and_installment_paid(self, db, categories, loyal_client):
        create_activities(db, JEAN, [_studio()], PaymentType.DIRECT)
        create_activities(db, JEAN, [_studio()], PaymentType.INSTALLMENT, paid_amount=20000)
        create_activities(
            db,
            ClientInfo(client_name=loyal_client.name, client_id=loyal_client.id),
            [ActivityItemCreate(description="Partie", category="Session de jeu", unit_price=2000)],
            PaymentType.POINTS,
        )

        assert activity_log.total_revenue(db) == 70000
        assert activity_log.outstanding_balance(db) == 30000
        assert activity_log.activity_count(db) == 3


class TestDuration:
    @pytest.mark.parametrize(
        "start, end, expected",
        [
            ("14:00", "16:00", "2h"),
            ("14:00", "15:30", "1h30"),
            ("09:15", "10:00", "45 min"),
            ("16:00", "14:00", None),
            ("14:00", "14:00", None),
            ("2pm", "16:00", None),
            (None, "16:00", None),
        ],
    )
    def test_compute_duration(self, start, end, expected):
        assert compute_duration(start, end) == expected

    def test_duration_stored_on_activity(self, db):
        outcome = create_activities(db, JEAN, [_studio(start_time="10:00", end_time="11:30")], PaymentType.DIRECT)
        assert outcome.activities[0].duration == "1h30"
