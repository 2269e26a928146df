"""
Script pour créer des données de démonstration dans la base de données.
"""
import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone

# Ajouter le répertoire backend au path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy.orm import Session
from app.db.base import SessionLocal, engine, Base
import app.models  # noqa: F401
from app.models.activity import PaymentType
from app.models.booking import Booking
from app.models.category import ActivityCategory
from app.models.client import Client
from app.models.contract import Contract, ContractStatus
from app.schemas.activity import ActivityItemCreate, ClientInfo
from app.services.activity_log import create_activities


def create_categories(db: Session) -> list[ActivityCategory]:
    """Créer les catégories d'activités."""
    categories_data = [
        {"name": "Réservation Studio", "point_cost": 50, "unit_price": 15000, "icon": "mic", "color": "purple"},
        {"name": "Achat de livre", "point_cost": 20, "unit_price": 5000, "icon": "book", "color": "blue"},
        {"name": "Session de jeu", "point_cost": 10, "unit_price": 2000, "icon": "gamepad", "color": "green"},
        {"name": "Billetterie", "point_cost": 30, "unit_price": 7500, "icon": "ticket", "color": "orange"},
        {"name": "Merchandising", "point_cost": 25, "unit_price": 6000, "icon": "shirt", "color": "red"},
        {"name": "Autre", "point_cost": 0, "unit_price": 0, "icon": "dollar", "color": "gray"},
    ]

    categories = []
    for cat_data in categories_data:
        existing = db.query(ActivityCategory).filter(ActivityCategory.name == cat_data["name"]).first()
        if not existing:
            category = ActivityCategory(**cat_data)
            db.add(category)
            categories.append(category)
        else:
            categories.append(existing)

    db.commit()
    print(f"✅ {len(categories)} catégories créées/vérifiées")
    return categories


def create_clients(db: Session) -> list[Client]:
    """Créer des clients de test."""
    clients_data = [
        {"name": "Awa Diallo", "phone": "+224 620 00 00 01", "loyalty_points": 120},
        {"name": "Mamadou Camara", "phone": "+224 620 00 00 02", "loyalty_points": 40},
        {"name": "Fatoumata Barry", "phone": "+224 620 00 00 03", "loyalty_points": 0},
    ]

    clients = []
    for client_data in clients_data:
        existing = db.query(Client).filter(Client.phone == client_data["phone"]).first()
        if not existing:
            client = Client(**client_data)
            db.add(client)
            clients.append(client)
        else:
            clients.append(existing)

    db.commit()
    print(f"✅ {len(clients)} clients créés/vérifiés")
    return clients


def create_sample_activities(db: Session, clients: list[Client]) -> None:
    """Quelques encaissements de démonstration (direct, échéancier, points)."""
    awa, mamadou, fatoumata = clients[:3]

    booking = Booking(
        client_name=mamadou.name,
        phone=mamadou.phone,
        service="Réservation Studio",
        date=datetime.now(timezone.utc) + timedelta(days=2),
        amount=30000,
    )
    contract = Contract(client_name=fatoumata.name, title="Enregistrement album", amount=60000,
                        status=ContractStatus.SIGNED)
    db.add_all([booking, contract])
    db.commit()

    create_activities(
        db,
        ClientInfo(client_name=awa.name, phone=awa.phone, client_id=awa.id),
        [
            ActivityItemCreate(description="Roman", category="Achat de livre", quantity=2, unit_price=5000),
            ActivityItemCreate(description="Partie FIFA", category="Session de jeu", quantity=1, unit_price=2000,
                               start_time="14:00", end_time="15:30"),
        ],
        PaymentType.DIRECT,
    )
    create_activities(
        db,
        ClientInfo(client_name=mamadou.name, phone=mamadou.phone, client_id=mamadou.id),
        [ActivityItemCreate(description="Studio 2h", category="Réservation Studio", quantity=2, unit_price=15000)],
        PaymentType.DIRECT,
        booking_id=booking.id,
    )
    create_activities(
        db,
        ClientInfo(client_name=fatoumata.name, phone=fatoumata.phone, client_id=fatoumata.id),
        [ActivityItemCreate(description="Enregistrement album", category="Réservation Studio",
                            quantity=4, unit_price=15000)],
        PaymentType.INSTALLMENT,
        paid_amount=20000,
        contract_id=contract.id,
    )
    create_activities(
        db,
        ClientInfo(client_name=awa.name, phone=awa.phone, client_id=awa.id),
        [ActivityItemCreate(description="Partie offerte", category="Session de jeu", quantity=1, unit_price=2000)],
        PaymentType.POINTS,
    )
    print("✅ 4 encaissements de démonstration créés")


def seed_database():
    """Fonction principale de seed."""
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        categories = create_categories(db)
        clients = create_clients(db)
        create_sample_activities(db, clients)

        print("\n✅ Seed terminé avec succès!\n")
        print("📊 Résumé:")
        print(f"   - {len(categories)} catégories")
        print(f"   - {len(clients)} clients")

    except Exception as e:
        db.rollback()
        print(f"\n❌ Erreur lors du seed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
