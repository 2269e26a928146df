"""
Script pour initialiser la base de données avec un administrateur.
"""
import sys
from pathlib import Path

# Ajouter le répertoire backend au path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy.orm import Session
from app.db.base import SessionLocal, engine, Base
import app.models  # noqa: F401
from app.models.user import User, UserRole
from app.core.security import get_password_hash


def init_db() -> None:
    """Initialise la base de données avec les tables et un administrateur."""
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        admin = db.query(User).filter(User.role == UserRole.ADMIN).first()
        if admin:
            print("Administrateur déjà existant.")
            return

        admin = User(
            email="admin@kheops.studio",
            username="admin",
            hashed_password=get_password_hash("admin123"),
            full_name="Administrateur",
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(admin)
        db.commit()

        print("✅ Base de données initialisée avec succès!")
        print("👤 Username: admin")
        print("🔑 Password: admin123")
        print("\n⚠️  IMPORTANT: Changez le mot de passe après la première connexion!")

    except Exception as e:
        db.rollback()
        print(f"❌ Erreur lors de l'initialisation: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
