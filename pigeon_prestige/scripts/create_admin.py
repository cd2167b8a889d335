from pigeon_prestige.db.session import SessionLocal, engine, Base
from pigeon_prestige.db.models import _all
from pigeon_prestige.db.models.user import User
from pigeon_prestige.core.config import settings
from pigeon_prestige.core.security import hash_password


def create_admin_user(db, email="admin@pigeonprestige.com", username="ADMIN", password="admin123"):
    """Crea el administrador si no existe. Devuelve el usuario (nuevo o existente)."""
    existing_user = (
        db.query(User)
        .filter((User.email == email) | (User.username == username))
        .first()
    )
    if existing_user:
        print("⚠️  Ya existe un usuario con ese email o username")
        print("➡️  Email:", existing_user.email)
        print("➡️  Usuario:", existing_user.username)
        print("➡️  Rol:", existing_user.role)
        return existing_user

    admin_user = User(
        email=email,
        username=username,
        hashed_password=hash_password(password),
        role="admin",
        balance=settings.starting_balance,
    )
    db.add(admin_user)
    db.commit()

    print("✅ Usuario administrador creado correctamente")
    print("➡️  Email:", email)
    print("➡️  Usuario:", username)
    print("➡️  Contraseña:", password)
    print("⚠️  Cambia la contraseña cuanto antes")
    return admin_user


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        create_admin_user(db)
    except Exception as e:
        db.rollback()
        print("❌ Error creando el usuario administrador")
        print(e)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
