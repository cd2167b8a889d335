from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from pigeon_prestige.schemas.user import UserCreate, UserLogin, UserOut
from pigeon_prestige.db.models.user import User
from pigeon_prestige.core.config import settings
from pigeon_prestige.core.security import hash_password, verify_password, create_access_token
from pigeon_prestige.core.deps import get_current_user, get_db
from pigeon_prestige.services.pigeon_factory import create_starting_pigeons

router = APIRouter(prefix="/auth", tags=["Auth"])

@router.post("/register", status_code=201)
def register(user: UserCreate, db: Session = Depends(get_db)):
    # 1. Validar que no exista email o username
    existing_user = db.query(User).filter(
        (User.email == user.email) |
        (User.username == user.username)
    ).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="El email o usuario ya está registrado")

    # 2. Crear usuario con el saldo inicial
    new_user = User(
        email=user.email,
        username=user.username,
        hashed_password=hash_password(user.password),
        role="user",
        balance=settings.starting_balance,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    # 3. Palomar inicial
    create_starting_pigeons(db, new_user, settings.starting_pigeons)

    return {"message": "Usuario creado exitosamente", "id": new_user.id}

@router.post("/login")
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(
        (User.email == user.identifier) |
        (User.username == user.identifier)
    ).first()
    if not db_user or not verify_password(user.password, db_user.hashed_password):
        raise HTTPException(status_code=401, detail="Credenciales incorrectas")

    token = create_access_token({
        "sub": str(db_user.id),
        "role": db_user.role,
        "username": db_user.username,
    })
    return {"access_token": token, "token_type": "bearer"}

@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
