import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from barberdesk.database import get_session
from barberdesk.models.user import LoginRequest, TokenResponse, User, UserCreate
from barberdesk.core.security import create_access_token, get_password_hash, verify_password


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User) -> dict:
    return {
        "access_token": create_access_token(user),
        "token_type": "bearer",
        "user": user,
    }


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    session: Session = Depends(get_session),
):
    user = session.exec(
        select(User).where(User.email == credentials.email)
    ).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning("Tentativa de login inválida: %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou senha inválidos",
        )

    logger.info("Login: %s", user.email)
    return _token_response(user)


# =========================
# CADASTRO
# - o primeiro usuário do sistema vira admin
# =========================
@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    session: Session = Depends(get_session),
):
    existing_user = session.exec(
        select(User).where(User.email == payload.email)
    ).first()

    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado")

    first_user = session.exec(select(User)).first() is None

    user = User(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        role="admin" if first_user else "staff",
        password_hash=get_password_hash(payload.password),
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info("Novo usuário cadastrado: %s (%s)", user.email, user.role)
    return _token_response(user)
