import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel import Session, select

from ..core import limiter, settings
from ..database import get_session
from ..models import LoginRequest, User, UserCreate, UserRead, UserRole, UserUpdate, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


# Declared ahead of the /{user_id} routes
@router.post("/login", response_model=UserRead)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, credentials: LoginRequest, session: Session = Depends(get_session)):
    if not credentials.username or not credentials.password:
        raise HTTPException(status_code=400, detail="Missing username or password")

    user = session.exec(
        select(User).where(
            (User.username == credentials.username) & (User.password == credentials.password)
        )
    ).first()

    if not user:
        logger.warning("Failed login for %s", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )
    return user


@router.get("", response_model=List[UserRead])
def get_users(session: Session = Depends(get_session)):
    return session.exec(select(User).order_by(User.created_at.desc())).all()


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, session: Session = Depends(get_session)):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, session: Session = Depends(get_session)):
    if not user_data.username or not user_data.password:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: username, password"
        )

    # Check if username already exists
    db_user = session.exec(select(User).where(User.username == user_data.username)).first()
    if db_user:
        raise HTTPException(status_code=400, detail="Username already registered")

    new_user = User(
        username=user_data.username,
        password=user_data.password,
        role=user_data.role or UserRole.CASHIER,
        name=user_data.name,
        email=user_data.email,
    )

    session.add(new_user)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    session.refresh(new_user)
    return new_user


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: str, user_data: UserUpdate, session: Session = Depends(get_session)):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    for key, value in user_data.model_dump(exclude_none=True).items():
        setattr(user, key, value)
    user.updated_at = utc_now()

    session.add(user)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    session.refresh(user)
    return user


@router.delete("/{user_id}", response_model=dict)
def delete_user(user_id: str, session: Session = Depends(get_session)):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    session.delete(user)
    session.commit()
    return {"message": "User deleted successfully", "id": user_id}
