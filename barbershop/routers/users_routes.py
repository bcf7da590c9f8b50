# barbershop/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.auth import get_current_user, hash_password
from barbershop.db import get_session
from barbershop.models import Account
from barbershop.schemas import UserCreate, UserPublic
from barbershop.stores import SqlAccountDirectory

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Check if email already exists
    if SqlAccountDirectory(session).find_by_email(user.email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 2) Create account in DB
    account = Account(
        email=user.email,
        name=user.name,
        phone=user.phone,
        password_hash=hash_password(user.password),
        role=user.role.value,
    )

    session.add(account)
    session.commit()
    session.refresh(account)

    return account
