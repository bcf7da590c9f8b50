# barbershop/routers/auth_routes.py

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from barbershop.auth import verify_password, create_access_token
from barbershop.db import get_session
from barbershop.schemas import Token
from barbershop.stores import SqlAccountDirectory

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    account = SqlAccountDirectory(session).find_by_email(form_data.username)

    if account is None or not verify_password(form_data.password, account.password_hash):
        logger.info("login_failed", email=form_data.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if account.status == "blocked":
        raise HTTPException(status_code=403, detail="Account is blocked")

    token = create_access_token({"sub": account.id, "role": account.role})
    return {"access_token": token, "token_type": "bearer"}
