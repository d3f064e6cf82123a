from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from datetime import timedelta

from retaguarda.config import get_settings
from retaguarda.database import get_db
from retaguarda.security import verify_pin, create_access_token
from retaguarda.schemas.auth import Token
from retaguarda.crud.users import get_user_by_username

router = APIRouter()


@router.post("/login", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # 1. Buscar usuário
    user = get_user_by_username(db, username=form_data.username)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário incorreto",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 2. Verificar PIN (o OAuth2 manda no campo 'password')
    if not verify_pin(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="PIN incorreto",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 3. Gerar token
    access_token = create_access_token(
        data={"sub": user.username, "role": user.role.value},
        expires_delta=timedelta(minutes=get_settings().access_token_expire_minutes)
    )

    return {"access_token": access_token, "token_type": "bearer"}
