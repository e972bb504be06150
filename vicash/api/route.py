import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel as PydanticBaseModel, field_validator
from sqlmodel import Session

from vicash.api.auth import MIN_PASSWORD_LENGTH, router as auth_router
from vicash.api.category import router as category_router
from vicash.api.transaction import router as transaction_router
from vicash.auth.dependencies import get_current_user
from vicash.auth.password import MAX_PASSWORD_BYTES, hash_password, verify_password
from vicash.db.session import get_session
from vicash.middleware.tenant import ResolvedTenant, get_tenant, get_tenant_session
from vicash.model.base import utc_now
from vicash.model.user import User
from vicash.services.tenant_service import get_tenant_by_id

logger = logging.getLogger(__name__)

# Rotas com escopo de tenant: exigem x-tenant-id + Bearer token
api_router = APIRouter(prefix="/api")
api_router.include_router(category_router)
api_router.include_router(transaction_router)

router = APIRouter()  # Sem tag padrão - cada endpoint define sua própria tag
router.include_router(auth_router)


@router.get("/", tags=["System"])
def root():
    return {"message": "Bienvenido a la API de Vicash"}


@router.get("/health", tags=["System"])
def health():
    """Health check endpoint."""
    return {"status": "ok"}


class TenantResponse(PydanticBaseModel):
    id: int
    name: str
    schema_name: str
    domain: str | None
    plan: str
    created_at: datetime

    class Config:
        from_attributes = True


@api_router.get("/tenant", response_model=TenantResponse, tags=["Tenant"])
def get_current_tenant_info(
    user: User = Depends(get_current_user),
    tenant: ResolvedTenant = Depends(get_tenant),
    session: Session = Depends(get_session),
):
    """Retorna informações do tenant atual (catálogo)."""
    record = get_tenant_by_id(session, tenant.tenant_id)
    if not record:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return record


class UserResponse(PydanticBaseModel):
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserUpdate(PydanticBaseModel):
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_optional(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class PasswordChange(PydanticBaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"senha deve ter no máximo {MAX_PASSWORD_BYTES} bytes")
        return v


@api_router.get("/user", response_model=UserResponse, tags=["User"])
def get_me(user: User = Depends(get_current_user)):
    """Retorna os dados do usuário autenticado."""
    return user


@api_router.put("/user", response_model=UserResponse, tags=["User"])
def update_me(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    """Atualiza nome/sobrenome do usuário autenticado (campos enviados)."""
    if "first_name" in body.model_fields_set:
        user.first_name = body.first_name
    if "last_name" in body.model_fields_set:
        user.last_name = body.last_name
    user.updated_at = utc_now()

    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@api_router.put("/user/password", tags=["User"])
def change_password(
    body: PasswordChange,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = hash_password(body.new_password)
    user.updated_at = utc_now()
    session.add(user)
    session.commit()
    logger.info(f"Senha alterada: user_id={user.id}")
    return {"message": "Password updated"}


router.include_router(api_router)
