from __future__ import annotations

import enum

import sqlalchemy as sa
from sqlmodel import Field

from vicash.model.base import BaseModel


class TenantUserRole(str, enum.Enum):
    ADMIN = "admin"
    MEMBER = "member"


class Tenant(BaseModel, table=True):
    """Modelo Tenant - raiz do multi-tenant (catálogo compartilhado, schema public)."""

    __tablename__ = "tenants"

    name: str = Field(index=True)
    # Schema PostgreSQL isolado do tenant (derivado do nome, ver vicash.lib.schema_name)
    schema_name: str = Field(unique=True, index=True)
    domain: str | None = Field(default=None, nullable=True)
    plan: str = Field(default="basic")
    # Referência do cliente no provedor de cobrança (preenchida fora desta API)
    billing_customer_id: str | None = Field(default=None, nullable=True)


class TenantUser(BaseModel, table=True):
    """
    Vínculo email ↔ Tenant no catálogo.

    Usado no login para descobrir em qual schema vive o usuário.
    O email é único no catálogo: um email pertence a um único tenant.
    """

    __tablename__ = "tenant_users"

    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    email: str = Field(unique=True, index=True)

    # Persistir enums pelos *values* ("admin"/"member"), pois o banco usa strings.
    role: TenantUserRole = Field(
        default=TenantUserRole.MEMBER,
        sa_type=sa.Enum(
            TenantUserRole,
            name="tenant_user_role",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
    )
