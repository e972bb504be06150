from __future__ import annotations

from sqlmodel import Session, select

from vicash.model.tenant import Tenant, TenantUser, TenantUserRole


def get_tenant_by_id(session: Session, tenant_id: int) -> Tenant | None:
    return session.exec(select(Tenant).where(Tenant.id == int(tenant_id))).first()


def create_tenant_record(
    session: Session, *, name: str, schema_name: str, domain: str | None = None, plan: str = "basic"
) -> Tenant:
    """Insere o tenant no catálogo. Não faz commit: a transação é do chamador."""
    tenant = Tenant(name=name, schema_name=schema_name, domain=domain or None, plan=plan)
    session.add(tenant)
    session.flush()
    return tenant


def create_tenant_user_record(
    session: Session, *, tenant_id: int, email: str, role: TenantUserRole = TenantUserRole.MEMBER
) -> TenantUser:
    """
    Insere o vínculo email ↔ tenant no catálogo. Não faz commit.

    Chamadores devem checar `email_is_registered()` antes; a constraint única
    do banco é a última barreira.
    """
    tenant_user = TenantUser(tenant_id=tenant_id, email=email, role=role)
    session.add(tenant_user)
    session.flush()
    return tenant_user


def email_is_registered(session: Session, email: str) -> bool:
    return session.exec(select(TenantUser.id).where(TenantUser.email == email)).first() is not None


def schema_name_in_use(session: Session, schema_name: str) -> bool:
    return session.exec(select(Tenant.id).where(Tenant.schema_name == schema_name)).first() is not None


def resolve_tenant_by_email(session: Session, email: str) -> tuple[int, str] | None:
    """
    Retorna (tenant_id, schema_name) do tenant ao qual o email pertence.

    None quando não há vínculo; no login isso vira "credenciais inválidas"
    (nunca 404, para não revelar se o email existe).
    """
    row = session.exec(
        select(Tenant.id, Tenant.schema_name)
        .join(TenantUser, TenantUser.tenant_id == Tenant.id)
        .where(TenantUser.email == email)
    ).first()
    if row is None:
        return None
    tenant_id, schema_name = row
    return int(tenant_id), schema_name


def resolve_schema_by_tenant_id(session: Session, tenant_id: int) -> str | None:
    return session.exec(select(Tenant.schema_name).where(Tenant.id == int(tenant_id))).first()
