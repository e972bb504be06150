from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generator

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from vicash.db.session import get_session_context, tenant_session
from vicash.lib.schema_name import is_valid_schema_name
from vicash.services.tenant_service import resolve_schema_by_tenant_id

logger = logging.getLogger(__name__)

TENANT_HEADER = "x-tenant-id"


def _normalize_tenant_header(raw: str | None) -> str | None:
    """Header sem espaços nas bordas; vazio ou só espaços conta como ausente."""
    if raw is None:
        return None
    return raw.strip() or None


async def tenant_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
):
    """
    Middleware de contexto (não-enforcement):

    - Copia o header x-tenant-id para request.state.tenant_header
    - NÃO consulta DB e NÃO bloqueia request sem header
      (o enforcement real fica nas dependencies: get_tenant()/get_tenant_session()).
    """
    request.state.tenant_header = _normalize_tenant_header(request.headers.get(TENANT_HEADER))
    return await call_next(request)


class ResolvedTenant:
    """Tenant resolvido para a request corrente."""

    def __init__(self, tenant_id: int, schema_name: str):
        self.tenant_id = tenant_id
        self.schema_name = schema_name

    def __repr__(self) -> str:
        return f"ResolvedTenant(tenant_id={self.tenant_id}, schema_name={self.schema_name!r})"


def get_tenant(request: Request) -> ResolvedTenant:
    """
    Dependency que resolve x-tenant-id → schema do tenant.

    A consulta ao catálogo usa uma sessão curta, fechada antes de a sessão
    do tenant ser aberta.

    Raises:
        HTTPException: 400 sem header / header inválido, 404 tenant desconhecido
    """
    raw = getattr(request.state, "tenant_header", None)
    if raw is None:
        raw = _normalize_tenant_header(request.headers.get(TENANT_HEADER))
    if not raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tenant ID is required")
    try:
        tenant_id = int(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid tenant ID")

    with get_session_context() as catalog:
        schema_name = resolve_schema_by_tenant_id(catalog, tenant_id)

    if schema_name is None:
        logger.warning(f"Tenant não encontrado: tenant_id={tenant_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    if not is_valid_schema_name(schema_name):
        # Catálogo com valor fora da allow-list: nunca interpolar em SQL
        logger.error(f"schema_name inválido no catálogo: tenant_id={tenant_id} schema={schema_name!r}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    request.state.tenant_id = tenant_id
    request.state.tenant_schema = schema_name
    return ResolvedTenant(tenant_id=tenant_id, schema_name=schema_name)


def get_tenant_session(
    tenant: ResolvedTenant = Depends(get_tenant),
) -> Generator[Session, None, None]:
    """
    Dependency que entrega uma Session ligada ao schema do tenant.

    A sessão faz checkout da própria conexão do pool e a devolve ao sair
    (sucesso, erro ou exceção).
    """
    with tenant_session(tenant.schema_name) as session:
        yield session
