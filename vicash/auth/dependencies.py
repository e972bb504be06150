from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from vicash.auth.jwt import verify_token
from vicash.middleware.tenant import ResolvedTenant, get_tenant, get_tenant_session
from vicash.model.user import User

bearer = HTTPBearer(auto_error=False)


def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
) -> dict[str, Any]:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return verify_token(credentials.credentials)


def get_current_user(
    payload: dict[str, Any] = Depends(get_token_payload),
    tenant: ResolvedTenant = Depends(get_tenant),
    session: Session = Depends(get_tenant_session),
) -> User:
    """
    Dependency que retorna o usuário autenticado dentro do schema do tenant.

    O tenant_id do token precisa ser o mesmo do header x-tenant-id: um token
    emitido para um tenant nunca acessa o schema de outro.
    """
    user_id_raw = payload.get("sub")
    tenant_id_raw = payload.get("tenant_id")
    if not user_id_raw or tenant_id_raw is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        user_id = int(user_id_raw)
        token_tenant_id = int(tenant_id_raw)
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if token_tenant_id != tenant.tenant_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token does not belong to this tenant")

    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user
