import os
from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from jose import jwt, JWTError
from fastapi import HTTPException
from dotenv import load_dotenv

# Carrega variáveis de ambiente do .env (garante que está carregado antes de usar)
project_root = Path(__file__).resolve().parent.parent.parent
load_dotenv(project_root / ".env")
load_dotenv(".env")

# Configuração JWT
JWT_SECRET = os.getenv("JWT_SECRET") or "CHANGE_ME"
JWT_ISSUER = os.getenv("JWT_ISSUER", "vicash")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "7"))


def create_access_token(user_id: int, tenant_id: int, email: str) -> str:
    """
    Cria um token JWT de sessão.

    Args:
        user_id: ID do usuário dentro do schema do tenant
        tenant_id: ID do tenant no catálogo
        email: Email do usuário

    Returns:
        Token JWT codificado
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(user_id),  # Subject (user_id no schema do tenant)
        "email": email,
        "tenant_id": tenant_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=JWT_EXPIRATION_DAYS)).timestamp()),
        "iss": JWT_ISSUER,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verifica e decodifica um token JWT.

    Raises:
        HTTPException: Se o token for inválido ou expirado
    """
    try:
        return jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
        )
    except JWTError:
        # Evita vazar detalhes internos no payload de erro.
        raise HTTPException(status_code=401, detail="Invalid token")
