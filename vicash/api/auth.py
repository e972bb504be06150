import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlmodel import select

from vicash.auth.jwt import create_access_token
from vicash.auth.password import MAX_PASSWORD_BYTES, verify_password
from vicash.db.session import get_session_context, tenant_session
from vicash.exceptions import DuplicateEmailError, ProvisioningError
from vicash.services.provisioning import provision_tenant
from vicash.services.tenant_service import resolve_tenant_by_email
from vicash.model.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid credentials"


def _normalize_email(v: str) -> str:
    email = (v or "").strip().lower()
    if not email or "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("email inválido")
    return email


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    domain: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Campo não pode estar vazio")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"senha deve ter no máximo {MAX_PASSWORD_BYTES} bytes")
        return v

    @field_validator("domain", "first_name", "last_name")
    @classmethod
    def validate_optional(cls, v: str | None) -> str | None:
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return (v or "").strip().lower()


class UserInfo(BaseModel):
    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None


class AuthResponse(BaseModel):
    user: UserInfo
    tenant_id: int
    token: str
    token_type: str = "bearer"


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest):
    """
    Cria um tenant novo (schema isolado + dados padrão) e o usuário admin.
    Retorna o token de sessão já emitido para o tenant criado.
    """
    try:
        provisioned = provision_tenant(
            name=body.name,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            domain=body.domain,
        )
    except DuplicateEmailError:
        logger.info("Registro recusado: email já registrado")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    except ProvisioningError as e:
        logger.error(f"Falha no provisionamento do tenant: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create account",
        ) from e

    token = create_access_token(
        user_id=provisioned.user_id,
        tenant_id=provisioned.tenant_id,
        email=provisioned.email,
    )
    return AuthResponse(
        user=UserInfo(
            id=provisioned.user_id,
            email=provisioned.email,
            first_name=provisioned.first_name,
            last_name=provisioned.last_name,
        ),
        tenant_id=provisioned.tenant_id,
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest):
    """
    Login por email/senha.

    Qualquer falha (email desconhecido, vínculo sem usuário, senha errada)
    responde o mesmo 401 genérico.
    """
    if not body.email or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")

    with get_session_context() as catalog:
        resolved = resolve_tenant_by_email(catalog, body.email)

    user: User | None = None
    if resolved is not None:
        tenant_id, schema_name = resolved
        with tenant_session(schema_name) as session:
            user = session.exec(select(User).where(User.email == body.email)).first()

    if not verify_password(body.password, user.password_hash if user else None):
        logger.info("Login recusado: credenciais inválidas")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    token = create_access_token(user_id=user.id, tenant_id=tenant_id, email=user.email)
    return AuthResponse(
        user=UserInfo(id=user.id, email=user.email, first_name=user.first_name, last_name=user.last_name),
        tenant_id=tenant_id,
        token=token,
    )
