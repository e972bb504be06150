from sqlmodel import Field

from vicash.model.base import BaseModel, TENANT_SCHEMA


class User(BaseModel, table=True):
    """Usuário dentro do schema do tenant (tabela users)."""

    __tablename__ = "users"
    __table_args__ = {"schema": TENANT_SCHEMA}

    email: str = Field(unique=True)
    password_hash: str
    first_name: str | None = Field(default=None, nullable=True)
    last_name: str | None = Field(default=None, nullable=True)
