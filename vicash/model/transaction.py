from datetime import date as date_type
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from vicash.model.base import BaseModel, TENANT_SCHEMA
from vicash.model.category import CategoryKind, kind_column


class Transaction(BaseModel, table=True):
    """
    Movimento financeiro dentro do schema do tenant.

    Convenção de sinal: ingresso sempre positivo, egresso sempre negativo
    (normalizado na borda da API, ver vicash.api.transaction).
    `category_id` aponta para categorias_ingresos ou categorias_egresos
    conforme `category_type`; por isso não há FK.
    """

    __tablename__ = "transactions"
    __table_args__ = {"schema": TENANT_SCHEMA}

    amount: Decimal = Field(sa_type=sa.Numeric(12, 2), nullable=False)
    description: str | None = Field(default=None, nullable=True)
    date: date_type = Field(sa_type=sa.Date(), nullable=False)
    category_id: int = Field(nullable=False)
    category_type: CategoryKind = Field(sa_type=kind_column(), nullable=False)
