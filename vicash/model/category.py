from __future__ import annotations

import enum

import sqlalchemy as sa
from sqlmodel import Field

from vicash.model.base import BaseModel, TENANT_SCHEMA


class CategoryKind(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


def kind_column() -> sa.Enum:
    return sa.Enum(
        CategoryKind,
        name="category_kind",
        native_enum=False,
        values_callable=lambda e: [m.value for m in e],
    )


class Category(BaseModel, table=True):
    """Categoria genérica (income/expense) com cor, tabela categories."""

    __tablename__ = "categories"
    __table_args__ = {"schema": TENANT_SCHEMA}

    name: str
    kind: CategoryKind = Field(sa_type=kind_column())
    color: str = Field(default="#FFD700")
    # Categorias semeadas no provisionamento não podem ser alteradas nem excluídas
    is_default: bool = Field(default=False)


class KindCategoryBase(BaseModel):
    name: str
    description: str | None = Field(default=None, nullable=True)
    is_default: bool = Field(default=False)


class IncomeCategory(KindCategoryBase, table=True):
    """Categoria de ingresso (tabela categorias_ingresos)."""

    __tablename__ = "categorias_ingresos"
    __table_args__ = {"schema": TENANT_SCHEMA}


class ExpenseCategory(KindCategoryBase, table=True):
    """Categoria de egresso (tabela categorias_egresos)."""

    __tablename__ = "categorias_egresos"
    __table_args__ = {"schema": TENANT_SCHEMA}


def category_model_for(kind: CategoryKind) -> type[IncomeCategory] | type[ExpenseCategory]:
    """Tabela de categorias que corresponde ao tipo da transação."""
    if kind == CategoryKind.INCOME:
        return IncomeCategory
    return ExpenseCategory
