from vicash.model.base import BaseModel, TENANT_SCHEMA
from vicash.model.tenant import Tenant, TenantUser, TenantUserRole
from vicash.model.user import User
from vicash.model.category import Category, CategoryKind, IncomeCategory, ExpenseCategory
from vicash.model.transaction import Transaction

# Tabelas do catálogo compartilhado (criadas via alembic no schema public)
CATALOG_TABLES = [Tenant.__table__, TenantUser.__table__]

# Tabelas criadas dentro de cada schema de tenant no provisionamento
TENANT_TABLES = [
    User.__table__,
    Category.__table__,
    Transaction.__table__,
    IncomeCategory.__table__,
    ExpenseCategory.__table__,
]

__all__ = [
    "BaseModel",
    "TENANT_SCHEMA",
    "Tenant",
    "TenantUser",
    "TenantUserRole",
    "User",
    "Category",
    "CategoryKind",
    "IncomeCategory",
    "ExpenseCategory",
    "Transaction",
    "CATALOG_TABLES",
    "TENANT_TABLES",
]
