from sqlalchemy import func
from sqlmodel import Session, select

from vicash.model.category import Category, CategoryKind, ExpenseCategory, IncomeCategory
from vicash.model.transaction import Transaction

DEFAULT_INCOME_CATEGORIES = [
    "Sueldo", "Negocio", "Ingreso residual", "Freelance",
    "Comisiones", "Inversiones", "Subsidios", "Donaciones",
]

DEFAULT_EXPENSE_CATEGORIES = [
    "Ahorros", "Caridad", "Celular", "Comida por fuera", "Créditos",
    "Cuidado personal", "Deudas", "Donaciones", "Educación", "Entretenimiento",
    "Gasolina", "Personales", "Imprevistos", "Inversiones", "Gimnasio",
    "Mantenimiento hogar", "Mercado", "Salud", "Seguros", "Servicios agua",
    "Servicios gas", "Servicios internet", "Servicios luz", "TV Streaming",
    "Tarjeta de crédito", "Transporte público", "Vestuario", "Vicash Suscripción",
    "Vivienda alquiler", "Vivienda hipoteca",
]

# (name, kind, color)
DEFAULT_CATEGORIES = [
    ("Salario", CategoryKind.INCOME, "#4CAF50"),
    ("Inversiones", CategoryKind.INCOME, "#2196F3"),
    ("Freelance", CategoryKind.INCOME, "#9C27B0"),
    ("Vivienda", CategoryKind.EXPENSE, "#F44336"),
    ("Alimentación", CategoryKind.EXPENSE, "#FF9800"),
    ("Transporte", CategoryKind.EXPENSE, "#795548"),
    ("Servicios", CategoryKind.EXPENSE, "#607D8B"),
    ("Ocio", CategoryKind.EXPENSE, "#E91E63"),
]

# Cores fixas por tipo (respostas de transações)
KIND_COLORS = {
    CategoryKind.INCOME: "#4CAF50",
    CategoryKind.EXPENSE: "#F44336",
}


def seed_default_categories(session: Session) -> None:
    """
    Semeia as categorias padrão no schema da sessão (não faz commit).

    Todas ficam marcadas como is_default e não podem ser alteradas/excluídas.
    """
    for name in DEFAULT_INCOME_CATEGORIES:
        session.add(IncomeCategory(name=name, is_default=True))
    for name in DEFAULT_EXPENSE_CATEGORIES:
        session.add(ExpenseCategory(name=name, is_default=True))
    for name, kind, color in DEFAULT_CATEGORIES:
        session.add(Category(name=name, kind=kind, color=color, is_default=True))
    session.flush()


def count_transactions_for_category(session: Session, kind: CategoryKind, category_id: int) -> int:
    return session.exec(
        select(func.count(Transaction.id)).where(
            Transaction.category_type == kind,
            Transaction.category_id == category_id,
        )
    ).one()
