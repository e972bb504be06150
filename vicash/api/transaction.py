import logging
from collections import defaultdict
from datetime import date as date_type, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel as PydanticBaseModel, field_validator
from sqlmodel import Session, select

from vicash.auth.dependencies import get_current_user
from vicash.middleware.tenant import get_tenant_session
from vicash.model.base import utc_now
from vicash.model.category import CategoryKind, ExpenseCategory, IncomeCategory, category_model_for
from vicash.model.transaction import Transaction
from vicash.model.user import User
from vicash.services.category_service import KIND_COLORS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Transaction"])

_CENT = Decimal("0.01")
# Numeric(12, 2): magnitude máxima armazenável é 9999999999.99
_AMOUNT_LIMIT = Decimal("1e10")
UNKNOWN_CATEGORY_NAME = "Desconocido"


def signed_amount(amount: Decimal, kind: CategoryKind) -> Decimal:
    """
    Convenção única de sinal: ingresso positivo, egresso negativo.

    O cliente pode enviar o valor com qualquer sinal; só a magnitude é usada.
    O valor já chega validado e arredondado a centavos por TransactionWrite.
    """
    magnitude = abs(Decimal(amount))
    return magnitude if kind == CategoryKind.INCOME else -magnitude


class TransactionWrite(PydanticBaseModel):
    amount: Decimal
    date: date_type
    category_id: int
    type: CategoryKind
    description: str | None = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("amount inválido")
        if abs(v) >= _AMOUNT_LIMIT:
            raise ValueError("amount fora do intervalo permitido")
        # Valida já arredondado a centavos: é esse o valor que vai para o banco
        v = v.quantize(_CENT, rounding=ROUND_HALF_UP)
        if v == 0:
            raise ValueError("amount deve ser diferente de zero")
        if abs(v) >= _AMOUNT_LIMIT:
            raise ValueError("amount fora do intervalo permitido")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class TransactionResponse(PydanticBaseModel):
    id: int
    amount: Decimal
    description: str | None
    date: date_type
    category_id: int
    category_type: CategoryKind
    category_name: str
    category_color: str
    created_at: datetime
    updated_at: datetime


def _category_names(session: Session, transactions: list[Transaction]) -> dict[tuple[CategoryKind, int], str]:
    """Nomes das categorias referenciadas, buscados em lote por tabela."""
    ids_by_kind: dict[CategoryKind, set[int]] = defaultdict(set)
    for t in transactions:
        ids_by_kind[t.category_type].add(t.category_id)

    names: dict[tuple[CategoryKind, int], str] = {}
    for kind, ids in ids_by_kind.items():
        model = category_model_for(kind)
        for category_id, name in session.exec(select(model.id, model.name).where(model.id.in_(ids))).all():
            names[(kind, category_id)] = name
    return names


def _to_response(t: Transaction, category_name: str) -> TransactionResponse:
    return TransactionResponse(
        id=t.id,
        amount=t.amount,
        description=t.description,
        date=t.date,
        category_id=t.category_id,
        category_type=t.category_type,
        category_name=category_name,
        category_color=KIND_COLORS[t.category_type],
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


def _get_category_for_write(session: Session, body: TransactionWrite) -> IncomeCategory | ExpenseCategory:
    """
    A categoria precisa existir na tabela do mesmo tipo da transação
    (income → categorias_ingresos, expense → categorias_egresos).
    """
    category = session.get(category_model_for(body.type), body.category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


def _filtered_query(
    type: CategoryKind | None,
    date_from: date_type | None,
    date_to: date_type | None,
):
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="date_from must be before date_to")
    query = select(Transaction)
    if type is not None:
        query = query.where(Transaction.category_type == type)
    if date_from is not None:
        query = query.where(Transaction.date >= date_from)
    if date_to is not None:
        query = query.where(Transaction.date <= date_to)
    return query


@router.get("/transactions", response_model=list[TransactionResponse])
def list_transactions(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
    type: Optional[CategoryKind] = Query(None, description="Filtrar por tipo (income/expense)"),
    date_from: Optional[date_type] = Query(None, description="Data inicial (inclusive)"),
    date_to: Optional[date_type] = Query(None, description="Data final (inclusive)"),
):
    """Lista as transações do tenant, mais recentes primeiro."""
    query = _filtered_query(type, date_from, date_to)
    items = session.exec(query.order_by(Transaction.date.desc(), Transaction.id.desc())).all()
    names = _category_names(session, items)
    return [
        _to_response(t, names.get((t.category_type, t.category_id), UNKNOWN_CATEGORY_NAME))
        for t in items
    ]


class MonthSummary(PydanticBaseModel):
    month: str
    income: Decimal
    expense: Decimal


class CategorySummary(PydanticBaseModel):
    category_id: int
    category_name: str
    type: CategoryKind
    total: Decimal


class TransactionSummary(PydanticBaseModel):
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    count: int
    by_month: list[MonthSummary]
    by_category: list[CategorySummary]


@router.get("/transactions/summary", response_model=TransactionSummary)
def summarize_transactions(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
    type: Optional[CategoryKind] = Query(None, description="Filtrar por tipo (income/expense)"),
    date_from: Optional[date_type] = Query(None, description="Data inicial (inclusive)"),
    date_to: Optional[date_type] = Query(None, description="Data final (inclusive)"),
):
    """
    Totais para o dashboard: ingressos, egressos (em magnitude positiva),
    saldo, série mensal (YYYY-MM) e totais por categoria.
    """
    query = _filtered_query(type, date_from, date_to)
    items = session.exec(query).all()
    names = _category_names(session, items)

    total_income = Decimal("0")
    total_expense = Decimal("0")
    months: dict[str, dict[CategoryKind, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
    categories: dict[tuple[CategoryKind, int], Decimal] = defaultdict(Decimal)

    for t in items:
        magnitude = abs(Decimal(t.amount))
        if t.category_type == CategoryKind.INCOME:
            total_income += magnitude
        else:
            total_expense += magnitude
        months[t.date.strftime("%Y-%m")][t.category_type] += magnitude
        categories[(t.category_type, t.category_id)] += magnitude

    by_month = [
        MonthSummary(
            month=month,
            income=totals[CategoryKind.INCOME].quantize(_CENT),
            expense=totals[CategoryKind.EXPENSE].quantize(_CENT),
        )
        for month, totals in sorted(months.items())
    ]
    by_category = sorted(
        (
            CategorySummary(
                category_id=category_id,
                category_name=names.get((kind, category_id), UNKNOWN_CATEGORY_NAME),
                type=kind,
                total=total.quantize(_CENT),
            )
            for (kind, category_id), total in categories.items()
        ),
        key=lambda c: (c.type.value, -c.total, c.category_name),
    )

    return TransactionSummary(
        total_income=total_income.quantize(_CENT),
        total_expense=total_expense.quantize(_CENT),
        balance=(total_income - total_expense).quantize(_CENT),
        count=len(items),
        by_month=by_month,
        by_category=by_category,
    )


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    transaction = session.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    names = _category_names(session, [transaction])
    return _to_response(transaction, names.get((transaction.category_type, transaction.category_id), UNKNOWN_CATEGORY_NAME))


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    body: TransactionWrite,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    """
    Cria uma transação. O valor é armazenado com o sinal do tipo
    (egresso negativo) e a categoria é validada na tabela do tipo.
    """
    category = _get_category_for_write(session, body)

    transaction = Transaction(
        amount=signed_amount(body.amount, body.type),
        description=body.description,
        date=body.date,
        category_id=category.id,
        category_type=body.type,
    )
    session.add(transaction)
    session.commit()
    session.refresh(transaction)
    logger.info(f"Transação criada: id={transaction.id} type={body.type.value}")
    return _to_response(transaction, category.name)


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    body: TransactionWrite,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    transaction = session.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    category = _get_category_for_write(session, body)

    transaction.amount = signed_amount(body.amount, body.type)
    transaction.description = body.description
    transaction.date = body.date
    transaction.category_id = category.id
    transaction.category_type = body.type
    transaction.updated_at = utc_now()

    session.add(transaction)
    session.commit()
    session.refresh(transaction)
    return _to_response(transaction, category.name)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    transaction = session.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    session.delete(transaction)
    session.commit()
    logger.info(f"Transação excluída: id={transaction_id}")
    return Response(status_code=204)
