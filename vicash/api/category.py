import enum
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel as PydanticBaseModel, field_validator
from sqlmodel import Session, select

from vicash.auth.dependencies import get_current_user
from vicash.middleware.tenant import get_tenant_session
from vicash.model.base import utc_now
from vicash.model.category import Category, CategoryKind, category_model_for
from vicash.model.user import User
from vicash.services.category_service import count_transactions_for_category

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Category"])


def _validate_color(v: str | None) -> str | None:
    if v is None:
        return None
    stripped = v.strip()
    if not stripped:
        return None
    # Validar formato hexadecimal (#RRGGBB)
    if not stripped.startswith("#"):
        raise ValueError("Cor deve começar com #")
    hex_part = stripped[1:]
    if len(hex_part) != 6:
        raise ValueError("Cor deve ter 6 dígitos hexadecimais após o #")
    try:
        int(hex_part, 16)
    except ValueError:
        raise ValueError("Cor deve conter apenas caracteres hexadecimais válidos")
    return stripped.upper()


def _validate_required_name(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Campo não pode estar vazio")
    return v.strip()


# ============================================================================
# Categorias genéricas (tabela categories)
# ============================================================================

class CategoryCreate(PydanticBaseModel):
    name: str
    type: CategoryKind
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_required_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)


class CategoryUpdate(PydanticBaseModel):
    name: str | None = None
    type: CategoryKind | None = None
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _validate_required_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)


class CategoryResponse(PydanticBaseModel):
    id: int
    name: str
    type: CategoryKind
    color: str
    is_default: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            type=category.kind,
            color=category.color,
            is_default=category.is_default,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


def _get_category_or_404(session: Session, category_id: int) -> Category:
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    """Lista as categorias genéricas do tenant, ordenadas por nome."""
    items = session.exec(select(Category).order_by(Category.name, Category.id)).all()
    return [CategoryResponse.from_model(c) for c in items]


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    body: CategoryCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    category = Category(name=body.name, kind=body.type, color=body.color or "#FFD700", is_default=False)
    session.add(category)
    session.commit()
    session.refresh(category)
    logger.info(f"Categoria criada: id={category.id} kind={category.kind.value}")
    return CategoryResponse.from_model(category)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    """Atualiza uma categoria criada pelo usuário (categorias padrão são imutáveis)."""
    category = _get_category_or_404(session, category_id)
    if category.is_default:
        raise HTTPException(status_code=400, detail="Default categories cannot be modified")

    if body.name is not None:
        category.name = body.name
    if body.type is not None:
        category.kind = body.type
    if body.color is not None:
        category.color = body.color
    category.updated_at = utc_now()

    session.add(category)
    session.commit()
    session.refresh(category)
    return CategoryResponse.from_model(category)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    category = _get_category_or_404(session, category_id)
    if category.is_default:
        raise HTTPException(status_code=400, detail="Default categories cannot be deleted")

    session.delete(category)
    session.commit()
    logger.info(f"Categoria excluída: id={category_id}")
    return Response(status_code=204)


# ============================================================================
# Categorias por tipo (tabelas categorias_ingresos / categorias_egresos)
# ============================================================================

class KindSlug(str, enum.Enum):
    INGRESOS = "ingresos"
    EGRESOS = "egresos"

    @property
    def kind(self) -> CategoryKind:
        return CategoryKind.INCOME if self is KindSlug.INGRESOS else CategoryKind.EXPENSE


class KindCategoryCreate(PydanticBaseModel):
    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_required_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class KindCategoryUpdate(PydanticBaseModel):
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _validate_required_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class KindCategoryResponse(PydanticBaseModel):
    id: int
    name: str
    description: str | None
    is_default: bool
    type: CategoryKind
    created_at: datetime

    @classmethod
    def from_model(cls, category, kind: CategoryKind) -> "KindCategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            is_default=category.is_default,
            type=kind,
            created_at=category.created_at,
        )


@router.get("/categorias/{kind_slug}", response_model=list[KindCategoryResponse])
def list_kind_categories(
    kind_slug: KindSlug,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    """Lista categorias de ingresos ou egresos do tenant."""
    model = category_model_for(kind_slug.kind)
    items = session.exec(select(model).order_by(model.name, model.id)).all()
    return [KindCategoryResponse.from_model(c, kind_slug.kind) for c in items]


@router.post("/categorias/{kind_slug}", response_model=KindCategoryResponse, status_code=201)
def create_kind_category(
    kind_slug: KindSlug,
    body: KindCategoryCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    model = category_model_for(kind_slug.kind)
    category = model(name=body.name, description=body.description, is_default=False)
    session.add(category)
    session.commit()
    session.refresh(category)
    logger.info(f"Categoria de {kind_slug.value} criada: id={category.id}")
    return KindCategoryResponse.from_model(category, kind_slug.kind)


@router.put("/categorias/{kind_slug}/{category_id}", response_model=KindCategoryResponse)
def update_kind_category(
    kind_slug: KindSlug,
    category_id: int,
    body: KindCategoryUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    model = category_model_for(kind_slug.kind)
    category = session.get(model, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    if category.is_default:
        raise HTTPException(status_code=400, detail="Default categories cannot be modified")

    if body.name is not None:
        category.name = body.name
    if "description" in body.model_fields_set:
        category.description = body.description
    category.updated_at = utc_now()

    session.add(category)
    session.commit()
    session.refresh(category)
    return KindCategoryResponse.from_model(category, kind_slug.kind)


@router.delete("/categorias/{kind_slug}/{category_id}", status_code=204)
def delete_kind_category(
    kind_slug: KindSlug,
    category_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_tenant_session),
):
    """
    Exclui uma categoria criada pelo usuário.
    Categorias padrão e categorias com transações associadas não podem ser excluídas.
    """
    model = category_model_for(kind_slug.kind)
    category = session.get(model, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    if category.is_default:
        raise HTTPException(status_code=400, detail="Default categories cannot be deleted")

    in_use = count_transactions_for_category(session, kind_slug.kind, category_id)
    if in_use > 0:
        logger.warning(f"Categoria {category_id} ({kind_slug.value}) em uso por {in_use} transação(ões)")
        raise HTTPException(
            status_code=409,
            detail=f"Category is used by {in_use} transaction(s)",
        )

    session.delete(category)
    session.commit()
    logger.info(f"Categoria de {kind_slug.value} excluída: id={category_id}")
    return Response(status_code=204)
