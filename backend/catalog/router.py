# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Catalog endpoints – products, categories and brands.

Reads are open to any authenticated caller; writes require an admin.
Products are never hard-deleted: ``deleted = True`` hides a product from
regular users while admins keep seeing it.

Listing follows the json-server conventions the storefront already speaks:
``_sort`` / ``_order`` / ``_page`` / ``_limit`` query parameters and the
unpaginated match count in the ``X-Total-Count`` response header.
"""

from typing import List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from database import get_db
from auth.guards import require_admin, require_auth
from auth.strategies import Identity
from models.catalog import Brand, Category, Product
from catalog.schemas import (
    OptionCreate,
    OptionResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)

products_router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(require_auth)])
categories_router = APIRouter(prefix="/categories", tags=["categories"], dependencies=[Depends(require_auth)])
brands_router = APIRouter(prefix="/brands", tags=["brands"], dependencies=[Depends(require_auth)])

_SORTABLE = {
    "id": Product.id,
    "title": Product.title,
    "price": Product.price,
    "discount_price": Product.discount_price,
    "rating": Product.rating,
    "stock": Product.stock,
    "created_at": Product.created_at,
}


def _csv(value: Optional[str]) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()] if value else []


# ---------------------------------------------------------------------------
# POST /products  – create a product (admin)
# ---------------------------------------------------------------------------


@products_router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if db.query(Product).filter(Product.title == body.title).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product title already exists")

    product = Product(**body.model_dump(), deleted=False)
    product.refresh_discount_price()
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


# ---------------------------------------------------------------------------
# GET /products  – filtered, sorted, paginated listing
# ---------------------------------------------------------------------------


@products_router.get("", response_model=List[ProductResponse])
def list_products(
    response: Response,
    category: Optional[str] = Query(None, description="Comma-separated category values"),
    brand: Optional[str] = Query(None, description="Comma-separated brand values"),
    sort: Optional[str] = Query(None, alias="_sort"),
    order: str = Query("asc", alias="_order", pattern="^(asc|desc)$"),
    page: Optional[int] = Query(None, alias="_page", ge=1),
    limit: Optional[int] = Query(None, alias="_limit", ge=1, le=100),
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    q = db.query(Product)
    if identity.role != "admin":
        q = q.filter(Product.deleted.is_(False))

    categories = _csv(category)
    if categories:
        q = q.filter(Product.category.in_(categories))
    brands = _csv(brand)
    if brands:
        q = q.filter(Product.brand.in_(brands))

    response.headers["X-Total-Count"] = str(q.count())

    if sort:
        column = _SORTABLE.get(sort)
        if column is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Cannot sort by '{sort}'")
        q = q.order_by(column.desc() if order == "desc" else column.asc())
    else:
        q = q.order_by(Product.id)

    if page and limit:
        q = q.offset((page - 1) * limit).limit(limit)
    elif limit:
        q = q.limit(limit)

    return q.all()


# ---------------------------------------------------------------------------
# GET /products/{id}
# ---------------------------------------------------------------------------


@products_router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product or (product.deleted and identity.role != "admin"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


# ---------------------------------------------------------------------------
# PATCH /products/{id}  – partial update (admin)
# ---------------------------------------------------------------------------


@products_router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    body: ProductUpdate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    # Explicit nulls mean "leave as is"; every product column is required
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if "title" in changes:
        clash = (
            db.query(Product)
            .filter(Product.title == changes["title"], Product.id != product_id)
            .first()
        )
        if clash:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product title already exists")

    for field, value in changes.items():
        setattr(product, field, value)
    product.refresh_discount_price()
    db.commit()
    db.refresh(product)
    return product


# ---------------------------------------------------------------------------
# Categories / brands – identical label/value option lists
# ---------------------------------------------------------------------------


def _list_options(model: Type, db: Session):
    return db.query(model).order_by(model.id).all()


def _create_option(model: Type, body: OptionCreate, db: Session):
    exists = (
        db.query(model)
        .filter((model.label == body.label) | (model.value == body.value))
        .first()
    )
    if exists:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"{model.__name__} already exists")
    option = model(label=body.label, value=body.value)
    db.add(option)
    db.commit()
    db.refresh(option)
    return option


@categories_router.get("", response_model=List[OptionResponse])
def list_categories(db: Session = Depends(get_db)):
    return _list_options(Category, db)


@categories_router.post("", response_model=OptionResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    body: OptionCreate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _create_option(Category, body, db)


@brands_router.get("", response_model=List[OptionResponse])
def list_brands(db: Session = Depends(get_db)):
    return _list_options(Brand, db)


@brands_router.post("", response_model=OptionResponse, status_code=status.HTTP_201_CREATED)
def create_brand(
    body: OptionCreate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _create_option(Brand, body, db)
