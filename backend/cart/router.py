# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Cart endpoints – the authenticated user's shopping cart.

Every item operation first calls ``_own_item``, which loads the row and
asserts that ``item.user_id == identity.id``.  Guessing another user's item
ID gets a 403.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from auth.guards import require_auth
from auth.strategies import Identity
from models.cart import CartItem
from models.catalog import Product
from cart.schemas import CartItemCreate, CartItemResponse, CartItemUpdate

router = APIRouter(prefix="/cart", tags=["cart"], dependencies=[Depends(require_auth)])


def _own_item(item_id: int, user_id: int, db: Session) -> CartItem:
    """
    Load a CartItem by ID and verify it belongs to *user_id*.

    Raises 404 if the item does not exist, 403 if it belongs to someone else.
    """
    item = db.query(CartItem).filter(CartItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    if item.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return item


@router.get("", response_model=List[CartItemResponse])
def fetch_cart(
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == identity.id)
        .order_by(CartItem.id)
        .all()
    )


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    body: CartItemCreate,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    product = db.query(Product).filter(Product.id == body.product_id, Product.deleted.is_(False)).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    item = CartItem(user_id=identity.id, **body.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{item_id}", response_model=CartItemResponse)
def update_cart_item(
    item_id: int,
    body: CartItemUpdate,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    item = _own_item(item_id, identity.id, db)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}")
def delete_cart_item(
    item_id: int,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    item = _own_item(item_id, identity.id, db)
    db.delete(item)
    db.commit()
    return {"detail": "Item removed", "id": item_id}
