# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Order endpoints.

* Any authenticated user can place an order and list their own.
* The full order book (``GET /orders``) and status changes are admin only.
* Placing an order takes the ordered quantities out of product stock in the
  same transaction that stores the order.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from database import get_db
from auth.guards import require_admin, require_auth
from auth.strategies import Identity
from core.logger import logger
from models.catalog import Product
from models.order import Order
from orders.schemas import OrderCreate, OrderResponse, OrderUpdate

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(require_auth)])

_SORTABLE = {
    "id": Order.id,
    "total_amount": Order.total_amount,
    "status": Order.status,
    "created_at": Order.created_at,
}


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    for line in body.items:
        product = db.query(Product).filter(Product.id == line.product_id).first()
        if not product:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Product {line.product_id} not found",
            )
        product.stock = product.stock - line.quantity

    order = Order(
        user_id=identity.id,
        items=[line.model_dump() for line in body.items],
        total_amount=body.total_amount,
        total_items=body.total_items,
        payment_method=body.payment_method,
        payment_status="pending",
        status="pending",
        selected_address=body.selected_address.model_dump(),
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order id=%d placed by user id=%d", order.id, identity.id)
    return order


@router.get("/own", response_model=List[OrderResponse])
def fetch_own_orders(
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return (
        db.query(Order)
        .filter(Order.user_id == identity.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


@router.get("", response_model=List[OrderResponse])
def fetch_all_orders(
    response: Response,
    sort: Optional[str] = Query(None, alias="_sort"),
    order: str = Query("asc", alias="_order", pattern="^(asc|desc)$"),
    page: Optional[int] = Query(None, alias="_page", ge=1),
    limit: Optional[int] = Query(None, alias="_limit", ge=1, le=100),
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Order)
    response.headers["X-Total-Count"] = str(q.count())

    if sort:
        column = _SORTABLE.get(sort)
        if column is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Cannot sort by '{sort}'")
        q = q.order_by(column.desc() if order == "desc" else column.asc())
    else:
        q = q.order_by(Order.id)

    if page and limit:
        q = q.offset((page - 1) * limit).limit(limit)
    elif limit:
        q = q.limit(limit)
    return q.all()


@router.patch("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    body: OrderUpdate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(order, field, value)
    db.commit()
    db.refresh(order)
    return order


@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if order.user_id != identity.id and identity.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    db.delete(order)
    db.commit()
    return {"detail": "Order deleted", "id": order_id}
