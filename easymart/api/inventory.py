import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from ..database import get_session
from ..models import (
    InventoryMovement,
    MovementType,
    Product,
    StockChange,
    serialize_product,
    utc_now,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/levels", response_model=List[Dict[str, Any]])
def get_inventory_levels(session: Session = Depends(get_session)):
    products = session.exec(select(Product).order_by(Product.name.asc())).all()
    return [
        {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "stock_quantity": product.stock_quantity,
            "reorder_level": product.reorder_level,
            "price": product.price,
            "cost_price": product.cost_price,
            "stock_status": product.stock_status.value,
        }
        for product in products
    ]


@router.get("/alerts", response_model=List[Dict[str, Any]])
def get_inventory_alerts(session: Session = Depends(get_session)):
    products = session.exec(
        select(Product)
        .where(Product.stock_quantity <= Product.reorder_level)
        .order_by(Product.stock_quantity.asc())
    ).all()
    return [
        {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "stock_quantity": product.stock_quantity,
            "reorder_level": product.reorder_level,
            "stock_status": product.stock_status.value,
        }
        for product in products
    ]


@router.get("/movements", response_model=List[Dict[str, Any]])
def get_inventory_movements(
    product_id: Optional[str] = None,
    limit: int = 100,
    session: Session = Depends(get_session)
):
    query = select(
        InventoryMovement,
        Product
    ).join(
        Product,
        InventoryMovement.product_id == Product.id
    ).order_by(
        InventoryMovement.created_at.desc()
    )

    if product_id:
        query = query.where(InventoryMovement.product_id == product_id)

    results = session.exec(query.limit(limit)).all()

    response = []
    for movement, product in results:
        response.append({
            "id": movement.id,
            "product_id": movement.product_id,
            "movement_type": movement.movement_type.value,
            "quantity": movement.quantity,
            "reference_type": movement.reference_type,
            "reference_id": movement.reference_id,
            "notes": movement.notes,
            "created_at": movement.created_at,
            "name": product.name,
            "sku": product.sku,
        })

    return response


def apply_stock_change(
    session: Session,
    product: Product,
    quantity: int,
    movement_type: MovementType,
    notes: Optional[str] = None
) -> Product:
    """Add a signed quantity to a product's stock and log the movement.

    No floor or ceiling is applied; an adjustment may leave stock negative.
    """
    product.stock_quantity = product.stock_quantity + quantity
    product.updated_at = utc_now()
    session.add(product)

    session.add(InventoryMovement(
        product_id=product.id,
        movement_type=movement_type,
        quantity=quantity,
        notes=notes,
    ))

    try:
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    session.refresh(product)
    logger.info(
        "%s of %+d on product %s, stock now %d",
        movement_type.value, quantity, product.id, product.stock_quantity
    )
    return product


@router.post("/restock", response_model=Dict[str, Any])
def restock_product(change: StockChange, session: Session = Depends(get_session)):
    if not change.product_id or not change.quantity:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: product_id, quantity"
        )

    product = session.get(Product, change.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product = apply_stock_change(
        session, product, change.quantity, MovementType.RESTOCK, change.notes
    )
    return serialize_product(product)


@router.post("/adjust", response_model=Dict[str, Any])
def adjust_stock(change: StockChange, session: Session = Depends(get_session)):
    if not change.product_id or change.quantity is None:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: product_id, quantity"
        )

    product = session.get(Product, change.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product = apply_stock_change(
        session,
        product,
        change.quantity,
        MovementType.ADJUSTMENT,
        change.notes or change.reason,
    )
    return serialize_product(product)
