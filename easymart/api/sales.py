import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select, func

from ..database import get_session
from ..models import (
    InventoryMovement,
    MovementType,
    Product,
    Sale,
    SaleCreate,
    SaleItem,
    serialize_sale,
    utc_now,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _sales_with_item_count():
    return select(
        Sale,
        func.count(SaleItem.id)
    ).join(
        SaleItem,
        SaleItem.sale_id == Sale.id,
        isouter=True
    ).group_by(
        Sale.id
    )


# Declared ahead of /{sale_id}
@router.get("/summary/daily", response_model=List[Dict[str, Any]])
def get_daily_summary(session: Session = Depends(get_session)):
    day = func.date(Sale.created_at).label("date")
    results = session.exec(
        select(
            day,
            func.count(Sale.id),
            func.sum(Sale.total_amount)
        ).group_by(day).order_by(day.desc()).limit(30)
    ).all()

    return [
        {"date": date, "transaction_count": count, "total_sales": total}
        for date, count, total in results
    ]


@router.get("", response_model=List[Dict[str, Any]])
def get_sales(session: Session = Depends(get_session)):
    results = session.exec(
        _sales_with_item_count().order_by(Sale.created_at.desc())
    ).all()
    return [serialize_sale(sale, item_count) for sale, item_count in results]


@router.get("/{sale_id}", response_model=Dict[str, Any])
def get_sale(sale_id: str, session: Session = Depends(get_session)):
    sale = session.get(Sale, sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")

    results = session.exec(
        select(
            SaleItem,
            Product
        ).join(
            Product,
            SaleItem.product_id == Product.id
        ).where(
            SaleItem.sale_id == sale_id
        )
    ).all()

    items = []
    for item, product in results:
        line = item.model_dump()
        line["name"] = product.name
        line["sku"] = product.sku
        items.append(line)

    response = serialize_sale(sale, len(items))
    response["items"] = items
    return response


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def create_sale(sale_data: SaleCreate, session: Session = Depends(get_session)):
    """Record a sale with its line items and stock movements.

    Every product is checked before anything is written. The writes
    themselves are committed line by line with no enclosing transaction and
    no stock floor, so a store failure midway leaves the lines written so
    far in place and concurrent sales may push stock below zero.
    """
    if not sale_data.items:
        raise HTTPException(status_code=400, detail="Sale must have at least one item")

    total_amount = 0.0
    for item in sale_data.items:
        product = session.get(Product, item.product_id)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product {item.product_id} not found")
        total_amount += item.quantity * item.unit_price

    sale = Sale(
        customer_id=sale_data.customer_id,
        cashier_id=sale_data.cashier_id,
        total_amount=total_amount,
        payment_method=sale_data.payment_method,
    )

    sale_id = sale.id
    try:
        session.add(sale)
        session.commit()
        session.refresh(sale)

        for item in sale_data.items:
            session.add(SaleItem(
                sale_id=sale.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.quantity * item.unit_price,
            ))
            session.add(InventoryMovement(
                product_id=item.product_id,
                movement_type=MovementType.SALE,
                quantity=-item.quantity,
                reference_type="sale",
                reference_id=sale.id,
            ))

            product = session.get(Product, item.product_id)
            product.stock_quantity = product.stock_quantity - item.quantity
            product.updated_at = utc_now()
            session.add(product)
            session.commit()
    except Exception as e:
        session.rollback()
        logger.error("Error creating sale %s: %s", sale_id, e)
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    session.refresh(sale)
    logger.info("Sale %s recorded: %d item(s), total %.2f", sale_id, len(sale_data.items), total_amount)
    return serialize_sale(sale, len(sale_data.items))
