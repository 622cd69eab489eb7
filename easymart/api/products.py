import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from ..database import get_session
from ..models import Product, ProductIn, serialize_product, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


# Low stock listing; declared ahead of the /{product_id} routes
@router.get("/inventory/low-stock", response_model=List[Dict[str, Any]])
def get_low_stock_products(session: Session = Depends(get_session)):
    products = session.exec(
        select(Product)
        .where(Product.stock_quantity <= Product.reorder_level)
        .order_by(Product.stock_quantity.asc())
    ).all()
    return [serialize_product(product) for product in products]


@router.get("", response_model=List[Dict[str, Any]])
def get_products(session: Session = Depends(get_session)):
    products = session.exec(select(Product).order_by(Product.name.asc())).all()
    return [serialize_product(product) for product in products]


@router.get("/{product_id}", response_model=Dict[str, Any])
def get_product(product_id: str, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return serialize_product(product)


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def create_product(product_data: ProductIn, session: Session = Depends(get_session)):
    if not product_data.name or not product_data.sku or product_data.price is None:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: name, sku, price"
        )

    values = product_data.model_dump(exclude_none=True)
    product = Product(**values)

    session.add(product)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    session.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.sku)
    return serialize_product(product)


@router.put("/{product_id}", response_model=Dict[str, Any])
def update_product(
    product_id: str,
    product_data: ProductIn,
    session: Session = Depends(get_session)
):
    db_product = session.get(Product, product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")

    # Partial update: fields left out of the body keep their stored value
    product_data_dict = product_data.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in product_data_dict.items():
        setattr(db_product, key, value)
    db_product.updated_at = utc_now()

    session.add(db_product)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    session.refresh(db_product)
    return serialize_product(db_product)


@router.delete("/{product_id}", response_model=Dict[str, Any])
def delete_product(product_id: str, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    session.delete(product)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    return {"message": "Product deleted successfully", "id": product_id}
