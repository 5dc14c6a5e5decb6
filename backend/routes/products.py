# backend/routes/products.py
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from models.users import User
from services import catalog
import schemas.product as product_schemas

router = APIRouter(tags=["Products"])


# =========================
# LISTA PRODUKTÓW
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.list_products(db)


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.get_product(db, product_id)


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.create_product(db, payload.name, payload.quantity)


# =========================
# AKTUALIZACJA PRODUKTU
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.update_product(db, product_id, payload.name)


# =========================
# USUWANIE
# =========================
@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    catalog.delete_product(db, product_id)
    return {"message": "Product deleted successfully"}
