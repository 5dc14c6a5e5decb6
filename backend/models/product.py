# backend/models/product.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from database import Base

# Model Product
# A catalog entry with its cached on-hand quantity.
# `quantity` is maintained by services.inventory from the stock-in/stock-out
# ledger; catalog edits only touch `name`.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)

    # Signed on purpose: deleting an old stock-in may push it below zero.
    quantity = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    # Movements go away with the product (ON DELETE CASCADE in the database).
    stock_ins = relationship(
        "StockIn", back_populates="product",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    stock_outs = relationship(
        "StockOut", back_populates="product",
        cascade="all, delete-orphan", passive_deletes=True,
    )
