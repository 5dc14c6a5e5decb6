# backend/models/stock.py
from datetime import datetime

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text, CheckConstraint
from sqlalchemy.orm import relationship, declared_attr
from database import Base


# Shared columns of the two ledger tables
class _MovementColumns:
    id = Column(Integer, primary_key=True, index=True)

    @declared_attr
    def product_id(cls):
        return Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    @declared_attr
    def __table_args__(cls):
        return (CheckConstraint("quantity > 0", name=f"ck_{cls.__tablename__}_quantity_positive"),)

    quantity = Column(Integer, nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    notes = Column(Text, nullable=True)


# Stock received into the warehouse (adds to Product.quantity)
class StockIn(_MovementColumns, Base):
    __tablename__ = "stockin"
    movement_type = "IN"

    product = relationship("Product", back_populates="stock_ins")


# Stock issued from the warehouse (subtracts from Product.quantity)
class StockOut(_MovementColumns, Base):
    __tablename__ = "stockout"
    movement_type = "OUT"

    product = relationship("Product", back_populates="stock_outs")
