# backend/schemas/product.py
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Schema for creating a new product; the code is allocated by the server
class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    quantity: Optional[int] = Field(default=0, ge=0, description="Initial quantity")


# Only the name can be edited; quantity follows the stock ledger
class ProductUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


# Full product representation
class ProductOut(ORMBase):
    id: int
    code: str
    name: str
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
