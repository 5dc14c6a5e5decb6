# backend/models/sequence.py
from sqlalchemy import Column, Integer, String
from database import Base

# Named counter used to hand out product codes (P0001, P0002, ...).
# The row is locked and bumped in the same transaction that inserts the product.
class CodeSequence(Base):
    __tablename__ = "code_sequences"

    name = Column(String(50), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
