# backend/models/users.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from database import Base

# Represents a user account allowed to operate the stock tracker
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime, nullable=False, default=datetime.now)
