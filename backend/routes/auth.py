# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user
from models import users as models
from schemas import user as schemas
from database import get_db, unit_of_work
from services.errors import ConflictOnAllocation

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)

# Register a new user
@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, db: Session = Depends(get_db)):
    username = user.username.strip()
    email = user.email.strip().lower()

    # Check for existing user
    exists = db.query(models.User).filter(
        or_(models.User.username == username, func.lower(models.User.email) == email)
    ).first()
    if exists:
        logger.info("Registration refused for %s: username or email taken", username)
        raise ConflictOnAllocation("Username or email already exists")

    # Unique constraints still guard against a concurrent registration
    try:
        with unit_of_work(db):
            new_user = models.User(username=username, email=email, password_hash=get_password_hash(user.password))
            db.add(new_user)
    except ConflictOnAllocation:
        raise ConflictOnAllocation("Username or email already exists")

    db.refresh(new_user)
    logger.info("User %s registered", new_user.username)
    return new_user


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(models.User).filter(models.User.username == payload.username).first()

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        logger.info("Failed login for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": db_user.username, "role": db_user.role})
    logger.info("User %s logged in", db_user.username)

    return {"access_token": access_token, "token_type": "bearer", "user": schemas.UserResponse.model_validate(db_user)}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
