import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from database import Base, get_db
from main import app


@pytest.fixture()
def session_local():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield session_local
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_local):
    session = session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_local):
    def override_get_db():
        session = session_local()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client):
    register_res = client.post(
        "/api/register",
        json={"username": "keeper", "email": "keeper@example.com", "password": "password123"},
    )
    assert register_res.status_code == 201, register_res.text

    login_res = client.post("/api/login", json={"username": "keeper", "password": "password123"})
    assert login_res.status_code == 200, login_res.text
    return {"Authorization": f"Bearer {login_res.json()['access_token']}"}


@pytest.fixture()
def file_session_local(tmp_path):
    # Separate connections per thread, so SQLite's own locking is in play
    engine = create_engine(
        f"sqlite:///{tmp_path / 'stock.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield session_local
    engine.dispose()
