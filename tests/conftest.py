import base64

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from api import create_app
from config import Settings


def basic_auth(login, password):
    token = base64.b64encode(f"{login}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'census.db'}")
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "P4ssword")
    monkeypatch.setenv("DB_SSL", "false")
    monkeypatch.setenv("DB_POOL_SIZE", "0")
    return Settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth():
    return basic_auth("admin", "P4ssword")


@pytest.fixture
def nested_payload():
    return {
        "participant": {
            "email": "A@B.com ",
            "firstname": "Jo",
            "lastname": "Doe",
            "dob": "1990-05-10",
        },
        "work": {"companyname": "Acme", "salary": 50000, "currency": "USD"},
        "home": {"country": "NO", "city": "Oslo"},
    }


@pytest.fixture
def fetch_row(app, client):
    """DB 행 직접 조회 (soft delete 확인용)"""
    def _fetch(model, **filters):
        async def query():
            async with app.state.db.session() as session:
                result = await session.execute(select(model).filter_by(**filters))
                return result.scalar_one_or_none()
        return client.portal.call(query)
    return _fetch
