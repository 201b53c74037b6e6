import os
import tempfile

# settings are read at import time , point them at a throwaway sqlite file first
_tmp_dir = tempfile.mkdtemp(prefix="nexora-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'nexora-test.db')}"
os.environ["JWT_SECRET"] = "test-secret-not-for-prod"
os.environ["JWT_ALGO"] = "HS256"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["ENABLE_METRICS"] = "false"
os.environ["ENV"] = "dev"

import pytest
from asgi_lifespan import LifespanManager
from httpx import AsyncClient, ASGITransport
from jose import jwt
from nexora.db.connection import async_session
from nexora.db.schema import create_tables, drop_tables
from nexora.main import app

url_prefix = "/api/v1"


def make_token(sub: str, roles=None) -> str:
    return jwt.encode({"sub": sub, "roles": list(roles or [])}, os.environ["JWT_SECRET"], algorithm="HS256")


def bearer(sub: str, roles=None):
    return {"Authorization": f"Bearer {make_token(sub, roles)}"}


@pytest.fixture(autouse=True)
async def fresh_db():
    await drop_tables()
    await create_tables()
    yield


@pytest.fixture
async def db_session():

    async with async_session() as session:
        yield session


@pytest.fixture
async def ac_client():
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac


@pytest.fixture
def seller_headers():
    return bearer("user-seller-1")


@pytest.fixture
def admin_headers():
    return bearer("user-admin-1", ["admin"])


@pytest.fixture
def service_headers():
    return bearer("svc-orders", ["service"])


@pytest.fixture
def onboard_payload():
    return {
        "shop_name": "Saffron Sweets",
        "business_type": "local",
        "shop_description": "Handmade mithai",
        "cod_enabled": True,
    }


@pytest.fixture
async def onboarded_seller(ac_client, seller_headers, onboard_payload):
    resp = await ac_client.post(f"{url_prefix}/sellers", json=onboard_payload, headers=seller_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["seller"]
