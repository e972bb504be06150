import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from vicash.db import session as db_session


@pytest.fixture()
def engine(monkeypatch):
    """
    Engine SQLite em memória com uma única conexão (StaticPool).

    Cada schema de tenant vira um banco anexado a essa conexão, então o
    estado vive enquanto o engine do teste existir.
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    monkeypatch.setattr(db_session, "engine", test_engine)
    db_session.create_catalog_tables()
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def client(engine):
    from vicash.main import app

    with TestClient(app) as c:
        yield c


def register(client, name="Acme", email="a@acme.com", password="secret1", **extra):
    """Registra um tenant e devolve (resposta, headers prontos para /api)."""
    body = {"name": name, "email": email, "password": password, **extra}
    r = client.post("/auth/register", json=body)
    headers = {}
    if r.status_code == 201:
        data = r.json()
        headers = {
            "Authorization": f"Bearer {data['token']}",
            "x-tenant-id": str(data["tenant_id"]),
        }
    return r, headers


@pytest.fixture()
def acme(client):
    r, headers = register(client)
    assert r.status_code == 201, r.text
    return headers


def find_kind_category(client, headers, kind_slug: str, name: str) -> dict:
    r = client.get(f"/api/categorias/{kind_slug}", headers=headers)
    assert r.status_code == 200, r.text
    matches = [c for c in r.json() if c["name"] == name]
    assert matches, f"categoria {name!r} não encontrada em {kind_slug}"
    return matches[0]
