import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from assetledger.main import app
from assetledger.database import Base, get_db

TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def client():
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Ensure all connections share same in-memory DB
    )
    Base.metadata.create_all(engine)
    TestSession = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
    Base.metadata.drop_all(engine)


@pytest.fixture
def employee(client):
    def _make(code: str, name: str = "Alice Novak") -> dict:
        r = client.post("/api/employees", json={"employee_code": code, "name": name})
        assert r.status_code == 201
        return r.json()
    return _make


@pytest.fixture
def asset(client):
    def _make(tag: str, assigned_to: int | None = None, **kw) -> dict:
        payload = {"asset_tag": tag, "serial_number": f"SN-{tag}", "make": "Dell", "model": "Latitude", **kw}
        if assigned_to is not None:
            payload["assigned_to"] = assigned_to
        r = client.post("/api/assets", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["asset"]
    return _make
