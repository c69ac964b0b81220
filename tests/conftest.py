import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from assetledger.database import Base
from assetledger.models.asset import Asset
from assetledger.models.consumable import Consumable
from assetledger.models.employee import Employee
from assetledger.schemas.asset import AssetCreate
from assetledger.schemas.consumable import ConsumableCreate
from assetledger.schemas.employee import EmployeeCreate
import assetledger.services.asset_service as asset_svc
import assetledger.services.consumable_service as consumable_svc
import assetledger.services.employee_service as employee_svc


TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db():
    engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def make_employee(db):
    counter = iter(range(1, 1000))

    def _make(name: str = "Alice Novak", **kw) -> Employee:
        n = next(counter)
        return employee_svc.create_employee(db, EmployeeCreate(
            employee_code=kw.pop("employee_code", f"EMP-{n:03d}"), name=name, **kw,
        ))
    return _make


@pytest.fixture
def make_asset(db):
    counter = iter(range(1, 1000))

    def _make(assigned_to: int | None = None, **kw) -> Asset:
        n = next(counter)
        data = AssetCreate(
            asset_tag=kw.pop("asset_tag", f"TAG-{n:03d}"),
            serial_number=kw.pop("serial_number", f"SN-{n:03d}"),
            make=kw.pop("make", "Dell"),
            model=kw.pop("model", "Latitude"),
            assigned_to=assigned_to,
            **kw,
        )
        return asset_svc.create_asset(db, data)["asset"]
    return _make


@pytest.fixture
def make_consumable(db):
    def _make(quantity: int = 10, name: str = "USB mouse") -> Consumable:
        return consumable_svc.create_consumable(db, ConsumableCreate(name=name, quantity=quantity))
    return _make
