"""Seed script: fills the DB with sample employees, assets, consumables and licenses."""
import os
import sys

# Ensure we're in the project root
sys.path.insert(0, os.path.dirname(__file__))

from datetime import date

from assetledger.database import Base, engine, SessionLocal
import assetledger.models  # noqa: F401 - register all models
from assetledger.models.asset import Asset
from assetledger.models.consumable import Consumable
from assetledger.models.employee import Employee
from assetledger.models.software import Software
from assetledger.schemas.asset import AssetCreate
from assetledger.schemas.consumable import ConsumableCreate
from assetledger.schemas.employee import EmployeeCreate
from assetledger.schemas.software import SoftwareCreate
import assetledger.services.asset_service as asset_svc
import assetledger.services.cascade_service as cascade_svc
import assetledger.services.consumable_service as consumable_svc
import assetledger.services.employee_service as employee_svc
import assetledger.services.software_service as software_svc


def seed():
    os.makedirs("data", exist_ok=True)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        employees_data = [
            ("EMP-001", "Alice Novak", "IT", "System Administrator", date(2021, 3, 1)),
            ("EMP-002", "Bob Svoboda", "Finance", "Accountant", date(2022, 7, 15)),
            ("EMP-003", "Carla Dvorak", "Sales", "Account Manager", date(2023, 1, 9)),
            ("EMP-004", "Dan Cerny", "IT", "Developer", date(2023, 10, 2)),
        ]
        existing_codes = {e.employee_code for e in db.query(Employee).all()}
        for code, name, department, designation, joined in employees_data:
            if code not in existing_codes:
                employee_svc.create_employee(db, EmployeeCreate(
                    employee_code=code, name=name, department=department,
                    designation=designation, joining_date=joined,
                    email=f"{code.lower()}@assetledger.local",
                ))
        by_code = {e.employee_code: e for e in db.query(Employee).all()}

        assets_data = [
            ("IT-NB-001", "SN-DELL-001", "Dell", "Latitude 5440", "Laptop", "EMP-001"),
            ("IT-NB-002", "SN-LEN-001", "Lenovo", "ThinkPad T14", "Laptop", "EMP-004"),
            ("IT-NB-003", "SN-LEN-002", "Lenovo", "ThinkPad T14", "Laptop", None),
            ("IT-MON-001", "SN-SAM-001", "Samsung", "S24", "Monitor", "EMP-002"),
            ("IT-MON-002", "SN-LG-001", "LG", "27UL500", "Monitor", None),
        ]
        existing_tags = {a.asset_tag for a in db.query(Asset).all()}
        for tag, serial, make, model, asset_type, holder in assets_data:
            if tag not in existing_tags:
                asset_svc.create_asset(db, AssetCreate(
                    asset_tag=tag, serial_number=serial, make=make, model=model,
                    asset_type=asset_type, processor="Intel i5" if asset_type == "Laptop" else None,
                    assigned_to=by_code[holder].id if holder else None,
                ))

        if not db.query(Consumable).first():
            mouse = consumable_svc.create_consumable(db, ConsumableCreate(
                name="USB mouse", category="Peripherals", unit_type="piece", quantity=25,
            ))
            consumable_svc.create_consumable(db, ConsumableCreate(
                name="Toner HP 59A", category="Printing", unit_type="cartridge", quantity=6,
            ))
            cascade_svc.issue_consumable(db, mouse.id, by_code["EMP-003"].id, 1, "New starter")

        if not db.query(Software).first():
            software_svc.create_software(db, SoftwareCreate(
                name="JetBrains IntelliJ", version="2024.3", total_licenses=3,
                expiry_date=date(2027, 1, 31),
                assigned_to=[by_code["EMP-001"].id, by_code["EMP-004"].id],
            ))

        print("Seed data inserted.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
