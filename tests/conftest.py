"""
Fixtures de teste: app com SQLite em memória, dados base e login via API.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app import create_app
from models import db
from models.authorization import BranchAuthorization
from models.branch import Branch
from models.inventory import Inventory, LocationType
from models.product import Product, ProductCategory
from models.user import Role, User

PASSWORD = "Senha123!"


@pytest.fixture()
def app(tmp_path):
    """Aplicação de teste com banco novo por teste."""
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "LOG_DIR": str(tmp_path / "logs"),
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def data(app):
    """
    Central + duas filiais, três produtos e três usuários.

    - p1 (arroz): homologado em b1 e b2, com estoque na Central
    - p2 (dipirona): homologado só em b2, com estoque na Central
    - p3 (lençol): sem registro no estoque da Central
    """
    central = Branch(name="Central", code="CEN", is_central=True)
    b1 = Branch(name="Filial Norte", code="FL1")
    b2 = Branch(name="Filial Sul", code="FL2")
    db.session.add_all([central, b1, b2])
    db.session.flush()

    p1 = Product(name="Arroz 5kg", barcode="7891000100103", category=ProductCategory.FOOD, unit="pct")
    p2 = Product(name="Dipirona 500mg", barcode="7896004000855", category=ProductCategory.MEDICINE, unit="cx")
    p3 = Product(name="Lençol Solteiro", barcode="7898357410015", category=ProductCategory.LINEN)
    db.session.add_all([p1, p2, p3])
    db.session.flush()

    db.session.add_all([
        Inventory(product_id=p1.id, location_type=LocationType.WAREHOUSE, location_id=central.id,
                  qty=Decimal("100"), unit_price=Decimal("20.00")),
        Inventory(product_id=p2.id, location_type=LocationType.WAREHOUSE, location_id=central.id,
                  qty=Decimal("30"), unit_price=Decimal("4.50")),
        Inventory(product_id=p1.id, location_type=LocationType.BRANCH, location_id=b1.id,
                  qty=Decimal("5"), unit_price=Decimal("10.00")),
    ])

    db.session.add_all([
        BranchAuthorization(branch_id=b1.id, product_id=p1.id, authorized=True),
        BranchAuthorization(branch_id=b2.id, product_id=p1.id, authorized=True),
        BranchAuthorization(branch_id=b2.id, product_id=p2.id, authorized=True),
    ])

    users = {}
    for email, role, branch_id in (
        ("admin@test.local", Role.ADMIN, None),
        ("norte@test.local", Role.BRANCH_OPERATOR, b1.id),
        ("sul@test.local", Role.BRANCH_OPERATOR, b2.id),
    ):
        u = User(email=email, full_name=email.split("@")[0], role=role, branch_id=branch_id)
        u.set_password(PASSWORD)
        db.session.add(u)
        users[email] = u
    db.session.commit()

    return SimpleNamespace(
        central=central.id,
        b1=b1.id,
        b2=b2.id,
        p1=p1.id,
        p2=p2.id,
        p3=p3.id,
        admin=users["admin@test.local"].id,
        op1=users["norte@test.local"].id,
        op2=users["sul@test.local"].id,
    )


def login(client, email: str, password: str = PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


@pytest.fixture()
def admin_client(client, data):
    assert login(client, "admin@test.local").status_code == 200
    return client


@pytest.fixture()
def norte_client(client, data):
    assert login(client, "norte@test.local").status_code == 200
    return client
