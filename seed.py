from decimal import Decimal

from app import create_app
from models import db
from models.authorization import BranchAuthorization
from models.boat import Boat
from models.branch import Branch
from models.inventory import Inventory, LocationType
from models.product import Product, ProductCategory
from models.user import Role, User
from models.vehicle import Vehicle


BRANCHES = [
    # (code, name, address, is_central)
    ("CEN", "Central de Suprimentos", "Av. Principal, 1000", True),
    ("FL1", "Filial Norte", "Rua das Flores, 120", False),
    ("FL2", "Filial Sul", "Rua do Porto, 45", False),
]

PRODUCTS = [
    # (barcode, name, category, unit, requires_barcode)
    ("7891000100103", "Arroz Tipo 1 5kg", ProductCategory.FOOD, "pct", True),
    ("7896004000855", "Dipirona 500mg", ProductCategory.MEDICINE, "cx", True),
    ("7898357410015", "Lençol Solteiro", ProductCategory.LINEN, "un", False),
    ("7891910000197", "Óleo de Soja 900ml", ProductCategory.FOOD, "un", True),
]

CENTRAL_STOCK = {
    # barcode: (qty, unit_price)
    "7891000100103": ("120", "24.90"),
    "7896004000855": ("300", "4.50"),
    "7898357410015": ("40", "35.00"),
}

# Filial Norte tem tudo homologado exceto medicamentos
AUTHORIZED = {
    "FL1": ["7891000100103", "7898357410015", "7891910000197"],
    "FL2": ["7891000100103", "7896004000855"],
}


VEHICLES = [
    # (branch code, plate, model, odometer)
    ("FL1", "ABC1D23", "Toyota Hilux", 45200),
    ("FL2", "XYZ9K87", "Fiat Strada", 18350),
]

BOATS = [
    # (branch code, name, registration, model, engine_hours)
    ("FL2", "Voadeira Sul", "CPAM-0042", "Yamaha 40HP", "1280.5"),
    ("FL1", "Gerador Norte", "GER-001", "Branco B4T", "3400"),
]

def _get_or_create_user(email: str, full_name: str, role: str, branch_id=None, password="senha1234"):
    user = db.session.query(User).filter_by(email=email).first()
    if not user:
        user = User(email=email, full_name=full_name, role=role, branch_id=branch_id, is_active=True)
        user.set_password(password)
        db.session.add(user)
        db.session.flush()
    else:
        # Opcional: garante que esteja ativo
        user.is_active = True
    return user


def run():
    app = create_app()
    with app.app_context():
        # Importante:
        # Não usamos db.create_all() porque o schema vem das migrações (Flask-Migrate).
        # Rode antes: flask db upgrade

        # 1) Central + filiais
        branches = {}
        for code, name, address, is_central in BRANCHES:
            b = db.session.query(Branch).filter_by(code=code).first()
            if not b:
                b = Branch(code=code, name=name, address=address, is_central=is_central, is_active=True)
                db.session.add(b)
                db.session.flush()
            branches[code] = b

        # 2) Catálogo
        products = {}
        for barcode, name, category, unit, requires_barcode in PRODUCTS:
            p = db.session.query(Product).filter_by(barcode=barcode).first()
            if not p:
                p = Product(
                    barcode=barcode,
                    name=name,
                    category=category,
                    unit=unit,
                    requires_barcode=requires_barcode,
                )
                db.session.add(p)
                db.session.flush()
            products[barcode] = p

        # 3) Estoque inicial da Central
        central = branches["CEN"]
        for barcode, (qty, price) in CENTRAL_STOCK.items():
            p = products[barcode]
            inv = (
                db.session.query(Inventory)
                .filter_by(product_id=p.id, location_type=LocationType.WAREHOUSE, location_id=central.id)
                .first()
            )
            if not inv:
                db.session.add(Inventory(
                    product_id=p.id,
                    location_type=LocationType.WAREHOUSE,
                    location_id=central.id,
                    qty=Decimal(qty),
                    unit_price=Decimal(price),
                ))

        # 4) Usuários demo
        admin = _get_or_create_user("admin@demo.com", "Admin Central", Role.ADMIN)
        _get_or_create_user("norte@demo.com", "Operador Norte", Role.BRANCH_OPERATOR, branches["FL1"].id)
        _get_or_create_user("sul@demo.com", "Operador Sul", Role.BRANCH_OPERATOR, branches["FL2"].id)

        # 5) Homologações
        for code, barcodes in AUTHORIZED.items():
            for barcode in barcodes:
                b, p = branches[code], products[barcode]
                exists = db.session.query(BranchAuthorization).filter_by(branch_id=b.id, product_id=p.id).first()
                if not exists:
                    db.session.add(BranchAuthorization(
                        branch_id=b.id,
                        product_id=p.id,
                        authorized=True,
                        authorized_by_user_id=admin.id,
                    ))

        # 6) Frota
        for code, plate, model, odometer in VEHICLES:
            if not db.session.query(Vehicle).filter_by(plate=plate).first():
                db.session.add(Vehicle(branch_id=branches[code].id, plate=plate, model=model, odometer=odometer))
        for code, name, registration, model, hours in BOATS:
            if not db.session.query(Boat).filter_by(registration=registration).first():
                db.session.add(Boat(
                    branch_id=branches[code].id,
                    name=name,
                    registration=registration,
                    model=model,
                    engine_hours=Decimal(hours),
                ))

        db.session.commit()

        app.logger.info("Seed aplicado: %s filiais, %s produtos", len(branches), len(products))
        print("Seed pronto.")
        print("Admin: admin@demo.com / senha1234")
        print("Operadores: norte@demo.com, sul@demo.com / senha1234")


if __name__ == "__main__":
    run()
