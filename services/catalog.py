from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models.authorization import BranchAuthorization
from models.branch import Branch
from models.inventory import LocationType
from models.product import Product, ProductCategory
from services.errors import NotFoundError
from services.stock import clean_str, find_inventory, to_qty


# -------------------------
# Filiais
# -------------------------
def get_central_branch(db: Session) -> Branch:
    central = (
        db.query(Branch)
        .filter(Branch.is_central == True, Branch.is_active == True)
        .order_by(Branch.id.asc())
        .first()
    )
    if not central:
        raise NotFoundError("Não existe Central ativa cadastrada.")
    return central


def get_active_branch(db: Session, branch_id: int) -> Branch:
    branch = db.query(Branch).filter_by(id=branch_id, is_active=True).first()
    if not branch:
        raise NotFoundError("Filial inválida ou inativa.")
    return branch


def list_branches(db: Session, *, include_central: bool = False) -> list[Branch]:
    q = db.query(Branch).filter(Branch.is_active == True)
    if not include_central:
        q = q.filter(Branch.is_central == False)
    return q.order_by(Branch.name.asc()).all()


# -------------------------
# Produtos
# -------------------------
def get_active_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter_by(id=product_id, is_active=True).first()
    if not product:
        raise NotFoundError("Produto não encontrado.")
    return product


def find_product_by_barcode(db: Session, barcode: Optional[str]) -> Optional[Product]:
    code = clean_str(barcode)
    if not code:
        return None
    return db.query(Product).filter(Product.barcode == code, Product.is_active == True).first()


def lookup_barcode(db: Session, barcode: Optional[str]) -> dict:
    """
    Busca por código de barras (digitado ou escaneado).
    Informa também se o produto tem registro no estoque da Central.
    """
    product = find_product_by_barcode(db, barcode)
    if not product:
        return {"found": False, "product": None, "in_central": False, "central_stock": Decimal("0.000")}

    central = get_central_branch(db)
    inv = find_inventory(
        db,
        product_id=product.id,
        location_type=LocationType.WAREHOUSE,
        location_id=central.id,
    )
    return {
        "found": True,
        "product": product,
        "in_central": inv is not None,
        "central_stock": to_qty(inv.qty) if inv else Decimal("0.000"),
    }


def list_products(db: Session, *, q: Optional[str] = None, category: Optional[str] = None) -> list[Product]:
    base = db.query(Product).filter(Product.is_active == True)
    q = clean_str(q)
    if q:
        like = f"%{q}%"
        base = base.filter((Product.name.ilike(like)) | (Product.barcode.ilike(like)))
    if category:
        base = base.filter(Product.category == category)
    return base.order_by(Product.name.asc()).limit(500).all()


def create_product(
    db: Session,
    *,
    name: str,
    barcode: Optional[str] = None,
    description: Optional[str] = None,
    category: str = ProductCategory.OTHER,
    unit: str = "un",
    requires_barcode: bool = False
) -> Product:
    name = clean_str(name)
    barcode = clean_str(barcode) or None
    category = clean_str(category) or ProductCategory.OTHER

    if not name:
        raise ValueError("Nome do produto é obrigatório.")
    if category not in ProductCategory.ALL:
        raise ValueError("Categoria inválida.")
    if requires_barcode and not barcode:
        raise ValueError("Este produto exige código de barras.")
    if barcode and db.query(Product.id).filter(Product.barcode == barcode).first() is not None:
        raise ValueError(f"Já existe produto com o código de barras {barcode}.")

    product = Product(
        name=name,
        barcode=barcode,
        description=clean_str(description) or None,
        category=category,
        unit=clean_str(unit) or "un",
        requires_barcode=bool(requires_barcode),
    )
    db.add(product)
    db.flush()
    return product


def update_product(
    db: Session,
    *,
    product_id: int,
    name: Optional[str] = None,
    barcode: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    unit: Optional[str] = None,
    requires_barcode: Optional[bool] = None
) -> Product:
    """
    Edita um produto do catálogo. Campo None fica como está;
    barcode vazio ("") remove o código.
    """
    product = get_active_product(db, product_id)

    if name is not None:
        name = clean_str(name)
        if not name:
            raise ValueError("Nome do produto é obrigatório.")
        product.name = name

    if category is not None:
        category = clean_str(category) or ProductCategory.OTHER
        if category not in ProductCategory.ALL:
            raise ValueError("Categoria inválida.")
        product.category = category

    if barcode is not None:
        barcode = clean_str(barcode) or None
        if barcode and (
            db.query(Product.id)
            .filter(Product.barcode == barcode, Product.id != product.id)
            .first()
            is not None
        ):
            raise ValueError(f"Já existe produto com o código de barras {barcode}.")
        product.barcode = barcode

    if description is not None:
        product.description = clean_str(description) or None
    if unit is not None:
        product.unit = clean_str(unit) or "un"
    if requires_barcode is not None:
        product.requires_barcode = bool(requires_barcode)

    if product.requires_barcode and not product.barcode:
        raise ValueError("Este produto exige código de barras.")

    db.flush()
    return product


# -------------------------
# Homologação por filial
# -------------------------
def is_product_authorized(db: Session, *, branch_id: int, product_id: int) -> bool:
    return (
        db.query(BranchAuthorization.id)
        .filter(
            BranchAuthorization.branch_id == branch_id,
            BranchAuthorization.product_id == product_id,
            BranchAuthorization.authorized.is_(True),
        )
        .first()
        is not None
    )


def authorized_product_ids(db: Session, *, branch_id: int) -> set[int]:
    rows = (
        db.query(BranchAuthorization.product_id)
        .filter(BranchAuthorization.branch_id == branch_id, BranchAuthorization.authorized.is_(True))
        .all()
    )
    return {r.product_id for r in rows}


def list_authorizations(db: Session, *, branch_id: Optional[int] = None) -> list[BranchAuthorization]:
    q = db.query(BranchAuthorization)
    if branch_id:
        q = q.filter(BranchAuthorization.branch_id == branch_id)
    return q.order_by(BranchAuthorization.branch_id.asc(), BranchAuthorization.product_id.asc()).all()


def set_authorization(
    db: Session,
    *,
    branch_id: int,
    product_id: int,
    authorized: bool,
    user_id: Optional[int] = None
) -> BranchAuthorization:
    """Cria ou atualiza a homologação de um produto para a filial."""
    branch = get_active_branch(db, branch_id)
    if branch.is_central:
        raise ValueError("A Central não precisa de homologação.")
    get_active_product(db, product_id)

    auth = db.query(BranchAuthorization).filter_by(branch_id=branch_id, product_id=product_id).first()
    if not auth:
        auth = BranchAuthorization(branch_id=branch_id, product_id=product_id)
        db.add(auth)

    auth.authorized = bool(authorized)
    auth.authorized_by_user_id = user_id
    auth.authorized_at = datetime.utcnow()
    db.flush()
    return auth
