from decimal import Decimal

import pytest

from models import db
from models.inventory import LocationType
from models.movement import MoveType, StockMovement
from models.product import ProductCategory
from services.catalog import (
    authorized_product_ids,
    create_product,
    find_product_by_barcode,
    is_product_authorized,
    lookup_barcode,
    set_authorization,
    update_product,
)
from services.errors import NotFoundError
from services.stock import (
    LOW_STOCK_THRESHOLD,
    clean_str,
    find_inventory,
    get_stock,
    inventory_totals,
    list_location_inventory,
    to_qty,
)
from services.supply import register_consumption, register_purchase


# -------------------------
# Catálogo
# -------------------------
def test_find_product_by_barcode_trims_input(data):
    product = find_product_by_barcode(db.session, "  7891000100103 ")
    assert product is not None and product.id == data.p1

    assert find_product_by_barcode(db.session, "0000000000000") is None
    assert find_product_by_barcode(db.session, "") is None


def test_lookup_barcode_reports_central_stock(data):
    found = lookup_barcode(db.session, "7896004000855")
    assert found["found"] is True
    assert found["product"].id == data.p2
    assert found["in_central"] is True
    assert found["central_stock"] == Decimal("30")

    not_in_central = lookup_barcode(db.session, "7898357410015")
    assert not_in_central["found"] is True
    assert not_in_central["in_central"] is False

    missing = lookup_barcode(db.session, "123")
    assert missing["found"] is False
    assert missing["product"] is None


def test_create_product_rules(data):
    product = create_product(
        db.session, name=" Feijão 1kg ", barcode="7890000000001", category=ProductCategory.FOOD, unit="pct"
    )
    assert product.name == "Feijão 1kg"

    with pytest.raises(ValueError, match="código de barras"):
        create_product(db.session, name="Outro", barcode="7890000000001")
    with pytest.raises(ValueError, match="exige"):
        create_product(db.session, name="Soro", requires_barcode=True)
    with pytest.raises(ValueError, match="Categoria"):
        create_product(db.session, name="X", category="eletronico")
    with pytest.raises(ValueError, match="Nome"):
        create_product(db.session, name="  ")


def test_update_product_edits_fields(data):
    product = update_product(
        db.session,
        product_id=data.p3,
        name="Lençol Casal",
        description="Algodão 200 fios",
        category=ProductCategory.LINEN,
        unit="jg",
        requires_barcode=True,
    )
    assert product.name == "Lençol Casal"
    assert product.unit == "jg"
    assert product.requires_barcode is True
    # barcode mantido quando não informado
    assert product.barcode == "7898357410015"

    update_product(db.session, product_id=data.p3, barcode=" 7898357410999 ")
    assert find_product_by_barcode(db.session, "7898357410999").id == data.p3


def test_update_product_barcode_rules(data):
    # o próprio código não conta como duplicado
    update_product(db.session, product_id=data.p1, barcode="7891000100103")

    with pytest.raises(ValueError, match="Já existe"):
        update_product(db.session, product_id=data.p3, barcode="7891000100103")
    db.session.rollback()

    with pytest.raises(ValueError, match="exige"):
        update_product(db.session, product_id=data.p3, barcode="", requires_barcode=True)
    db.session.rollback()

    with pytest.raises(NotFoundError):
        update_product(db.session, product_id=999, name="Nada")


def test_set_authorization_toggles(data):
    assert not is_product_authorized(db.session, branch_id=data.b1, product_id=data.p2)

    set_authorization(db.session, branch_id=data.b1, product_id=data.p2, authorized=True, user_id=data.admin)
    assert is_product_authorized(db.session, branch_id=data.b1, product_id=data.p2)
    assert authorized_product_ids(db.session, branch_id=data.b1) == {data.p1, data.p2}

    auth = set_authorization(db.session, branch_id=data.b1, product_id=data.p1, authorized=False)
    assert auth.authorized is False
    assert authorized_product_ids(db.session, branch_id=data.b1) == {data.p2}


def test_central_has_no_authorizations(data):
    with pytest.raises(ValueError):
        set_authorization(db.session, branch_id=data.central, product_id=data.p1, authorized=True)


# -------------------------
# Compras e consumo
# -------------------------
def test_purchase_adds_central_stock_and_averages_price(data):
    purchase = register_purchase(
        db.session, product_id=data.p1, quantity="100", unit_price="30.00", supplier="Atacado Sul", user_id=data.admin
    )

    assert purchase.total_price == Decimal("3000.00")
    inv = find_inventory(db.session, product_id=data.p1, location_type=LocationType.WAREHOUSE, location_id=data.central)
    assert inv.qty == Decimal("200")
    assert inv.unit_price == Decimal("25.00")

    mv = db.session.query(StockMovement).filter_by(move_type=MoveType.PURCHASE_IN).one()
    assert mv.to_location_id == data.central
    assert mv.from_location_id is None
    assert mv.qty == Decimal("100")


def test_purchase_of_new_item_creates_inventory(data):
    register_purchase(db.session, product_id=data.p3, quantity=8, unit_price="12.5")

    inv = find_inventory(db.session, product_id=data.p3, location_type=LocationType.WAREHOUSE, location_id=data.central)
    assert inv.qty == Decimal("8")
    assert inv.unit_price == Decimal("12.50")


def test_purchase_requires_positive_quantity(data):
    with pytest.raises(ValueError):
        register_purchase(db.session, product_id=data.p1, quantity=0, unit_price=1)


@pytest.mark.parametrize("price", [None, "", "abc", "-3", "0"])
def test_purchase_rejects_missing_or_invalid_price(data, price):
    with pytest.raises(ValueError, match="[Pp]reço unitário"):
        register_purchase(db.session, product_id=data.p1, quantity=10, unit_price=price)

    inv = find_inventory(db.session, product_id=data.p1, location_type=LocationType.WAREHOUSE, location_id=data.central)
    assert inv.qty == Decimal("100")
    assert inv.unit_price == Decimal("20.00")


def test_consumption_removes_branch_stock(data):
    consumption = register_consumption(
        db.session,
        branch_id=data.b1,
        product_id=data.p1,
        quantity=2,
        consumed_by="Maria Souza",
        consumed_by_cpf="123.456.789-09",
        user_id=data.op1,
    )

    assert consumption.consumed_by_cpf == "12345678909"
    assert consumption.unit_price == Decimal("10.00")
    assert consumption.total_price == Decimal("20.00")
    assert get_stock(db.session, product_id=data.p1, location_type=LocationType.BRANCH, location_id=data.b1) == Decimal("3")

    mv = db.session.query(StockMovement).filter_by(move_type=MoveType.CONSUMPTION_OUT).one()
    assert mv.from_location_id == data.b1
    assert mv.to_location_id is None


def test_consumption_above_stock_is_refused(data):
    with pytest.raises(ValueError, match="insuficiente"):
        register_consumption(
            db.session,
            branch_id=data.b1,
            product_id=data.p1,
            quantity=6,
            consumed_by="Maria",
            consumed_by_cpf="12345678909",
        )
    with pytest.raises(ValueError, match="insuficiente"):
        register_consumption(
            db.session,
            branch_id=data.b2,
            product_id=data.p1,
            quantity=1,
            consumed_by="João",
            consumed_by_cpf="98765432100",
        )
    assert get_stock(db.session, product_id=data.p1, location_type=LocationType.BRANCH, location_id=data.b1) == Decimal("5")


@pytest.mark.parametrize("name,cpf", [("", "12345678909"), ("Maria", "1234"), ("Maria", None)])
def test_consumption_requires_person_and_cpf(data, name, cpf):
    with pytest.raises(ValueError):
        register_consumption(
            db.session, branch_id=data.b1, product_id=data.p1, quantity=1, consumed_by=name, consumed_by_cpf=cpf
        )


def test_consumption_unknown_branch(data):
    with pytest.raises(NotFoundError):
        register_consumption(
            db.session, branch_id=404, product_id=data.p1, quantity=1, consumed_by="Maria", consumed_by_cpf="12345678909"
        )


# -------------------------
# Quantidades e totais de estoque
# -------------------------
def test_to_qty_parsing():
    assert to_qty("2,5") == Decimal("2.500")
    assert to_qty("abc") == Decimal("0")
    assert to_qty(-4) == Decimal("0")
    assert clean_str(None) == ""
    assert clean_str(12) == "12"


@pytest.mark.parametrize("raw", ["1e30", "100000000000", 10**20])
def test_to_qty_out_of_range_is_value_error(raw):
    with pytest.raises(ValueError, match="limite"):
        to_qty(raw)


def test_inventory_totals_flag_low_stock(data):
    central = list_location_inventory(db.session, location_type=LocationType.WAREHOUSE, location_id=data.central)
    totals = inventory_totals(central)
    assert totals["item_count"] == 2
    assert totals["total_items"] == Decimal("130")
    assert totals["total_value"] == Decimal("2135.00")
    assert totals["low_stock_count"] == 0

    branch = list_location_inventory(db.session, location_type=LocationType.BRANCH, location_id=data.b1)
    assert branch[0].qty < LOW_STOCK_THRESHOLD
    assert inventory_totals(branch)["low_stock_count"] == 1
    assert inventory_totals([])["total_value"] == Decimal("0.00")
