"""Tests for the product store service, below the HTTP layer."""

import pytest

from catalog_api.errors import UpstreamUnavailable, ValidationFailed
from catalog_api.infra.db import build_engine, build_session_factory, init_schema
from catalog_api.infra.resources import open_resources
from catalog_api.schemas.products import ProductIn
from catalog_api.services.products import ProductService, check_required

from conftest import make_settings


@pytest.fixture
def service(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'products.db'}")
    init_schema(engine)
    yield ProductService(build_session_factory(engine))
    engine.dispose()


def test_check_required_strips_strings():
    data = check_required(ProductIn(name=" Lamp ", description="Desk lamp", price=12, filename="x.png"))
    assert data.name == "Lamp"
    assert data.price == 12.0


def test_check_required_lists_every_missing_field():
    with pytest.raises(ValidationFailed) as exc:
        check_required(ProductIn(description=""))
    assert exc.value.fields == ["name", "description", "price", "filename"]
    assert exc.value.to_body()["fields"] == ["name", "description", "price", "filename"]


def test_create_and_list(service):
    service.create(ProductIn(name="Lamp", description="Desk lamp", price=12.5, filename="x.png"))
    service.create(ProductIn(name="Lamp", description="Desk lamp", price=12.5, filename="x.png"))

    products = service.list_all()
    assert len(products) == 2
    assert products[0].id != products[1].id
    assert products[0].created_at is not None


def test_invalid_create_writes_nothing(service):
    with pytest.raises(ValidationFailed):
        service.create(ProductIn(name="Lamp"))
    assert service.list_all() == []


def test_without_database():
    service = ProductService(None)
    with pytest.raises(UpstreamUnavailable) as exc:
        service.list_all()
    assert exc.value.upstream == "database"
    assert exc.value.status_code == 503


@pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
def test_check_required_rejects_non_finite_price(price):
    with pytest.raises(ValidationFailed) as exc:
        check_required(ProductIn(name="Lamp", description="Desk lamp", price=price, filename="x.png"))
    assert exc.value.fields == ["price"]


def test_schema_is_created_once_database_is_back(tmp_path):
    db_dir = tmp_path / "later"
    resources = open_resources(make_settings(tmp_path, DATABASE_URL=f"sqlite:///{db_dir / 'p.db'}"))
    assert resources.schema_ready is False
    with pytest.raises(UpstreamUnavailable):
        resources.ensure_schema()

    db_dir.mkdir()
    resources.ensure_schema()
    assert resources.schema_ready is True
    resources.close()
