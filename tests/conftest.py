"""Shared fixtures: in-memory database, sample catalog, API client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_TYPE", "local")

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine, event, insert
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.auth import AuthService
from app.db.models import (
    Attribute,
    AttributeFamily,
    AttributeGroup,
    AttributeOption,
    AttributeOptionTranslation,
    Base,
    Category,
    CategoryTranslation,
    Channel,
    Product,
    ProductAttributeValue,
    ProductFlat,
    ProductImage,
    ProductVideo,
    User,
    attribute_group_mappings,
)
from app.exports import ExportContext, ProductDataGrid, ProductDataGridExport
from app.services.storage_service import LocalStorageProvider

CDN_URL = "https://cdn.example.test"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def query_log(engine):
    """Collect every SQL statement executed against the test engine."""
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture
def storage(tmp_path):
    return LocalStorageProvider(base_path=str(tmp_path), base_url=CDN_URL)


@pytest.fixture
def channel(db):
    root = Category(id=1, parent_id=None, position=0, status=True)
    db.add(root)
    db.add(CategoryTranslation(category_id=1, locale="en", name="Root", slug="root"))
    channel = Channel(id=1, code="default", name="Default", root_category_id=1)
    db.add(channel)
    db.commit()
    return channel


def _flat(product_id, sku, name, family_id, locale, channel="default", **extra):
    return ProductFlat(
        product_id=product_id,
        sku=sku,
        name=name,
        type=extra.pop("type", "simple"),
        price=extra.pop("price", Decimal("10.00")),
        quantity=extra.pop("quantity", 5),
        status=extra.pop("status", True),
        locale=locale,
        channel=channel,
        attribute_family_id=family_id,
        **extra,
    )


@pytest.fixture
def catalog(db, channel):
    """
    Two families with overlapping attributes and three products.

    Clothing: color (select), sizes (multiselect), waterproof (boolean), description
    Books:    description, author (text), cost (price, per channel)
    The third product has no family in product_flat.
    """
    clothing = AttributeFamily(id=1, code="clothing", name="Clothing")
    books = AttributeFamily(id=2, code="books", name="Books")
    db.add_all([clothing, books])
    db.add_all(
        [
            AttributeGroup(id=1, attribute_family_id=1, name="General"),
            AttributeGroup(id=2, attribute_family_id=2, name="General"),
        ]
    )

    db.add_all(
        [
            Attribute(id=1, code="color", admin_name="Color", type="select", position=1),
            Attribute(id=2, code="sizes", admin_name="Sizes", type="multiselect", position=2),
            Attribute(id=3, code="waterproof", admin_name="Waterproof", type="boolean", position=3),
            Attribute(
                id=4,
                code="description",
                admin_name="Description",
                type="textarea",
                position=4,
                value_per_locale=True,
            ),
            Attribute(id=5, code="author", admin_name="Author", type="text", position=5),
            Attribute(
                id=6, code="cost", admin_name="Cost", type="price", position=6, value_per_channel=True
            ),
        ]
    )
    db.flush()

    db.execute(
        insert(attribute_group_mappings),
        [
            {"attribute_id": 1, "attribute_group_id": 1},
            {"attribute_id": 2, "attribute_group_id": 1},
            {"attribute_id": 3, "attribute_group_id": 1},
            {"attribute_id": 4, "attribute_group_id": 1},
            {"attribute_id": 4, "attribute_group_id": 2},
            {"attribute_id": 5, "attribute_group_id": 2},
            {"attribute_id": 6, "attribute_group_id": 2},
        ],
    )

    db.add_all(
        [
            AttributeOption(id=3, attribute_id=1, admin_name="red"),
            AttributeOption(id=7, attribute_id=1, admin_name="blue"),
            AttributeOption(id=11, attribute_id=2, admin_name="small"),
        ]
    )
    db.flush()
    db.add_all(
        [
            AttributeOptionTranslation(attribute_option_id=3, locale="en", label="Red"),
            AttributeOptionTranslation(attribute_option_id=7, locale="en", label="Blue"),
            AttributeOptionTranslation(attribute_option_id=3, locale="ru", label="Красный"),
            AttributeOptionTranslation(attribute_option_id=7, locale="ru", label="Синий"),
        ]
    )

    db.add_all(
        [
            Product(id=1, sku="shirt", type="simple", attribute_family_id=1),
            Product(id=2, sku="novel", type="simple", attribute_family_id=2),
            Product(id=3, sku="orphan", type="virtual", attribute_family_id=None),
        ]
    )
    db.flush()

    db.add_all(
        [
            _flat(1, "shirt", "Shirt", 1, "en"),
            _flat(1, "shirt", "Рубашка", 1, "ru"),
            _flat(2, "novel", "Novel", 2, "en"),
            _flat(2, "novel", "Роман", 2, "ru"),
            _flat(3, "orphan", "Orphan", None, "en", type="virtual"),
            _flat(3, "orphan", "Сирота", None, "ru", type="virtual"),
        ]
    )

    db.add_all(
        [
            # shirt
            ProductAttributeValue(product_id=1, attribute_id=1, integer_value=3),
            ProductAttributeValue(product_id=1, attribute_id=2, text_value="3,7,99"),
            ProductAttributeValue(product_id=1, attribute_id=3, boolean_value=True),
            ProductAttributeValue(product_id=1, attribute_id=4, locale="en", text_value="Cotton shirt"),
            ProductAttributeValue(product_id=1, attribute_id=4, locale="ru", text_value="Хлопковая рубашка"),
            # author is not part of the Clothing family
            ProductAttributeValue(product_id=1, attribute_id=5, text_value="Not exported"),
            # novel
            ProductAttributeValue(product_id=2, attribute_id=4, locale="en", text_value="A long novel"),
            ProductAttributeValue(product_id=2, attribute_id=4, locale=None, text_value="Unscoped"),
            ProductAttributeValue(product_id=2, attribute_id=5, text_value="=HYPERLINK(\"x\")"),
            ProductAttributeValue(product_id=2, attribute_id=6, channel="default", float_value=Decimal("12.5")),
            ProductAttributeValue(product_id=2, attribute_id=6, channel="outlet", float_value=Decimal("99")),
            # value row for an attribute outside every exported family
            ProductAttributeValue(product_id=2, attribute_id=999, text_value="dangling"),
        ]
    )

    db.add_all(
        [
            ProductImage(product_id=1, path="p1/b.jpg", position=2),
            ProductImage(product_id=1, path="p1/a.jpg", position=1),
            ProductImage(product_id=1, path="p1/c.jpg", position=3),
            ProductVideo(product_id=2, path="p2/trailer.mp4", position=1),
        ]
    )
    db.commit()

    return SimpleNamespace(shirt=1, novel=2, orphan=3, clothing=1, books=2)


@pytest.fixture
def make_export(db, storage):
    """Factory for an export bound to the test session."""

    def _make(locale="en", channel="default", filters=None, storage_provider=None):
        datagrid = ProductDataGrid(db, locale=locale, channel=channel, filters=filters)
        return ProductDataGridExport(
            db,
            datagrid,
            storage_provider or storage,
            ExportContext(locale=locale, channel=channel),
        )

    return _make


@pytest.fixture
def admin_user(db):
    user = User(email="admin@example.test", full_name="Admin", is_admin=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def customer(db):
    user = User(email="customer@example.test", full_name="Customer")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = AuthService.create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(db, storage):
    from fastapi.testclient import TestClient

    from app.api.v1.endpoints.categories import clear_tree_cache
    from app.db.database import get_db
    from app.main import app
    from app.services.storage_service import get_storage

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage] = lambda: storage
    clear_tree_cache()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_tree_cache()
