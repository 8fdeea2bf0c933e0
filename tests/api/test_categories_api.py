"""Tests for the storefront header navigation endpoints."""

import pytest

from app.core.config import settings
from app.db.models import Category, CategoryTranslation

TREE_URL = "/api/v1/categories/tree"


@pytest.fixture
def category_tree(db, channel):
    """
    Root
    ├── Men (position 2)
    ├── Women (position 1)
    │   └── Dresses
    │       └── Evening
    │           └── Long (fourth level, not shown)
    └── Archive (hidden)
    """
    categories = [
        (2, 1, 2, True, "Men"),
        (3, 1, 1, True, "Women"),
        (4, 3, 0, True, "Dresses"),
        (5, 4, 0, True, "Evening"),
        (6, 5, 0, True, "Long"),
        (7, 1, 3, False, "Archive"),
    ]
    for category_id, parent_id, position, status, name in categories:
        db.add(Category(id=category_id, parent_id=parent_id, position=position, status=status))
        db.add(
            CategoryTranslation(
                category_id=category_id,
                locale="en",
                name=name,
                slug=name.lower(),
                url_path=f"catalog/{name.lower()}",
            )
        )
    db.add(CategoryTranslation(category_id=3, locale="ru", name="Женщинам", slug="zhenshchinam"))
    db.commit()


class TestCategoryTree:
    def test_tree_order_and_visibility(self, client, category_tree):
        response = client.get(TREE_URL)

        assert response.status_code == 200
        names = [node["name"] for node in response.json()["categories"]]
        assert names == ["Women", "Men"]

    def test_tree_depth_is_three_levels(self, client, category_tree):
        women = client.get(TREE_URL).json()["categories"][0]

        dresses = women["children"][0]
        evening = dresses["children"][0]
        assert dresses["name"] == "Dresses"
        assert evening["name"] == "Evening"
        assert evening["children"] == []

    def test_node_url(self, client, category_tree):
        women = client.get(TREE_URL).json()["categories"][0]

        assert women["url"] == "/catalog/women"
        assert women["slug"] == "women"

    def test_untranslated_categories_skipped(self, client, category_tree):
        response = client.get(TREE_URL, params={"locale": "ru"})

        nodes = response.json()["categories"]
        assert [node["name"] for node in nodes] == ["Женщинам"]
        assert nodes[0]["url"] == "/zhenshchinam"

    def test_header_flags(self, client, category_tree, monkeypatch):
        monkeypatch.setattr(settings, "SHOW_WISHLIST", False)

        data = client.get(TREE_URL).json()

        assert data["show_compare"] is True
        assert data["show_wishlist"] is False

    def test_unknown_channel(self, client, category_tree):
        response = client.get(TREE_URL, params={"channel": "missing"})
        assert response.status_code == 404


class TestCategoryLookup:
    def test_list(self, client, category_tree):
        data = client.get("/api/v1/categories").json()

        assert len(data) == 7
        assert data[0]["name"] == "Root"

    def test_get(self, client, category_tree):
        data = client.get("/api/v1/categories/3").json()

        assert data["name"] == "Women"
        assert data["parent_id"] == 1

    def test_get_missing(self, client, category_tree):
        response = client.get("/api/v1/categories/999")
        assert response.status_code == 404
