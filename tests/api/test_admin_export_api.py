"""Tests for the admin product export endpoints."""

import csv
import io

import pytest

from app.core.config import settings

EXPORT_URL = "/api/v1/admin/products/export"


class TestExportAccess:
    def test_requires_token(self, client, catalog):
        response = client.get(EXPORT_URL)
        assert response.status_code in (401, 403)

    def test_rejects_invalid_token(self, client, catalog):
        response = client.get(EXPORT_URL, headers={"Authorization": "Bearer broken"})
        assert response.status_code == 401

    def test_rejects_non_admin(self, client, catalog, customer, auth_headers):
        response = client.get(EXPORT_URL, headers=auth_headers(customer))
        assert response.status_code == 403


class TestExportDownload:
    def test_xlsx_download(self, client, catalog, admin_user, auth_headers):
        response = client.get(EXPORT_URL, headers=auth_headers(admin_user))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="products-')
        assert disposition.endswith('.xlsx"')
        assert response.content[:2] == b"PK"

    def test_csv_download_with_filters(self, client, catalog, admin_user, auth_headers):
        response = client.get(
            EXPORT_URL,
            params={"format": "csv", "sku": "novel"},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        rows = list(csv.reader(io.StringIO(response.content.decode("utf-8-sig"))))
        assert len(rows) == 2
        assert rows[1][1] == "novel"

    def test_locale_from_query(self, client, catalog, admin_user, auth_headers):
        response = client.get(
            EXPORT_URL,
            params={"format": "csv", "locale": "ru"},
            headers=auth_headers(admin_user),
        )

        header = next(csv.reader(io.StringIO(response.content.decode("utf-8-sig"))))
        assert header[-2:] == ["Изображения", "Видео"]

    def test_locale_from_accept_language(self, client, catalog, admin_user, auth_headers):
        headers = {**auth_headers(admin_user), "Accept-Language": "ru-RU,ru;q=0.9,en;q=0.8"}
        response = client.get(EXPORT_URL, params={"format": "csv"}, headers=headers)

        header = next(csv.reader(io.StringIO(response.content.decode("utf-8-sig"))))
        assert header[1] == "Артикул"

    def test_unknown_format_rejected(self, client, catalog, admin_user, auth_headers):
        response = client.get(
            EXPORT_URL, params={"format": "pdf"}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 422

    def test_row_limit(self, client, catalog, admin_user, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "EXPORT_MAX_ROWS", 2)

        response = client.get(EXPORT_URL, headers=auth_headers(admin_user))

        assert response.status_code == 413


class TestExportPreview:
    def test_preview(self, client, catalog, admin_user, auth_headers):
        response = client.get(
            f"{EXPORT_URL}/preview", params={"limit": 2}, headers=auth_headers(admin_user)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert len(data["rows"]) == 2
        assert len(data["rows"][0]) == len(data["headings"])
        color = data["headings"].index("Color")
        assert data["rows"][0][color] == "Red"

    @pytest.mark.parametrize("limit", [0, 101])
    def test_preview_limit_bounds(self, client, catalog, admin_user, auth_headers, limit):
        response = client.get(
            f"{EXPORT_URL}/preview", params={"limit": limit}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 422
