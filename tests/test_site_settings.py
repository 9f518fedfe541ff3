# =============================================================================
# tests/test_site_settings.py - Site Settings Admin Tests
# =============================================================================
# Tests for /api/v1/admin/site-settings and the public setting reads:
# - editing one nested leaf keeps every sibling
# - form description for a stored setting
# - public /settings/{key} and /layout
# =============================================================================

import uuid

import pytest

FOOTER_VALUE = {
    "copyright": "(c) 2024 Shop",
    "social_links": {
        "facebook": "https://facebook.com/old",
        "instagram": "https://instagram.com/shop",
    },
    "links": [
        {"label": "About", "url": "/about"},
        {"label": "Blog", "url": "/blog"},
    ],
}


@pytest.fixture
def footer(store):
    [row] = store.seed("site_settings", {"key": "footer", "value": FOOTER_VALUE, "description": "Footer"})
    return row


class TestSettingFieldEdit:
    """PATCH edits exactly one leaf."""

    def test_edit_keeps_siblings(self, client, store, footer, admin_headers):
        response = client.patch(
            f"/api/v1/admin/site-settings/{footer['id']}",
            json={"path": "social_links.facebook", "value": "https://facebook.com/new"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        value = response.json()["value"]
        assert value["social_links"] == {
            "facebook": "https://facebook.com/new",
            "instagram": "https://instagram.com/shop",
        }
        assert value["copyright"] == FOOTER_VALUE["copyright"]
        assert value["links"] == FOOTER_VALUE["links"]
        assert list(value) == list(FOOTER_VALUE)

        stored = store.rows("site_settings")[0]
        assert stored["value"] == value
        assert stored["updated_at"]

    def test_edit_array_item_with_list_path(self, client, store, footer, admin_headers):
        response = client.patch(
            f"/api/v1/admin/site-settings/{footer['id']}",
            json={"path": ["links", 1, "url"], "value": "/journal"},
            headers=admin_headers,
        )

        links = response.json()["value"]["links"]
        assert links == [{"label": "About", "url": "/about"}, {"label": "Blog", "url": "/journal"}]

    def test_edit_creates_missing_parent(self, client, footer, admin_headers):
        response = client.patch(
            f"/api/v1/admin/site-settings/{footer['id']}",
            json={"path": "newsletter.title", "value": "Join us"},
            headers=admin_headers,
        )

        assert response.json()["value"]["newsletter"] == {"title": "Join us"}

    def test_path_through_primitive_is_400(self, client, store, footer, admin_headers):
        response = client.patch(
            f"/api/v1/admin/site-settings/{footer['id']}",
            json={"path": "copyright.year", "value": 2025},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SETTING_PATH"
        assert store.rows("site_settings")[0]["value"] == FOOTER_VALUE

    def test_leaf_edit_on_primitive_setting_is_400(self, client, store, admin_headers):
        [logo_width] = store.seed("site_settings", {"key": "logo_width", "value": 150})

        response = client.patch(
            f"/api/v1/admin/site-settings/{logo_width['id']}",
            json={"path": "px", "value": 200},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SETTING_PATH"
        assert store.rows("site_settings")[0]["value"] == 150

    def test_index_past_end_is_400(self, client, footer, admin_headers):
        response = client.patch(
            f"/api/v1/admin/site-settings/{footer['id']}",
            json={"path": "links.5.url", "value": "/x"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_unknown_setting_is_404(self, client, admin_headers):
        response = client.patch(
            f"/api/v1/admin/site-settings/{uuid.uuid4()}",
            json={"path": "a", "value": "b"},
            headers=admin_headers,
        )
        assert response.status_code == 404


class TestSettingAdmin:
    """Tests for list/create/replace/delete and the form description."""

    def test_list_is_labelled_and_ordered(self, client, store, admin_headers):
        store.seed(
            "site_settings",
            {"key": "logo_width", "value": 120},
            {"key": "footer", "value": {}},
            {"key": "business_hours", "value": "9-5"},
        )

        rows = client.get("/api/v1/admin/site-settings", headers=admin_headers).json()

        assert [row["key"] for row in rows] == ["business_hours", "footer", "logo_width"]
        assert [row["label"] for row in rows] == ["Business Hours", "Footer Configuration", "Logo Width (px)"]

    def test_create(self, client, store, admin_headers):
        response = client.post(
            "/api/v1/admin/site-settings",
            json={"key": "newsletter", "value": {"title": "Stay in touch"}},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["label"] == "Newsletter"
        assert store.rows("site_settings")[0]["value"] == {"title": "Stay in touch"}

    def test_create_rejects_bad_key(self, client, admin_headers):
        response = client.post(
            "/api/v1/admin/site-settings",
            json={"key": "has spaces", "value": 1},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_put_replaces_whole_value(self, client, footer, admin_headers):
        response = client.put(
            f"/api/v1/admin/site-settings/{footer['id']}",
            json={"value": {"copyright": "(c) 2025"}},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["value"] == {"copyright": "(c) 2025"}
        assert body["description"] == "Footer"

    def test_form_description(self, client, footer, admin_headers):
        response = client.get(f"/api/v1/admin/site-settings/{footer['id']}/form", headers=admin_headers)

        assert response.status_code == 200
        form = response.json()
        assert form["label"] == "Footer Configuration"
        assert form["control"] == "group"
        assert [child["key"] for child in form["children"]] == ["copyright", "social_links", "links"]

        links = form["children"][2]
        assert links["control"] == "list"
        assert [item["label"] for item in links["children"]] == ["Item 1", "Item 2"]

    def test_logo_setting_is_single_image_control(self, client, store, admin_headers):
        [row] = store.seed("site_settings", {"key": "company_logo", "value": "https://cdn.test/upload/a.webp"})

        form = client.get(f"/api/v1/admin/site-settings/{row['id']}/form", headers=admin_headers).json()

        assert form["control"] == "image"
        assert form["upload_section"] == "company_logo"
        assert form["children"] == []

    def test_delete(self, client, store, footer, admin_headers):
        response = client.delete(f"/api/v1/admin/site-settings/{footer['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert store.rows("site_settings") == []


class TestPublicSettings:
    """Tests for GET /api/v1/settings/{key} and /api/v1/layout."""

    def test_get_setting(self, client, footer):
        response = client.get("/api/v1/settings/footer")

        assert response.status_code == 200
        assert response.json() == {"key": "footer", "value": FOOTER_VALUE}

    def test_missing_setting_is_404(self, client):
        response = client.get("/api/v1/settings/nope")

        assert response.status_code == 404
        assert response.json()["code"] == "SETTING_NOT_FOUND"

    def test_unmapped_key_is_read_through(self, client, store):
        store.seed("site_settings", {"key": "seasonal_banner", "value": "Sale"})

        client.get("/api/v1/settings/seasonal_banner")
        client.get("/api/v1/settings/seasonal_banner")

        assert store.fetch_count("site_settings") == 2

    def test_layout_bundle_defaults_missing_to_null(self, client, store, footer):
        store.seed("site_settings", {"key": "logo_width", "value": 140})

        body = client.get("/api/v1/layout").json()

        assert body == {
            "header": None,
            "footer": FOOTER_VALUE,
            "company_branding": None,
            "social_media": None,
            "logo_width": 140,
        }
