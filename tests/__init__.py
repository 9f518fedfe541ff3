# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Storefront API:
# - fakes.py: In-memory store, FTP and auth doubles
# - test_models.py: Unit tests for Pydantic model validation
# - test_query_cache.py, test_realtime.py, test_settings_form.py: lib/ units
# - test_catalog.py, test_contact.py, test_site_settings.py, ...: API tests
#   through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
