# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the User Admin API:
# - test_models.py: Pydantic model validation and normalization
# - test_repositories.py: In-memory and Supabase user repositories
# - test_user_service.py: User listing and admin actions
# - test_analytics.py: Stats and activity trend
# - test_settings.py: Settings stores and merge semantics
# - test_api.py: HTTP endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
