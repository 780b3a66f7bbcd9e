"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from mynote.backend.core.config_schema import (
    FeaturesSchema,
    JwtSchema,
    SecretsValidationSchema,
    SecuritySchema,
    ViewsSchema,
)
from mynote.backend.models.folder import Folder
from mynote.backend.models.note import Note


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def features() -> FeaturesSchema:
    """Real FeaturesSchema with the shipped defaults."""
    return FeaturesSchema(
        api_detailed_errors=False,
        security_startup_checks_enabled=True,
        folder_unique_names=True,
        search_hides_protected=True,
    )


@pytest.fixture
def security_config() -> SecuritySchema:
    """Real SecuritySchema with test values."""
    return SecuritySchema(
        jwt=JwtSchema(
            algorithm="HS256",
            access_token_expire_minutes=30,
            audience="test-api",
        ),
        secrets_validation=SecretsValidationSchema(
            jwt_secret_min_length=32,
            admin_password_min_length=8,
        ),
        views=ViewsSchema(unique_window_hours=24),
    )


@pytest.fixture
def app_config(features, security_config) -> SimpleNamespace:
    """Stand-in for AppConfig built from real schema objects."""
    return SimpleNamespace(features=features, security=security_config)


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def make_note():
    """Build a transient Note without touching a database."""

    def _make(**overrides) -> Note:
        fields = {
            "id": "note-1",
            "title": "Untitled Note",
            "is_title_manual": False,
            "content": "",
            "is_pinned": False,
            "folder_id": None,
            "view_count": 0,
            "last_viewed_by": {},
        }
        fields.update(overrides)
        return Note(**fields)

    return _make


@pytest.fixture
def make_folder():
    """Build a transient Folder without touching a database."""

    def _make(**overrides) -> Folder:
        fields = {
            "id": "folder-1",
            "name": "Work",
            "description": None,
            "password_hash": None,
            "is_protected": False,
            "icon": "📁",
        }
        fields.update(overrides)
        return Folder(**fields)

    return _make
