"""Pytest configuration for the tax-estimator test suite."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from tax_estimator.main import app
from tax_estimator.services.tax_engine import TaxEstimationService


@pytest.fixture
def engine():
    return TaxEstimationService()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def audit_logger(monkeypatch):
    """Replace the app's audit logger with a mock for the test."""
    mock_logger = MagicMock()
    monkeypatch.setattr(app.state, "audit_logger", mock_logger)
    return mock_logger
