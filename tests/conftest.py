"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest

from models.geo import Position
from services.selection_service import SelectionSet
from services.zone_service import ZoneRegistry
from tests.factories import InventoryItemFactory, ZoneFactory, ReservationFactory


@pytest.fixture(autouse=True)
def reset_factories():
    """Keep generated ids and codes stable per test."""
    InventoryItemFactory.reset_counter()
    ZoneFactory.reset_counter()
    ReservationFactory.reset_counter()
    yield


# ===================
# GEO FIXTURES
# ===================

@pytest.fixture
def zocalo() -> Position:
    """Mexico City center, used as the default zone center."""
    return Position(lat=19.4326, lng=-99.1332)


@pytest.fixture
def zone_registry() -> ZoneRegistry:
    """Empty zone registry for one session."""
    return ZoneRegistry()


@pytest.fixture
def selection() -> SelectionSet:
    """Empty selection for one session."""
    return SelectionSet()


@pytest.fixture
def paired_site() -> list:
    """
    Flujo + Contraflujo faces of one bus shelter plus a lone Flujo elsewhere.

    Usage:
        def test_something(paired_site):
            flujo, contra, lone = paired_site
    """
    flujo = InventoryItemFactory.create_flujo(
        id="pb-1-f", code="PB-0001_Flujo", lat=19.4326, lng=-99.1332
    )
    contra = InventoryItemFactory.create_contraflujo(
        id="pb-1-c", code="PB-0001_Contraflujo", lat=19.4326, lng=-99.1332
    )
    lone = InventoryItemFactory.create_flujo(
        id="pb-2-f", code="PB-0002_Flujo", lat=19.4400, lng=-99.1400
    )
    return [flujo, contra, lone]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
