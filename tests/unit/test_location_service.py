"""
Unit tests for LocationService.

Run: pytest tests/unit/test_location_service.py -v
"""

import pytest

from models.geo import Position
from models.inventory import DirectionalFace, InventoryItem
from services.location_service import (
    NO_LOCATION_GROUP,
    LocationService,
    base_code,
    get_location_service,
)
from tests.factories import InventoryItemFactory


@pytest.fixture
def service() -> LocationService:
    return LocationService()


# ===================
# LOCATION KEYS
# ===================

class TestBaseCode:
    """Tests for base_code()"""

    def test_strips_face_suffix(self):
        assert base_code("PB-0412_Flujo") == "PB-0412"

    def test_keeps_code_without_suffix(self):
        assert base_code("PB-0412") == "PB-0412"

    def test_empty_for_missing_code(self):
        assert base_code(None) == ""
        assert base_code("") == ""


class TestLocationKey:
    """Tests for LocationService.location_key()"""

    def test_five_decimals(self, service):
        assert service.location_key(Position(lat=19.4326, lng=-99.1332)) == "19.43260,-99.13320"

    def test_close_points_share_key(self, service):
        """Points closer than the rounding step are one site."""
        a = service.location_key(Position(lat=19.432601, lng=-99.133201))
        b = service.location_key(Position(lat=19.432604, lng=-99.133199))

        assert a == b

    def test_negative_zero_normalized(self, service):
        key = service.location_key(Position(lat=0.000001, lng=-0.000001))

        assert key == "0.00000,0.00000"

    def test_invalid_position_has_no_key(self, service):
        assert service.location_key(None) is None
        assert service.location_key(Position(lat=0, lng=0)) is None


# ===================
# CO-LOCATION
# ===================

class TestGroupByLocation:
    """Tests for group_by_location() / derive_display_face()"""

    def test_flujo_and_contraflujo_at_one_site(self, service, paired_site):
        groups = service.group_by_location(paired_site)

        flags = groups["19.43260,-99.13320"]
        assert flags.has_flujo is True
        assert flags.has_contraflujo is True
        assert flags.is_complete is True

    def test_lone_face_is_not_complete(self, service, paired_site):
        groups = service.group_by_location(paired_site)

        flags = groups["19.44000,-99.14000"]
        assert flags.has_flujo is True
        assert flags.has_contraflujo is False

    def test_unpositioned_items_skipped(self, service):
        items = [InventoryItemFactory.create(lat=None)]

        assert service.group_by_location(items) == {}

    def test_paired_faces_display_complete(self, service, paired_site):
        """Both faces derive Completo; stored faces stay as they were."""
        flujo, contra, lone = paired_site
        groups = service.group_by_location(paired_site)

        assert service.derive_display_face(flujo, groups) == DirectionalFace.COMPLETO
        assert service.derive_display_face(contra, groups) == DirectionalFace.COMPLETO
        assert service.derive_display_face(lone, groups) == DirectionalFace.FLUJO
        assert flujo.directional_face == DirectionalFace.FLUJO
        assert contra.directional_face == DirectionalFace.CONTRAFLUJO

    def test_pair_is_never_merged(self, service, paired_site):
        """Co-location is an annotation: item count is unchanged."""
        groups = service.group_by_location(paired_site)
        faces = [service.derive_display_face(i, groups) for i in paired_site]

        assert len(faces) == len(paired_site)

    def test_stored_completo_kept(self, service):
        item = InventoryItemFactory.create(directional_face=DirectionalFace.COMPLETO)

        face = service.derive_display_face(item, service.group_by_location([item]))

        assert face == DirectionalFace.COMPLETO

    def test_unpositioned_item_keeps_stored_face(self, service):
        item = InventoryItemFactory.create_contraflujo(lat=None)

        assert service.derive_display_face(item, {}) == DirectionalFace.CONTRAFLUJO


# ===================
# SITE FILTERS
# ===================

class TestSiteFilters:
    """Tests for unique_sites() / complete_pairs()"""

    def test_unique_sites_keeps_first_face(self, service):
        flujo = InventoryItemFactory.create_flujo(id="f", code="PB-1_Flujo", location="Av. Juárez 10")
        contra = InventoryItemFactory.create_contraflujo(id="c", code="PB-1_Contraflujo", location="Av. Juárez 10")
        other = InventoryItemFactory.create_flujo(id="o", code="PB-2_Flujo", location="Av. Juárez 10")

        result = service.unique_sites([flujo, contra, other])

        assert [i.id for i in result] == ["f", "o"]

    def test_complete_pairs(self, service, paired_site):
        pairs = service.complete_pairs(paired_site)

        assert len(pairs) == 1
        assert pairs[0].base_code == "PB-0001"
        assert pairs[0].flujo_id == "pb-1-f"
        assert pairs[0].contraflujo_id == "pb-1-c"
        assert pairs[0].already_reserved is False

    def test_pair_reserved_if_either_face_is(self, service):
        flujo = InventoryItemFactory.create_flujo(code="PB-9_Flujo")
        contra = InventoryItemFactory.create_contraflujo(code="PB-9_Contraflujo", already_reserved_elsewhere=True)

        pairs = service.complete_pairs([flujo, contra])

        assert pairs[0].already_reserved is True

    def test_pairs_require_same_plaza(self, service):
        flujo = InventoryItemFactory.create_flujo(code="PB-9_Flujo", plaza="Monterrey")
        contra = InventoryItemFactory.create_contraflujo(code="PB-9_Contraflujo", plaza="Guadalajara")

        assert service.complete_pairs([flujo, contra]) == []

    def test_items_without_code_never_pair(self, service):
        items = [
            InventoryItem(id="a", directional_face=DirectionalFace.FLUJO, plaza="CDMX"),
            InventoryItem(id="b", directional_face=DirectionalFace.CONTRAFLUJO, plaza="CDMX"),
        ]

        assert service.complete_pairs(items) == []


# ===================
# DISTANCE GROUPS
# ===================

class TestGroupByDistance:
    """Tests for group_by_distance()"""

    @pytest.fixture
    def line_of_items(self):
        # Offsets north of A: B 111 m, C 667 m, D 1334 m
        return [
            InventoryItemFactory.create(id="A", lat=19.400, lng=-99.13),
            InventoryItemFactory.create(id="B", lat=19.401, lng=-99.13),
            InventoryItemFactory.create(id="C", lat=19.406, lng=-99.13),
            InventoryItemFactory.create(id="D", lat=19.412, lng=-99.13),
        ]

    def test_members_keep_minimum_distance(self, service, line_of_items):
        groups = service.group_by_distance(line_of_items, group_size=10, min_distance_m=500)

        assert [g.name for g in groups] == ["Grupo 1", "Grupo 2"]
        assert groups[0].item_ids == ("A", "C", "D")
        assert groups[1].item_ids == ("B",)

    def test_group_size_is_respected(self, service, line_of_items):
        groups = service.group_by_distance(line_of_items, group_size=2, min_distance_m=500)

        assert [g.item_ids for g in groups] == [("A", "C"), ("B", "D")]

    def test_unpositioned_items_in_trailing_group(self, service, line_of_items):
        missing = InventoryItemFactory.create(id="X", lat=None)

        groups = service.group_by_distance(line_of_items + [missing], min_distance_m=500)

        assert groups[-1].name == NO_LOCATION_GROUP
        assert groups[-1].item_ids == ("X",)
        assert groups[-1].positioned is False

    def test_output_is_partition(self, service, line_of_items):
        items = line_of_items + [InventoryItemFactory.create(lat=None)]

        groups = service.group_by_distance(items, group_size=3, min_distance_m=200)
        ids = [i for g in groups for i in g.item_ids]

        assert sorted(ids) == sorted(i.id for i in items)
        assert len(ids) == len(set(ids))

    def test_empty_input(self, service):
        assert service.group_by_distance([]) == []


class TestSingleton:

    def test_get_location_service_returns_same_instance(self):
        assert get_location_service() is get_location_service()
