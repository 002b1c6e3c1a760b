"""Unit tests for LocationService projections and administration."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.locations.dtos import CreateLocationDTO, UpdateLocationDTO
from modules.locations.exceptions import LocationNotFound
from modules.locations.models import Location, LocationType
from modules.locations.repositories.django_repository import LocationDjangoRepository
from modules.locations.services import LocationService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return LocationService(repository=LocationDjangoRepository())


@pytest.fixture()
def network(make_location):
    return {
        "nyc": make_location("NYC01 Data Center", "North America", "New York"),
        "nyc_pop": make_location("NYC02 Point of Presence", "North America", "New York", type=LocationType.POP),
        "mia": make_location("MIA01 Cable Landing Station", "North America", "Miami", type=LocationType.CLS),
        "lon": make_location("LON01 Data Center", "Europe", "London"),
        "old": make_location("OLD01 Data Center", "Antarctica", "McMurdo", is_active=False),
    }


class TestProjections:
    def test_regions_are_distinct_sorted_and_active_only(self, service, network):
        assert service.get_all_regions() == ["Europe", "North America"]

    def test_cities_by_region(self, service, network):
        assert service.get_cities_by_region("North America") == ["Miami", "New York"]

    def test_cities_for_unknown_region(self, service, network):
        assert service.get_cities_by_region("Atlantis") == []

    def test_locations_by_region_and_city(self, service, network):
        result = service.get_locations_by_region_and_city("North America", "New York")
        assert [loc.name for loc in result] == ["NYC01 Data Center", "NYC02 Point of Presence"]

    def test_deactivated_location_disappears(self, service, network):
        service.deactivate_location(str(network["lon"].id))
        assert service.get_all_regions() == ["North America"]
        assert network["lon"].id not in {loc.id for loc in service.list_active_locations()}


class TestAdministration:
    def test_create(self, service):
        location = service.create_location(
            CreateLocationDTO(
                name=" FRA01 Data Center ",
                type="DC",
                region="Europe",
                city="Frankfurt",
                latitude=Decimal("50.110900"),
                longitude=Decimal("8.682100"),
            )
        )
        assert location.name == "FRA01 Data Center"
        assert Location.objects.get(id=location.id).is_active is True

    @pytest.mark.parametrize("field,value", [("latitude", "91"), ("longitude", "-180.5")])
    def test_coordinates_bounded(self, field, value):
        payload = {
            "name": "X",
            "type": "POP",
            "region": "R",
            "city": "C",
            "latitude": "0",
            "longitude": "0",
            field: value,
        }
        with pytest.raises(ValidationError):
            CreateLocationDTO.model_validate(payload)

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            CreateLocationDTO(name="X", type="IXP", region="R", city="C", latitude=0, longitude=0)

    def test_update_reactivates(self, service, network):
        location = service.update_location(str(network["old"].id), UpdateLocationDTO(is_active=True))
        assert location.is_active is True
        assert "Antarctica" in service.get_all_regions()

    def test_get_unknown(self, service):
        with pytest.raises(LocationNotFound):
            service.get_location(str(uuid4()))


def test_creation_logs_a_single_dotted_event(service, caplog):
    dto = CreateLocationDTO(name="SIN01", type="DC", region="Asia Pacific", city="Singapore", latitude=1, longitude=103)
    with caplog.at_level(logging.INFO):
        service.create_location(dto)
    messages = [record.getMessage() for record in caplog.records]
    assert any("location.created" in message for message in messages)
    assert not any("location_created" in message for message in messages)
