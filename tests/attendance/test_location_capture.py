import pytest

from src.timekeeping.timekeeping.attendance.location import capture_location
from src.timekeeping.timekeeping.core.exceptions import InvalidLocationError, LocationUnavailableError


def test_capture_reads_accuracy_aliases():
    a = capture_location({"latitude": "40.71", "longitude": -74.0, "accuracy": 15})
    b = capture_location({"latitude": 40.71, "longitude": -74.0, "accuracyMeters": "15"})

    assert a == b
    assert a.accuracy_meters == 15.0


def test_device_error_is_reported_as_unavailable():
    with pytest.raises(LocationUnavailableError):
        capture_location({"locationError": "User denied Geolocation"})


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"latitude": 40.0, "longitude": -74.0},
        {"latitude": "", "longitude": -74.0, "accuracy": 5},
        {"latitude": "north", "longitude": -74.0, "accuracy": 5},
        {"latitude": True, "longitude": -74.0, "accuracy": 5},
        {"latitude": "nan", "longitude": -74.0, "accuracy": 5},
        {"latitude": -90.5, "longitude": -74.0, "accuracy": 5},
    ],
)
def test_missing_or_bad_coordinates(payload):
    with pytest.raises(InvalidLocationError):
        capture_location(payload)
