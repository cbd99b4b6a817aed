from __future__ import annotations

import pytest
from pydantic import ValidationError

from fleetroster.models import (
    LoadClassification,
    LoadRecord,
    Operator,
    Rider,
    Route,
    RosterWarning,
    Vehicle,
    VehicleStatus,
    WarningKind,
    recommendation_for,
)
from fleetroster.models._base import RecordState


def test_rider_validates_from_store_labels() -> None:
    rider = Rider.model_validate(
        {
            "Serial No": 3,
            "Name": " Asha Rao ",
            "Roll No": "21CS001",
            "Department": "CSE",
            "Year": 2,
            "Bus No": "B12",
            "Route Name": "North Loop",
            "Route Number": "R1",
        }
    )

    assert rider.serial_no == "3"
    assert rider.name == "Asha Rao"
    assert rider.year == "2"
    assert rider.vehicle_no == "B12"
    assert rider.key == "21CS001"
    assert rider.has_vehicle
    assert rider.raw["Name"] == " Asha Rao "
    assert rider.record_state is RecordState.CONFIRMED


def test_rider_placeholders_become_not_available() -> None:
    rider = Rider.model_validate({"Name": "Ravi", "Roll No": "--", "Bus No": "", "Year": None})

    assert rider.roll_no == "N/A"
    assert rider.vehicle_no == "N/A"
    assert rider.year == "N/A"
    assert not rider.has_key
    assert not rider.has_vehicle


def test_rider_accepts_canonical_names() -> None:
    rider = Rider(name="Meena", roll_no="21EC010", vehicle_no="B7")
    assert rider.vehicle_no == "B7"
    assert Rider.key_label() == "Roll No"
    assert Rider.label_for("vehicle_no") == "Bus No"
    assert Rider.label_for("unknown_field") == "unknown_field"


def test_models_are_frozen() -> None:
    rider = Rider(name="Meena")
    with pytest.raises(ValidationError):
        rider.name = "Other"  # type: ignore[misc]


def test_to_store_record_uses_labels_and_skips_missing() -> None:
    rider = Rider(name="Meena", roll_no="21EC010", vehicle_no="B7", source_id="ECE")

    assert rider.to_store_record() == {"Name": "Meena", "Roll No": "21EC010", "Bus No": "B7"}


def test_to_row_excludes_raw() -> None:
    row = Route.model_validate({"Route Number": "R1", "Route Name": "North Loop", "Stops": "A, B"}).to_row()

    assert "raw" not in row
    assert row["route_number"] == "R1"
    assert row["distance"] == "N/A"


def test_operator_aliases() -> None:
    operator = Operator.model_validate({"Driver ID": "D-01", "Name": "Kumar", "Bus No": "B12", "License No": "TN-1"})
    assert operator.operator_id == "D-01"
    assert operator.key == "D-01"
    assert operator.license_no == "TN-1"
    assert Operator.key_label() == "Driver ID"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("50", 50), (45, 45), ("45 seats", 45), ("0", None), ("-3", None), ("", None), ("full", None)],
)
def test_vehicle_capacity_parsing(raw: object, expected: int | None) -> None:
    vehicle = Vehicle.model_validate({"Bus No": "B1", "Capacity": raw})
    assert vehicle.capacity == expected


def test_vehicle_effective_capacity_defaults() -> None:
    assert Vehicle(vehicle_no="B1").effective_capacity() == 50
    assert Vehicle(vehicle_no="B1").effective_capacity(default=40) == 40
    assert Vehicle(vehicle_no="B1", capacity=30).effective_capacity() == 30


def test_vehicle_status_kind_tolerates_free_text() -> None:
    assert Vehicle(status="Active").status_kind is VehicleStatus.ACTIVE
    assert Vehicle(status="MAINTENANCE").status_kind is VehicleStatus.MAINTENANCE
    assert Vehicle(status="parked at depot").status_kind is VehicleStatus.UNKNOWN
    assert Vehicle().status_kind is VehicleStatus.UNKNOWN


def test_load_record_recommendation_and_row() -> None:
    record = LoadRecord(
        vehicle_no="B12",
        capacity=50,
        assigned_riders=46,
        utilization=92,
        classification=LoadClassification.OVERCROWDED,
    )

    assert record.recommendation == "extra vehicle required"
    assert record.ratio == pytest.approx(0.92)
    assert record.to_row()["recommendation"] == "extra vehicle required"
    assert recommendation_for(LoadClassification.OK) == "optimal capacity"
    assert recommendation_for(LoadClassification.UNDERUTILIZED) == "vehicle can be reduced"


def test_warning_str() -> None:
    warning = RosterWarning(kind=WarningKind.SOURCE_UNAVAILABLE, source_id="CSBS", message="HTTP 503")
    assert str(warning) == "[source_unavailable] CSBS: HTTP 503"


def test_real_values_resembling_placeholders_are_kept() -> None:
    rider = Rider.model_validate({"Name": "Na", "Roll No": "21CS1", "Department": "None", "Year": "null"})

    assert rider.name == "Na"
    assert rider.department == "None"
    assert rider.year == "null"


def test_from_store_record_ignores_bookkeeping_columns() -> None:
    operator = Operator.from_store_record({"Driver ID": "D-01", "record_state": "pending", "source_id": "elsewhere"})

    assert operator.record_state is RecordState.CONFIRMED
    assert operator.source_id == "N/A"
    assert operator.raw == {"Driver ID": "D-01", "record_state": "pending", "source_id": "elsewhere"}
