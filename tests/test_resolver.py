from __future__ import annotations

from fleetroster.analysis.resolver import ReferenceIndex, resolve, resolve_operator
from fleetroster.models import Operator, Rider, Route, Vehicle

OPERATORS = (
    Operator(operator_id="D-01", name="Kumar", contact="98400", vehicle_no="B7", route="R1", license_no="TN-1"),
    Operator(operator_id="D-02", name="Selvi", vehicle_no="B9", route="R9"),
)
VEHICLES = (
    Vehicle(vehicle_no="B7", capacity=40, route_name="North Loop", route_number="R1", status="active"),
    Vehicle(vehicle_no="B9", status="maintenance"),
    Vehicle(vehicle_no="B7", capacity=99),
)
ROUTES = (Route(route_number="R1", route_name="North Loop", stops="Gate, Market, Depot", distance="12 km"),)


def test_rider_resolves_operator_vehicle_and_route() -> None:
    rider = Rider(roll_no="21CS001", name="Asha", vehicle_no="B7", route_number="R1", route_name="North")

    view = resolve(rider, OPERATORS, VEHICLES, ROUTES)

    assert view.rider is rider
    assert view.operator_id == "D-01"
    assert view.operator_name == "Kumar"
    assert view.operator_contact == "98400"
    assert view.vehicle_capacity == "40"
    assert view.vehicle_status == "active"
    assert view.resolved_route_name == "North Loop"
    assert view.route_stops == "Gate, Market, Depot"
    assert view.vehicle_resolved and view.operator_resolved and view.route_resolved


def test_dangling_vehicle_reference_leaves_sentinels() -> None:
    rider = Rider(roll_no="21CS002", vehicle_no="B12", route_number="R1")

    view = resolve(rider, OPERATORS, VEHICLES, ROUTES)

    assert view.operator_id == "N/A"
    assert view.operator_name == "N/A"
    assert view.vehicle_capacity == "N/A"
    assert view.vehicle_status == "N/A"
    assert not view.vehicle_resolved
    assert not view.operator_resolved
    # The route reference is independent of the vehicle one.
    assert view.route_resolved


def test_rider_without_vehicle_is_unresolved() -> None:
    view = resolve(Rider(roll_no="21CS003"), OPERATORS, VEHICLES, ROUTES)

    assert not view.vehicle_resolved
    assert not view.route_resolved


def test_first_vehicle_with_a_key_wins() -> None:
    view = resolve(Rider(roll_no="21CS010", vehicle_no="B7"), OPERATORS, VEHICLES, ROUTES)
    assert view.vehicle_capacity == "40"


def test_vehicle_without_capacity_reports_sentinel() -> None:
    view = resolve(Rider(roll_no="21CS011", vehicle_no="B9"), OPERATORS, VEHICLES, ROUTES)

    assert view.vehicle_resolved
    assert view.vehicle_capacity == "N/A"
    assert view.operator_name == "Selvi"


def test_resolution_is_idempotent() -> None:
    index = ReferenceIndex.build(OPERATORS, VEHICLES, ROUTES)
    once = index.resolve_rider(Rider(roll_no="21CS001", vehicle_no="B7", route_number="R1"))

    assert index.resolve_rider(once) == once


def test_resolution_is_deterministic() -> None:
    rider = Rider(roll_no="21CS001", vehicle_no="B7", route_number="R1")
    assert resolve(rider, OPERATORS, VEHICLES, ROUTES) == resolve(rider, OPERATORS, VEHICLES, ROUTES)


def test_operator_resolves_vehicle_and_route() -> None:
    view = resolve_operator(OPERATORS[0], VEHICLES, ROUTES)

    assert view.vehicle_capacity == "40"
    assert view.vehicle_route_number == "R1"
    assert view.resolved_route_name == "North Loop"
    assert view.route_distance == "12 km"
    assert view.route_resolved


def test_operator_with_unknown_route() -> None:
    view = resolve_operator(OPERATORS[1], VEHICLES, ROUTES)

    assert view.vehicle_status == "maintenance"
    assert not view.route_resolved
    assert view.route_stops == "N/A"


def test_enriched_row_flattens_rider() -> None:
    view = resolve(Rider(roll_no="21CS001", vehicle_no="B7", route_number="R1"), OPERATORS, VEHICLES, ROUTES)
    row = view.to_row()

    assert row["roll_no"] == "21CS001"
    assert row["operator_name"] == "Kumar"
    assert row["vehicle_resolved"] is True
    assert "rider" not in row
    assert "raw" not in row


def test_keyless_rider_is_not_resolved() -> None:
    rider = Rider.model_validate({"Name": "No Roll", "Bus No": "B7", "Route Number": "R1"})

    view = resolve(rider, OPERATORS, VEHICLES, ROUTES)

    assert view.rider is rider
    assert not view.vehicle_resolved
    assert not view.operator_resolved
    assert not view.route_resolved
    assert view.operator_name == "N/A"


def test_keyless_references_are_excluded_from_joins() -> None:
    operators = (Operator.model_validate({"Name": "Ghost", "Bus No": "B7"}), *OPERATORS[1:])
    vehicles = (Vehicle.model_validate({"Capacity": "60", "Route Number": "R1"}),)
    routes = (Route.model_validate({"Route Name": "Nameless", "Stops": "X"}),)

    view = resolve(Rider(roll_no="21CS001", vehicle_no="B7", route_number="R1"), operators, vehicles, routes)

    assert not view.operator_resolved
    assert view.operator_name == "N/A"
    assert not view.vehicle_resolved
    assert not view.route_resolved


def test_keyless_operator_is_not_resolved() -> None:
    operator = Operator.model_validate({"Name": "Ghost", "Bus No": "B7", "Route": "R1"})

    view = resolve_operator(operator, VEHICLES, ROUTES)

    assert not view.vehicle_resolved
    assert not view.route_resolved
