"""Internal constants shared across the library."""

USER_AGENT = "fleetroster/0.1"

#: Explicit "unknown / not available" value used in place of a missing field.
NOT_AVAILABLE = "N/A"

DEFAULT_CAPACITY = 50
OVERCROWDED_RATIO = 0.9
UNDERUTILIZED_RATIO = 0.3

# ------------------------------------------------------------------
# Header labels used by the external record stores
# ------------------------------------------------------------------

RIDER_LABELS: dict[str, str] = {
    "serial_no": "Serial No",
    "name": "Name",
    "roll_no": "Roll No",
    "department": "Department",
    "year": "Year",
    "vehicle_no": "Bus No",
    "route_name": "Route Name",
    "route_number": "Route Number",
}

OPERATOR_LABELS: dict[str, str] = {
    "operator_id": "Driver ID",
    "name": "Name",
    "contact": "Contact",
    "vehicle_no": "Bus No",
    "route": "Route",
    "license_no": "License No",
}

VEHICLE_LABELS: dict[str, str] = {
    "vehicle_no": "Bus No",
    "capacity": "Capacity",
    "route_name": "Route Name",
    "route_number": "Route Number",
    "operator_assigned": "Driver Assigned",
    "status": "Status",
}

ROUTE_LABELS: dict[str, str] = {
    "route_number": "Route Number",
    "route_name": "Route Name",
    "stops": "Stops",
    "distance": "Distance",
    "avg_time": "Avg Time",
}

# ------------------------------------------------------------------
# Fields a new record must carry before it is written through
# ------------------------------------------------------------------

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "rider": ("name", "roll_no", "department", "year", "vehicle_no", "route_name", "route_number"),
    "operator": ("name", "operator_id", "contact", "vehicle_no", "route", "license_no"),
    "vehicle": ("vehicle_no", "capacity", "route_name", "route_number", "status"),
}
