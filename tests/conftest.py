from __future__ import annotations

import pytest

from fleetroster.config import RosterConfig, SourceEndpoint
from fleetroster.models._base import EntityKind


def make_config(**overrides: object) -> RosterConfig:
    kwargs: dict[str, object] = {
        "rider_shards": (
            SourceEndpoint(source_id="CSE", url="https://stores.test/cse"),
            SourceEndpoint(source_id="CSBS", url="https://stores.test/csbs"),
            SourceEndpoint(source_id="ECE", url="https://stores.test/ece"),
        ),
        "operator_source": SourceEndpoint(
            source_id="operators", url="https://stores.test/operators", entity=EntityKind.OPERATOR
        ),
        "vehicle_source": SourceEndpoint(
            source_id="vehicles", url="https://stores.test/vehicles", entity=EntityKind.VEHICLE
        ),
        "route_source": SourceEndpoint(source_id="routes", url="https://stores.test/routes", entity=EntityKind.ROUTE),
    }
    kwargs.update(overrides)
    return RosterConfig(**kwargs)  # type: ignore[arg-type]


@pytest.fixture
def config() -> RosterConfig:
    return make_config()
