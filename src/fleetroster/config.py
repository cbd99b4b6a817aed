"""Client configuration for fleetroster."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from fleetroster._constants import DEFAULT_CAPACITY, OVERCROWDED_RATIO, UNDERUTILIZED_RATIO
from fleetroster.exceptions import RosterConfigError
from fleetroster.models._base import EntityKind


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise RosterConfigError(f"{key} must be numeric, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class SourceEndpoint:
    """One external record store.

    Parameters
    ----------
    source_id : str
        Stable identifier used in warnings and logs (e.g. ``"CSE"``).
    url : str
        Base URL of the store's REST endpoint.
    entity : EntityKind
        Entity type held by the store.
    label : str or None
        Organizational sub-unit the shard holds (rider shards only).
        Defaults to ``source_id``.
    """

    source_id: str
    url: str
    entity: EntityKind = EntityKind.RIDER
    label: str | None = None

    @property
    def unit(self) -> str:
        return self.label or self.source_id


@dataclasses.dataclass(frozen=True)
class LoadThresholds:
    """Occupancy classification thresholds.

    ``overcrowded_ratio`` and ``underutilized_ratio`` are fractions of the
    vehicle capacity; ``default_capacity`` applies when a vehicle has no
    usable capacity of its own.
    """

    overcrowded_ratio: float = OVERCROWDED_RATIO
    underutilized_ratio: float = UNDERUTILIZED_RATIO
    default_capacity: int = DEFAULT_CAPACITY

    def __post_init__(self) -> None:
        if not 0 < self.overcrowded_ratio <= 1:
            raise RosterConfigError(f"overcrowded_ratio must be in (0, 1], got {self.overcrowded_ratio}")
        if not 0 < self.underutilized_ratio <= 1:
            raise RosterConfigError(f"underutilized_ratio must be in (0, 1], got {self.underutilized_ratio}")
        if self.underutilized_ratio >= self.overcrowded_ratio:
            raise RosterConfigError("underutilized_ratio must be lower than overcrowded_ratio")
        if self.default_capacity <= 0:
            raise RosterConfigError(f"default_capacity must be positive, got {self.default_capacity}")


@dataclasses.dataclass(frozen=True)
class RosterConfig:
    """Client configuration.

    Parameters
    ----------
    rider_shards : tuple[SourceEndpoint, ...]
        Rider stores, one per organizational sub-unit. Their order is the
        merge priority order.
    operator_source : SourceEndpoint
        Operator store.
    vehicle_source : SourceEndpoint
        Vehicle store.
    route_source : SourceEndpoint
        Route store.
    default_rider_shard : str or None
        Source id that receives new riders whose department matches no
        shard. Defaults to the first rider shard.
    api_token : str or None
        Bearer token sent with every request, if the stores require one.
    request_timeout : float
        Total per-request timeout in seconds.
    thresholds : LoadThresholds
        Load classification thresholds.
    api_trace_enabled : bool
        Log redacted request/response payloads at DEBUG level.
    """

    rider_shards: tuple[SourceEndpoint, ...]
    operator_source: SourceEndpoint
    vehicle_source: SourceEndpoint
    route_source: SourceEndpoint
    default_rider_shard: str | None = None
    api_token: str | None = None
    request_timeout: float = 15.0
    thresholds: LoadThresholds = dataclasses.field(default_factory=LoadThresholds)
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.rider_shards:
            raise RosterConfigError("at least one rider shard is required")
        ids = [shard.source_id for shard in self.rider_shards]
        if len(set(ids)) != len(ids):
            raise RosterConfigError(f"rider shard ids must be unique, got {ids}")
        for shard in self.rider_shards:
            if shard.entity is not EntityKind.RIDER:
                raise RosterConfigError(f"rider shard {shard.source_id} has entity {shard.entity}")
        expected = (
            (self.operator_source, EntityKind.OPERATOR),
            (self.vehicle_source, EntityKind.VEHICLE),
            (self.route_source, EntityKind.ROUTE),
        )
        for endpoint, entity in expected:
            if endpoint.entity is not entity:
                raise RosterConfigError(f"source {endpoint.source_id} must hold {entity}, got {endpoint.entity}")
        if self.default_rider_shard is not None and self.default_rider_shard not in ids:
            raise RosterConfigError(f"default_rider_shard {self.default_rider_shard!r} is not a rider shard")
        if self.request_timeout <= 0:
            raise RosterConfigError("request_timeout must be positive")

    def sources(self) -> tuple[SourceEndpoint, ...]:
        """Every configured endpoint, rider shards first."""
        return (*self.rider_shards, self.operator_source, self.vehicle_source, self.route_source)

    def rider_shard_for(self, department: str | None) -> SourceEndpoint:
        """Shard that receives a new rider of *department*."""
        if department:
            wanted = department.strip().lower()
            for shard in self.rider_shards:
                if shard.unit.strip().lower() == wanted:
                    return shard
        if self.default_rider_shard is not None:
            for shard in self.rider_shards:
                if shard.source_id == self.default_rider_shard:
                    return shard
        return self.rider_shards[0]

    def source_for(self, entity: EntityKind) -> SourceEndpoint:
        """Single-source endpoint for operators, vehicles, or routes."""
        if entity is EntityKind.OPERATOR:
            return self.operator_source
        if entity is EntityKind.VEHICLE:
            return self.vehicle_source
        if entity is EntityKind.ROUTE:
            return self.route_source
        raise RosterConfigError(f"{entity} is sharded; use rider_shard_for()")

    @classmethod
    def from_env(cls, **overrides: Any) -> RosterConfig:
        """Create configuration from environment variables.

        Reads ``FLEET_RIDER_SHARDS`` (comma-separated ``id=url`` pairs in
        priority order), ``FLEET_OPERATOR_URL``, ``FLEET_VEHICLE_URL``,
        ``FLEET_ROUTE_URL`` and optional ``FLEET_*`` tuning variables.
        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        if "rider_shards" not in overrides:
            raw_shards = env.get("FLEET_RIDER_SHARDS", "")
            shards: list[SourceEndpoint] = []
            for item in raw_shards.split(","):
                item = item.strip()
                if not item:
                    continue
                source_id, sep, url = item.partition("=")
                if not sep or not source_id.strip() or not url.strip():
                    raise RosterConfigError(f"FLEET_RIDER_SHARDS entry must be id=url, got {item!r}")
                shards.append(SourceEndpoint(source_id=source_id.strip(), url=url.strip()))
            config_kwargs["rider_shards"] = tuple(shards)

        _ENV_SOURCE_MAP = {
            "FLEET_OPERATOR_URL": ("operator_source", "operators", EntityKind.OPERATOR),
            "FLEET_VEHICLE_URL": ("vehicle_source", "vehicles", EntityKind.VEHICLE),
            "FLEET_ROUTE_URL": ("route_source", "routes", EntityKind.ROUTE),
        }
        for env_key, (field_name, source_id, entity) in _ENV_SOURCE_MAP.items():
            if field_name in overrides:
                continue
            url = env.get(env_key)
            if not url:
                raise RosterConfigError(f"{env_key} is not set")
            config_kwargs[field_name] = SourceEndpoint(source_id=source_id, url=url, entity=entity)

        default_shard = env.get("FLEET_DEFAULT_RIDER_SHARD")
        if default_shard:
            config_kwargs["default_rider_shard"] = default_shard

        token = env.get("FLEET_API_TOKEN")
        if token:
            config_kwargs["api_token"] = token

        if "request_timeout" not in overrides:
            timeout = _env_float(env, "FLEET_REQUEST_TIMEOUT")
            if timeout is not None:
                config_kwargs["request_timeout"] = timeout

        if "thresholds" not in overrides:
            threshold_kwargs: dict[str, Any] = {}
            over = _env_float(env, "FLEET_OVERCROWDED_RATIO")
            if over is not None:
                threshold_kwargs["overcrowded_ratio"] = over
            under = _env_float(env, "FLEET_UNDERUTILIZED_RATIO")
            if under is not None:
                threshold_kwargs["underutilized_ratio"] = under
            capacity = _env_float(env, "FLEET_DEFAULT_CAPACITY")
            if capacity is not None:
                threshold_kwargs["default_capacity"] = int(capacity)
            config_kwargs["thresholds"] = LoadThresholds(**threshold_kwargs)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(env.get("FLEET_API_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
