"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class SensorSample:
    """A single concentration/flow reading for one node."""

    concentration: float
    flow: float
    timestamp: float


@dataclass(frozen=True, slots=True)
class JurisdictionRefs:
    """Reference limits for one contaminant. Values <= 0 mean "unset"."""

    cref_epa: float = 0.0
    cref_eu: float = 0.0
    cref_who: float = 0.0
    ingestion_rate: float = 0.0  # L/day
    body_weight: float = 0.0  # kg


class AccumulatorPhase(str, Enum):
    """Lifecycle of an accumulator: waiting for a baseline, or integrating."""

    uninitialized = "uninitialized"
    initialized = "initialized"


class SkipReason(str, Enum):
    """Why a sample contributed no impact."""

    initialized = "initialized"
    non_positive_interval = "non_positive_interval"
    no_flow = "no_flow"
    no_exceedance = "no_exceedance"


@dataclass(slots=True)
class NodeAccumulatorState:
    """Mutable accumulator for one node and contaminant pair."""

    node_id: str
    contaminant_id: str
    hazard_weight: float = 1.0
    refs: JurisdictionRefs = field(default_factory=JurisdictionRefs)
    volume: float = 0.0  # m^3
    k: float = 0.0  # 1/s
    kn: float = 0.0
    t_last: float = 0.0
    has_last: bool = False

    @property
    def phase(self) -> AccumulatorPhase:
        if self.has_last:
            return AccumulatorPhase.initialized
        return AccumulatorPhase.uninitialized
