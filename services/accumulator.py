"""Per-node CEIM accumulation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from models.records import JurisdictionRefs, NodeAccumulatorState, SensorSample, SkipReason
from services.limits import NoAdmissibleLimitError, resolve_supreme_limit
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of feeding one sample into an accumulator."""

    kn: float
    increment: float = 0.0
    reason: Optional[SkipReason] = None
    csup: Optional[float] = None
    cout: Optional[float] = None

    @property
    def integrated(self) -> bool:
        return self.reason is None


def modeled_outflow(state: NodeAccumulatorState, sample: SensorSample) -> float:
    """Outflow concentration under first-order decay in a stirred control volume.

    Decay is applied only when ``k > 0``; ``volume <= 0`` gives zero residence
    time. Callers must ensure ``sample.flow > 0``.
    """
    tau = state.volume / sample.flow if state.volume > 0.0 else 0.0
    if state.k > 0.0:
        return sample.concentration * math.exp(-state.k * tau)
    return sample.concentration


def _skip(
    state: NodeAccumulatorState, sample: SensorSample, reason: SkipReason, **extra: float
) -> UpdateOutcome:
    state.t_last = sample.timestamp
    logger.debug(
        "Sample skipped",
        extra={
            "node_id": state.node_id,
            "contaminant_id": state.contaminant_id,
            "timestamp": sample.timestamp,
            "reason": reason.value,
        },
    )
    return UpdateOutcome(kn=state.kn, reason=reason, **extra)


def step(state: NodeAccumulatorState, sample: SensorSample) -> UpdateOutcome:
    """Advance ``state`` by one sample and describe what happened."""
    if not state.has_last:
        state.has_last = True
        return _skip(state, sample, SkipReason.initialized)

    dt = sample.timestamp - state.t_last
    if dt <= 0.0:
        return _skip(state, sample, SkipReason.non_positive_interval)
    if sample.flow <= 0.0:
        return _skip(state, sample, SkipReason.no_flow)

    cout_model = modeled_outflow(state, sample)

    try:
        csup = resolve_supreme_limit(state.refs, sample.flow)
    except NoAdmissibleLimitError:
        logger.warning(
            "No admissible limit; sample not integrated",
            extra={
                "node_id": state.node_id,
                "contaminant_id": state.contaminant_id,
                "timestamp": sample.timestamp,
            },
        )
        raise

    # Reported outflow never exceeds the strictest limit.
    cout = min(cout_model, csup)
    delta_c = sample.concentration - cout
    if delta_c <= 0.0:
        return _skip(state, sample, SkipReason.no_exceedance, csup=csup, cout=cout)

    increment = state.hazard_weight * (delta_c / csup) * sample.flow * dt
    state.kn += increment
    state.t_last = sample.timestamp

    logger.debug(
        "Exceedance integrated",
        extra={
            "node_id": state.node_id,
            "contaminant_id": state.contaminant_id,
            "timestamp": sample.timestamp,
            "dt": dt,
            "csup": csup,
            "increment": increment,
            "kn": state.kn,
        },
    )
    return UpdateOutcome(kn=state.kn, increment=increment, csup=csup, cout=cout)


def update(state: NodeAccumulatorState, sample: SensorSample) -> float:
    """Advance ``state`` in place and return the accumulated impact."""
    return step(state, sample).kn


class NodeAccumulator:
    """Owns a single accumulator state; not safe for concurrent writers."""

    def __init__(self, state: NodeAccumulatorState) -> None:
        self._state = state

    @classmethod
    def create(
        cls,
        node_id: str,
        contaminant_id: str,
        refs: JurisdictionRefs,
        hazard_weight: Optional[float] = None,
        volume: float = 0.0,
        k: float = 0.0,
    ) -> "NodeAccumulator":
        """Build a fresh accumulator, defaulting the weight from settings."""
        weight = (
            get_settings().default_hazard_weight if hazard_weight is None else hazard_weight
        )
        return cls(
            NodeAccumulatorState(
                node_id=node_id,
                contaminant_id=contaminant_id,
                hazard_weight=weight,
                refs=refs,
                volume=volume,
                k=k,
            )
        )

    @property
    def state(self) -> NodeAccumulatorState:
        return self._state

    @property
    def kn(self) -> float:
        return self._state.kn

    def step(self, sample: SensorSample) -> UpdateOutcome:
        return step(self._state, sample)

    def update(self, sample: SensorSample) -> float:
        return update(self._state, sample)

    def accumulate(self, samples: Iterable[SensorSample]) -> float:
        """Feed samples in order and return the final accumulated impact."""
        for sample in samples:
            update(self._state, sample)
        return self._state.kn
