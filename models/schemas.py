"""Pydantic schemas for persisting and restoring accumulator state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from models.records import AccumulatorPhase, JurisdictionRefs, NodeAccumulatorState, SensorSample


class SensorSampleModel(BaseModel):
    """A sensor sample received from an external payload."""

    model_config = ConfigDict(allow_inf_nan=False)

    concentration: float = Field(..., ge=0.0)
    flow: float = Field(..., description="Volumetric flow in m^3/s; <= 0 means no flow.")
    timestamp: float = Field(..., description="Seconds since epoch.")

    def to_sample(self) -> SensorSample:
        return SensorSample(
            concentration=self.concentration, flow=self.flow, timestamp=self.timestamp
        )


class JurisdictionRefsModel(BaseModel):
    """Reference limits; non-positive values mark a jurisdiction as unset."""

    model_config = ConfigDict(allow_inf_nan=False)

    cref_epa: float = 0.0
    cref_eu: float = 0.0
    cref_who: float = 0.0
    ingestion_rate: float = Field(default=0.0, description="Ingestion rate in L/day.")
    body_weight: float = Field(default=0.0, description="Body weight in kg.")

    @classmethod
    def from_refs(cls, refs: JurisdictionRefs) -> "JurisdictionRefsModel":
        return cls(
            cref_epa=refs.cref_epa,
            cref_eu=refs.cref_eu,
            cref_who=refs.cref_who,
            ingestion_rate=refs.ingestion_rate,
            body_weight=refs.body_weight,
        )

    def to_refs(self) -> JurisdictionRefs:
        return JurisdictionRefs(**self.model_dump())


class NodeStateSnapshot(BaseModel):
    """Serializable image of a ``NodeAccumulatorState``."""

    model_config = ConfigDict(allow_inf_nan=False)

    node_id: str = Field(..., min_length=1)
    contaminant_id: str = Field(..., min_length=1)
    hazard_weight: float = 1.0
    refs: JurisdictionRefsModel = Field(default_factory=JurisdictionRefsModel)
    volume: float = 0.0
    k: float = 0.0
    kn: float = 0.0
    t_last: float = 0.0
    has_last: bool = False

    @property
    def phase(self) -> AccumulatorPhase:
        return self.to_state().phase

    @classmethod
    def from_state(cls, state: NodeAccumulatorState) -> "NodeStateSnapshot":
        return cls(
            node_id=state.node_id,
            contaminant_id=state.contaminant_id,
            hazard_weight=state.hazard_weight,
            refs=JurisdictionRefsModel.from_refs(state.refs),
            volume=state.volume,
            k=state.k,
            kn=state.kn,
            t_last=state.t_last,
            has_last=state.has_last,
        )

    def to_state(self) -> NodeAccumulatorState:
        return NodeAccumulatorState(
            node_id=self.node_id,
            contaminant_id=self.contaminant_id,
            hazard_weight=self.hazard_weight,
            refs=self.refs.to_refs(),
            volume=self.volume,
            k=self.k,
            kn=self.kn,
            t_last=self.t_last,
            has_last=self.has_last,
        )
