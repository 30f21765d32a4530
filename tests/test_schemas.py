"""Unit tests for accumulator snapshot schemas."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from models.records import AccumulatorPhase, JurisdictionRefs, NodeAccumulatorState, SensorSample
from models.schemas import NodeStateSnapshot, SensorSampleModel
from services.accumulator import update


def _running_state() -> NodeAccumulatorState:
    state = NodeAccumulatorState(
        node_id="segment-7",
        contaminant_id="e-coli",
        hazard_weight=3.0,
        refs=JurisdictionRefs(cref_epa=1.0, cref_who=2.0, ingestion_rate=2.0, body_weight=70.0),
    )
    update(state, SensorSample(concentration=2.0, flow=1.0, timestamp=0.0))
    update(state, SensorSample(concentration=2.0, flow=1.0, timestamp=10.0))
    return state


def test_snapshot_restores_equivalent_state() -> None:
    state = _running_state()

    snapshot = NodeStateSnapshot.from_state(state)
    restored = snapshot.to_state()

    assert restored == state
    assert restored is not state
    assert snapshot.phase is AccumulatorPhase.initialized


def test_restored_state_continues_accumulating() -> None:
    state = _running_state()
    payload = json.dumps(NodeStateSnapshot.from_state(state).model_dump(mode="json"))

    restored = NodeStateSnapshot.model_validate(json.loads(payload)).to_state()
    kn = update(restored, SensorSample(concentration=2.0, flow=1.0, timestamp=20.0))

    assert kn == pytest.approx(60.0)


def test_snapshot_defaults_describe_fresh_accumulator() -> None:
    snapshot = NodeStateSnapshot(node_id="outfall-1", contaminant_id="pfbs")

    assert snapshot.phase is AccumulatorPhase.uninitialized
    assert snapshot.to_state().refs == JurisdictionRefs()


def test_snapshot_requires_identity() -> None:
    with pytest.raises(ValidationError):
        NodeStateSnapshot(node_id="", contaminant_id="pfbs")


def test_sample_model_rejects_negative_concentration() -> None:
    with pytest.raises(ValidationError):
        SensorSampleModel(concentration=-0.1, flow=1.0, timestamp=0.0)


def test_sample_model_accepts_non_positive_flow() -> None:
    sample = SensorSampleModel(concentration=1.0, flow=-2.0, timestamp=5.0).to_sample()

    assert sample == SensorSample(concentration=1.0, flow=-2.0, timestamp=5.0)


@pytest.mark.parametrize("field", ["concentration", "flow", "timestamp"])
@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_sample_model_rejects_non_finite_values(field: str, bad: float) -> None:
    payload = {"concentration": 2.0, "flow": 1.0, "timestamp": 10.0}
    payload[field] = bad

    with pytest.raises(ValidationError):
        SensorSampleModel(**payload)


def test_rejected_sample_leaves_accumulated_impact_intact() -> None:
    state = _running_state()

    with pytest.raises(ValidationError):
        SensorSampleModel.model_validate_json(
            '{"concentration": 2.0, "flow": 1.0, "timestamp": NaN}'
        )
    kn = update(state, SensorSampleModel(concentration=2.0, flow=1.0, timestamp=30.0).to_sample())

    assert kn == pytest.approx(90.0)


@pytest.mark.parametrize("field", ["kn", "t_last", "hazard_weight", "volume", "k"])
def test_snapshot_rejects_non_finite_values(field: str) -> None:
    with pytest.raises(ValidationError):
        NodeStateSnapshot(node_id="segment-7", contaminant_id="e-coli", **{field: float("nan")})


def test_refs_model_rejects_non_finite_limits() -> None:
    with pytest.raises(ValidationError):
        NodeStateSnapshot.model_validate(
            {"node_id": "segment-7", "contaminant_id": "e-coli", "refs": {"cref_epa": float("inf")}}
        )
