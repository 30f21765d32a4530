"""Resolution of the strictest admissible concentration limit."""

from __future__ import annotations

from typing import Dict, Optional

from models.records import JurisdictionRefs

SECONDS_PER_DAY = 86400.0


class NoAdmissibleLimitError(ValueError):
    """Raised when no jurisdictional reference applies to the current flow."""

    def __init__(self, refs: JurisdictionRefs, flow: float) -> None:
        super().__init__("No admissible jurisdictional limits.")
        self.refs = refs
        self.flow = flow


def who_dose_equivalent(refs: JurisdictionRefs) -> Optional[float]:
    """Convert the dose-based WHO guideline into a concentration.

    Rearranges ``D = C * IR / BW`` with the ingestion rate expressed in L/s.
    Returns ``None`` when the guideline, body weight or ingestion rate is unset.
    """
    ir_lps = refs.ingestion_rate / SECONDS_PER_DAY
    if refs.cref_who > 0.0 and refs.body_weight > 0.0 and ir_lps > 0.0:
        return refs.cref_who * refs.body_weight / ir_lps
    return None


def admissible_limits(refs: JurisdictionRefs, flow: float) -> Dict[str, float]:
    """Return the applicable limits keyed by jurisdiction."""
    q = max(flow, 0.0)
    limits: Dict[str, float] = {}

    if refs.cref_epa > 0.0:
        limits["epa"] = refs.cref_epa
    # EU limits only apply under active flow.
    if refs.cref_eu > 0.0 and q > 0.0:
        limits["eu"] = refs.cref_eu

    dose_who = who_dose_equivalent(refs)
    if dose_who is not None and dose_who > 0.0:
        limits["who"] = dose_who

    return limits


def resolve_supreme_limit(refs: JurisdictionRefs, flow: float) -> float:
    """Return the strictest (minimum) admissible limit for ``flow``."""
    limits = admissible_limits(refs, flow)
    if not limits:
        raise NoAdmissibleLimitError(refs, flow)
    return min(limits.values())
