"""
Operator Report for approximation auditing.

Every operator that performs an approximation emits an OpReport that:
1. Declares what family mapping occurred (family_in → family_out)
2. Lists all approximation triggers (quadrature, truncation, fallback, ...)
3. Declares whether the result is closed-form or came from an iterative solver
4. Records whether a domain constraint was hit (variance floor, degenerate-integral fallback)

Reports are side records: message values never depend on them, so identical
inputs still produce identical messages.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Optional


def _json_safe(obj):
    """
    Convert common scientific types to JSON-serializable Python types.

    Values that cannot be converted fall back to their repr so that emitting a
    report never fails.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj

    if isinstance(obj, (list, tuple)):
        return [_json_safe(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _json_safe(v) for k, v in obj.items()}

    import numpy as np

    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()

    return repr(obj)


@dataclass
class OpReport:
    """
    Audit record for one operator invocation.

    Attributes:
        name: Operator name (e.g., "BoxCoxQuadrature")
        exact: True if operation is exact (no approximation)
        approximation_triggers: List of what caused approximation
        family_in: Input distribution family
        family_out: Output distribution family
        closed_form: True if no iterative solver was used
        solver_used: Name of solver if iterative (e.g., "Newton")
        domain_projection: Whether a domain constraint was hit
        metrics: Additional metrics for debugging
        notes: Human-readable explanation
        timestamp: When the report was generated
    """
    name: str
    exact: bool
    approximation_triggers: list[str] = field(default_factory=list)
    family_in: str = ""
    family_out: str = ""
    closed_form: bool = False
    solver_used: Optional[str] = None
    domain_projection: bool = False
    metrics: dict = field(default_factory=dict)
    notes: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def validate(self) -> None:
        """
        Validate the report is internally consistent.

        Raises ValueError if validation fails.
        """
        if self.exact and self.approximation_triggers:
            raise ValueError("Exact op cannot declare approximation triggers.")

        if self.closed_form and self.solver_used is not None:
            raise ValueError("Closed-form op must not list a solver.")

        if not self.exact and not self.approximation_triggers:
            raise ValueError("Approximate op must declare at least one approximation trigger.")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "exact": self.exact,
            "approximation_triggers": list(self.approximation_triggers),
            "family_in": self.family_in,
            "family_out": self.family_out,
            "closed_form": self.closed_form,
            "solver_used": self.solver_used,
            "domain_projection": self.domain_projection,
            "metrics": _json_safe(dict(self.metrics)),
            "notes": self.notes,
            "timestamp": self.timestamp,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)
