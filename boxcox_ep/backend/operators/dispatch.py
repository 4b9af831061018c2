"""
Explicit dispatch table for message requests.

A host engine asks for the message (or evidence) of a factor kind toward a
target role. The table is built once at startup, keyed by (FactorKind, Role),
and is read-only afterwards; lookups never use reflection.

    (TRANSFORM, OUTPUT)    output_message(y, lam)
    (TRANSFORM, LAMBDA)    lambda_message(output, y, lam)
    (TRANSFORM, EVIDENCE)  log_average_factor(output, y, lam)
    (JACOBIAN,  OUTPUT)    value_message(lam, sum_log_y)
    (JACOBIAN,  LAMBDA)    lambda_message(sum_log_y, lam)
    (JACOBIAN,  EVIDENCE)  log_average_factor(sum_log_y, lam)
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from boxcox_ep.common.errors import UnsupportedRequest
from boxcox_ep.common.param_models import BoxCoxParams
from boxcox_ep.backend.operators.jacobian_op import JacobianFactor
from boxcox_ep.backend.operators.transform_op import TransformFactor


class FactorKind(str, Enum):
    TRANSFORM = "transform"
    JACOBIAN = "jacobian"


class Role(str, Enum):
    OUTPUT = "output"
    LAMBDA = "lambda"
    EVIDENCE = "evidence"


DispatchKey = Tuple[FactorKind, Role]
DispatchTable = Mapping[DispatchKey, Callable[..., Any]]


def build_dispatch_table(
    params: Optional[BoxCoxParams] = None,
    extra: Optional[Mapping[DispatchKey, Callable[..., Any]]] = None,
) -> DispatchTable:
    """
    Build the read-only (kind, role) -> operator mapping.

    `extra` entries are merged last and may add or override registrations.
    """
    params = params or BoxCoxParams()
    transform_factor = TransformFactor(params.quadrature)
    jacobian_factor = JacobianFactor(params.jacobian)

    table: Dict[DispatchKey, Callable[..., Any]] = {
        (FactorKind.TRANSFORM, Role.OUTPUT): transform_factor.output_message,
        (FactorKind.TRANSFORM, Role.LAMBDA): transform_factor.lambda_message,
        (FactorKind.TRANSFORM, Role.EVIDENCE): transform_factor.log_average_factor,
        (FactorKind.JACOBIAN, Role.OUTPUT): jacobian_factor.value_message,
        (FactorKind.JACOBIAN, Role.LAMBDA): jacobian_factor.lambda_message,
        (FactorKind.JACOBIAN, Role.EVIDENCE): jacobian_factor.log_average_factor,
    }
    if extra:
        table.update(extra)
    return MappingProxyType(table)


def dispatch(table: DispatchTable, kind: FactorKind, role: Role, **arguments: Any) -> Any:
    """Invoke the operator registered for (kind, role) with named role arguments."""
    try:
        key = (FactorKind(kind), Role(role))
    except ValueError as e:
        raise UnsupportedRequest(f"Unknown factor kind or role: {kind!r}, {role!r}") from e
    operator = table.get(key)
    if operator is None:
        raise UnsupportedRequest(f"No message operator registered for {key[0].value} -> {key[1].value}")
    return operator(**arguments)
