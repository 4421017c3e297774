"""Edge templates of the standard profile HMM architectures.

A template is a 3x6 matrix. Rows are the kind of the source state
(match, insert, delete); columns are the match, insert and delete state of the
same layer followed by those of the next layer. A NaN entry means the edge does
not exist, any other entry is the prior weight of the edge.
"""

from enum import Enum

import numpy as np

from hmmforge.exceptions import TopologyError

MATCH, INSERT, DELETE = 0, 1, 2
SAME_LAYER = (0, 1, 2)
NEXT_LAYER = (3, 4, 5)
MATCH_NEXT = 3


class Architecture(str, Enum):
    """Standard profile HMM architectures."""

    PLAN7 = "PLAN7"
    """No connections between delete and insert states."""
    PLAN8I = "PLAN8I"
    """Like PLAN7 with connections from delete to insert states of the same layer."""
    PLAN8D = "PLAN8D"
    """Like PLAN7 with connections from insert to delete states of the next layer."""
    PLAN9 = "PLAN9"
    """Every state connects to the insert state of its layer and the match and delete state of the next layer."""


def to_architecture(architecture: "Architecture | str") -> Architecture:
    """Convert an architecture or its name to an Architecture."""
    if isinstance(architecture, Architecture):
        return architecture
    try:
        return Architecture(architecture.upper())
    except ValueError as e:
        raise ValueError(
            f'Unknown architecture: "{architecture}".  '
            f"Available architectures are: {', '.join(a.value for a in Architecture)}"
        ) from e


def get_init_from_to(architecture: "Architecture | str", ess: float) -> np.ndarray:
    """The edge template of `architecture` with the weights of each row summing to `ess`."""
    architecture = to_architecture(architecture)
    nan = np.nan
    third, half = ess / 3.0, ess / 2.0
    full = [nan, third, nan, third, nan, third]
    if architecture is Architecture.PLAN9:
        rows = [full, full, full]
    elif architecture is Architecture.PLAN7:
        rows = [full, [nan, half, nan, half, nan, nan], [nan, nan, nan, half, nan, half]]
    elif architecture is Architecture.PLAN8I:
        rows = [full, [nan, half, nan, half, nan, nan], full]
    else:
        rows = [full, full, [nan, nan, nan, half, nan, half]]
    return np.array(rows, dtype=np.float64)


def validate_init_from_to(init_from_to: np.ndarray) -> np.ndarray:
    """Check the shape and entries of an edge template."""
    init_from_to = np.asarray(init_from_to, dtype=np.float64)
    if init_from_to.shape != (3, 6):
        raise TopologyError(f"init_from_to must have shape (3, 6), got {init_from_to.shape}")
    allowed = ~np.isnan(init_from_to)
    if np.any(init_from_to[allowed] < 0):
        raise TopologyError("init_from_to entries must be non-negative or NaN")
    if not np.all(allowed[:, MATCH_NEXT]):
        raise TopologyError("Every state kind must be connected to the match state of the next layer")
    return init_from_to


def has_insert_states(init_from_to: np.ndarray) -> bool:
    """Whether any edge of the template leads to an insert state."""
    return bool(np.any(~np.isnan(init_from_to[:, [INSERT, NEXT_LAYER[INSERT]]])))


def has_delete_states(init_from_to: np.ndarray) -> bool:
    """Whether any edge of the template leads to a delete state."""
    return bool(np.any(~np.isnan(init_from_to[:, [DELETE, NEXT_LAYER[DELETE]]])))
