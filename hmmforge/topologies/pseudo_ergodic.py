"""Pseudo-ergodic topologies: a clique of emitting states that drains into a silent final state.

Unlike an ergodic HMM, such an HMM models the length of its input, i.e. the
likelihoods of all sequences of all lengths sum to one.
"""

import numpy as np

from hmmforge.emissions import EmissionKind, EmissionSpec
from hmmforge.exceptions import TopologyError
from hmmforge.topologies.context_graph import ContextGraph
from hmmforge.topologies.topology import Topology

FINAL_NAME: str = "F"


def create_pseudo_ergodic_topology(
    num_states: int,
    ess: float,
    self_transition_fraction: float,
    final_transition_fraction: float,
    insert_uniform: bool = False,
) -> Topology:
    """Create `num_states` fully connected emitting states plus an absorbing final state.

    Every emitting state returns to itself with prior probability
    `self_transition_fraction`, moves to the final state with prior probability
    `final_transition_fraction` and spreads the remainder uniformly over the other
    emitting states.
    """
    if num_states < 1:
        raise TopologyError(f"num_states must be positive, got {num_states}")
    if not ess > 0:
        raise TopologyError(f"ess must be positive, got {ess}")
    for name, fraction in (
        ("self_transition_fraction", self_transition_fraction),
        ("final_transition_fraction", final_transition_fraction),
    ):
        if not 0 <= fraction <= 1:
            raise TopologyError(f"{name} must be in [0, 1], got {fraction}")
    if final_transition_fraction == 0:
        raise TopologyError("final_transition_fraction must be positive, otherwise the final state is never reached")
    spread_fraction = 1 - self_transition_fraction - final_transition_fraction
    if spread_fraction < -1e-12:
        raise TopologyError(
            "self_transition_fraction and final_transition_fraction must not sum to more than 1, got "
            f"{self_transition_fraction} + {final_transition_fraction}"
        )
    spread_fraction = max(spread_fraction, 0.0)

    final = num_states
    graph = ContextGraph()
    graph.add_node((), range(num_states))

    children = range(num_states + 1)
    other = spread_fraction / (num_states - 1) if num_states > 1 else 0.0
    for i in range(num_states):
        weights = np.full(num_states + 1, other)
        weights[i] = self_transition_fraction
        weights[final] = final_transition_fraction
        graph.add_node((i,), children, weights)
    graph.finalize(1)

    emitting = EmissionKind.UNIFORM if insert_uniform else EmissionKind.DISCRETE
    return Topology(
        names=[str(i) for i in range(num_states)] + [FINAL_NAME],
        emissions=[EmissionSpec(emitting) for _ in range(num_states)] + [EmissionSpec(EmissionKind.SILENT)],
        graph=graph,
        order=1,
        ess=ess,
    )
