"""Ergodic, i.e. completely connected, topologies."""

import itertools
from collections.abc import Sequence

import numpy as np

from hmmforge.emissions import EmissionKind, EmissionSpec, to_emission_kind
from hmmforge.exceptions import TopologyError
from hmmforge.topologies.context_graph import ContextGraph
from hmmforge.topologies.topology import Topology


def self_transition_weights(num_states: int, state: int, self_transition_fraction: float) -> np.ndarray:
    """Prior weights favouring a return to `state`, spreading the rest uniformly over the other states."""
    if num_states == 1:
        return np.ones(1)
    weights = np.full(num_states, (1 - self_transition_fraction) / (num_states - 1))
    weights[state] = self_transition_fraction
    return weights


def create_ergodic_topology(
    emission_kinds: Sequence[EmissionKind | str],
    order: int,
    ess: float,
    self_transition_fraction: float,
    expected_sequence_length: int,
) -> Topology:
    """Create a completely connected topology of Markov order `order`.

    There is one node for every context of length 0 to `order`. Contexts shorter
    than `order` are visited once at the start of a sequence, whereas the contexts
    of length `order` are visited for the remaining `expected_sequence_length - order`
    positions, so the ESS is propagated for `expected_sequence_length` rounds. The
    mass of a level is spread over all of its contexts: the order `order` level as a
    whole receives `ess * (expected_sequence_length - order)`, not each of its nodes. An order 0
    model has only the start node and its absorbing successors, so its ESS is simply
    split among the states.
    """
    kinds = [to_emission_kind(kind) for kind in emission_kinds]
    if not kinds:
        raise TopologyError("An ergodic HMM needs at least one state")
    if any(kind.is_silent for kind in kinds):
        raise TopologyError("An ergodic HMM can not contain silent states.")
    if order < 0:
        raise TopologyError(f"order must be non-negative, got {order}")
    if not ess > 0:
        raise TopologyError(f"ess must be positive, got {ess}")
    if not 0 <= self_transition_fraction <= 1:
        raise TopologyError(f"self_transition_fraction must be in [0, 1], got {self_transition_fraction}")
    if expected_sequence_length <= order:
        raise TopologyError(
            f"expected_sequence_length must exceed the order {order}, got {expected_sequence_length}"
        )

    num_states = len(kinds)
    states = tuple(range(num_states))
    graph = ContextGraph()
    graph.add_node((), states)
    for level in range(1, order + 1):
        for context in itertools.product(states, repeat=level):
            graph.add_node(context, states, self_transition_weights(num_states, context[-1], self_transition_fraction))
    # an order 0 model still tracks the state just visited so that it receives an ESS
    graph.finalize(max(order, 1), require_absorbing=False)

    return Topology(
        names=[str(i) for i in states],
        emissions=[EmissionSpec(kind) for kind in kinds],
        graph=graph,
        order=order,
        ess=ess,
        max_rounds=expected_sequence_length if order > 0 else None,
    )
