"""Propagation of an equivalent sample size through a context graph."""

from dataclasses import dataclass

import numpy as np

from hmmforge.exceptions import TopologyError
from hmmforge.logger import HMMFORGE_LOGGER
from hmmforge.topologies.context_graph import ContextGraph

EPSILON: float = 1e-12


@dataclass(frozen=True)
class PropagationResult:
    """Pseudo-counts obtained by propagating an ESS through a context graph.

    Attributes:
        hyperparameters: for every node, the Dirichlet hyperparameter of each outgoing choice
        state_ess: for every state, the mass of all nodes whose context ends in that state
        cumulated: for every node, the total mass that passed through it
        num_rounds: the number of propagation rounds
        residual: the mass still circulating when propagation stopped
    """

    hyperparameters: list[np.ndarray]
    state_ess: np.ndarray
    cumulated: np.ndarray
    num_rounds: int
    residual: float

    def absorbed_mass(self, graph: ContextGraph) -> float:
        """Total mass held by the absorbing nodes of `graph`."""
        return float(self.cumulated[graph.absorbing_indices].sum())


def _edge_arrays(graph: ContextGraph) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    sources, targets, probs = [], [], []
    for node_id, node in enumerate(graph):
        sources.extend([node_id] * len(node.states))
        targets.extend(node.child)
        probs.extend(node.prob.tolist())
    return (
        np.asarray(sources, dtype=np.int64),
        np.asarray(targets, dtype=np.int64),
        np.asarray(probs, dtype=np.float64),
    )


def propagate_ess(
    graph: ContextGraph,
    ess: float,
    max_rounds: int | None = None,
    num_states: int | None = None,
) -> PropagationResult:
    """Propagate `ess` from the start node until all mass is absorbed.

    In each round the mass of every node is split among its children according to
    the choice probabilities. Absorbing nodes keep the mass they receive, so in a
    graph where every path is absorbed with probability one the circulating mass
    vanishes and the loop stops once it falls below `EPSILON`.

    Args:
        graph: a graph whose children have been resolved
        ess: the equivalent sample size injected at the start node
        max_rounds: if given, stop after this many rounds; the graph then needs no absorbing node
        num_states: the length of the returned state ESS vector, by default one past the largest state

    Returns:
        The hyperparameters of every node and the ESS of every state.
    """
    if not ess > 0:
        raise TopologyError(f"ess must be positive, got {ess}")
    if max_rounds is not None and max_rounds < 1:
        raise TopologyError(f"max_rounds must be positive, got {max_rounds}")
    graph.validate(require_absorbing=max_rounds is None)

    sources, targets, probs = _edge_arrays(graph)
    num_nodes = len(graph)
    current = np.zeros(num_nodes)
    cumulated = np.zeros(num_nodes)
    current[graph.start_index] = ess

    num_rounds = 0
    remaining = ess
    while max_rounds is None or num_rounds < max_rounds:
        following = np.bincount(targets, weights=probs * current[sources], minlength=num_nodes)
        cumulated += current
        current = following
        num_rounds += 1
        remaining = float(current.sum())
        if remaining < EPSILON:
            break
    HMMFORGE_LOGGER.debug("propagated ess %s in %d rounds, residual %g", ess, num_rounds, remaining)

    size = graph.max_state + 1 if num_states is None else num_states
    state_ess = np.zeros(size)
    hyperparameters = []
    for node_id, node in enumerate(graph):
        hyperparameters.append(cumulated[node_id] * node.prob)
        if node.context:
            state_ess[node.context[-1]] += cumulated[node_id]

    return PropagationResult(hyperparameters, state_ess, cumulated, num_rounds, remaining)
