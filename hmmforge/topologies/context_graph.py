"""Context graph of pseudo transitions.

A context graph stores, for every distinct history of visited states (bounded by
the Markov order), the states that may be visited next together with their prior
probabilities. The pointer from a choice to the history reached by taking it is
resolved lazily by :meth:`ContextGraph.resolve_children`.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from hmmforge.exceptions import GraphConsistencyError, TopologyError
from hmmforge.logger import HMMFORGE_LOGGER

Context = tuple[int, ...]

UNRESOLVED: int = -1


def normalize_prior_weights(prior_weights: np.ndarray) -> np.ndarray:
    """Sum-normalize non-negative prior weights, falling back to uniform for an all-zero vector."""
    if prior_weights.size == 0:
        return prior_weights
    total = prior_weights.sum()
    if total <= 0:
        return np.full(prior_weights.shape, 1.0 / prior_weights.size)
    return prior_weights / total


def next_context(context: Context, state: int, max_order: int) -> Context:
    """The history reached from `context` by visiting `state`, keeping at most `max_order` newest entries."""
    if max_order <= 0:
        return ()
    extended = (*context, state)
    return extended[max(0, len(extended) - max_order) :]


@dataclass
class PseudoTransitionElement:
    """A context node and its outgoing choices.

    Attributes:
        context: the history of visited states, empty for the unique start node
        states: the states that may be visited next; empty for an absorbing node
        prob: the prior probability of each choice
        weights: a display weight for each choice, independent of `prob`
        child: the id of the node reached by each choice, `UNRESOLVED` until resolution
    """

    context: Context
    states: tuple[int, ...]
    prob: np.ndarray
    weights: np.ndarray
    child: list[int] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        context: Iterable[int] | None,
        states: Iterable[int] | None,
        prior_weights: Sequence[float] | np.ndarray | None = None,
        display_weights: Sequence[float] | np.ndarray | None = None,
    ) -> "PseudoTransitionElement":
        """Create a node, deriving the choice probabilities from the prior weights."""
        context = tuple(int(s) for s in context) if context is not None else ()
        states = tuple(int(s) for s in states) if states is not None else ()
        if any(s < 0 for s in context) or any(s < 0 for s in states):
            raise TopologyError(f"State indices must be non-negative, got context {context} and states {states}")

        if prior_weights is None:
            prob = np.full(len(states), 1.0 / len(states)) if states else np.zeros(0)
        else:
            prior = np.asarray(prior_weights, dtype=np.float64)
            if prior.shape != (len(states),):
                raise TopologyError(
                    f"Prior weights must have one entry per state, got {prior.shape[0] if prior.ndim else 0} "
                    f"weights for {len(states)} states"
                )
            if np.any(np.isnan(prior)) or np.any(prior < 0):
                raise TopologyError(f"Prior weights must be non-negative, got {prior.tolist()}")
            prob = normalize_prior_weights(prior)

        if display_weights is None:
            weights = np.ones(len(states))
        else:
            weights = np.asarray(display_weights, dtype=np.float64)
            if weights.shape != (len(states),):
                raise TopologyError(
                    f"Display weights must have one entry per state, got {weights.shape[0] if weights.ndim else 0} "
                    f"weights for {len(states)} states"
                )

        return cls(context, states, prob, weights, [UNRESOLVED] * len(states))

    @property
    def is_absorbing(self) -> bool:
        """Whether the node has no outgoing choices."""
        return len(self.states) == 0

    @property
    def is_start(self) -> bool:
        """Whether the node is the start node."""
        return len(self.context) == 0

    def __str__(self) -> str:
        condition = ", ".join(str(s) for s in self.context)
        return "\t".join(f"P({state}|{condition}) = {p}" for state, p in zip(self.states, self.prob, strict=True))


class ContextGraph:
    """Append-only list of context nodes with lookup by context."""

    def __init__(self) -> None:
        self._nodes: list[PseudoTransitionElement] = []
        self._index: dict[Context, int] = {}
        self._start_index: int | None = None
        self._resolved_order: int | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[PseudoTransitionElement]:
        return iter(self._nodes)

    def __getitem__(self, node_id: int) -> PseudoTransitionElement:
        return self._nodes[node_id]

    def __contains__(self, context: object) -> bool:
        return isinstance(context, tuple) and context in self._index

    def index_of(self, context: Sequence[int]) -> int:
        """The id of the node holding `context`."""
        return self._index[tuple(context)]

    @property
    def nodes(self) -> list[PseudoTransitionElement]:
        """The nodes in insertion order."""
        return self._nodes

    @property
    def start_index(self) -> int:
        """The id of the unique empty-context node."""
        if self._start_index is None:
            raise GraphConsistencyError("No start transition!")
        return self._start_index

    @property
    def absorbing_indices(self) -> list[int]:
        """The ids of all nodes without outgoing choices."""
        return [node_id for node_id, node in enumerate(self._nodes) if node.is_absorbing]

    @property
    def max_context_length(self) -> int:
        """The length of the longest stored context."""
        return max((len(node.context) for node in self._nodes), default=0)

    @property
    def max_state(self) -> int:
        """The largest state index occurring in any context or choice, -1 for an empty graph."""
        return max((max((*node.context, *node.states), default=-1) for node in self._nodes), default=-1)

    @property
    def is_resolved(self) -> bool:
        """Whether every choice points to a node."""
        return all(c != UNRESOLVED for node in self._nodes for c in node.child)

    @property
    def resolved_order(self) -> int | None:
        """The order used by the last resolution, if any."""
        return self._resolved_order

    def add_node(
        self,
        context: Iterable[int] | None,
        children: Iterable[int] | None,
        prior_weights: Sequence[float] | np.ndarray | None = None,
        display_weights: Sequence[float] | np.ndarray | None = None,
    ) -> int:
        """Append a node and return its id; child pointers stay unresolved."""
        node = PseudoTransitionElement.create(context, children, prior_weights, display_weights)
        if node.is_start and self._start_index is not None:
            raise GraphConsistencyError("Multiple start transitions!")
        if node.context in self._index:
            raise TopologyError(f"A node with context {node.context} already exists")
        return self._append(node)

    def _append(self, node: PseudoTransitionElement) -> int:
        node_id = len(self._nodes)
        self._nodes.append(node)
        self._index[node.context] = node_id
        if node.is_start:
            self._start_index = node_id
        return node_id

    def resolve_children(self, max_order: int) -> int:
        """Point every choice at the node holding the context it leads to.

        Contexts that are reachable but not stored are appended as absorbing nodes
        before any pointer is set. With `max_order == 0` no history is tracked and a
        missing context resolves to node 0.

        Returns:
            The number of synthesized nodes.
        """
        if max_order < 0:
            raise TopologyError(f"max_order must be non-negative, got {max_order}")

        pending: dict[Context, None] = {}
        for node in self._nodes:
            for state in node.states:
                target = next_context(node.context, state, max_order)
                if max_order > 0 and target not in self._index:
                    pending[target] = None

        for context in pending:
            self._append(PseudoTransitionElement.create(context, None))

        for node in self._nodes:
            for i, state in enumerate(node.states):
                node.child[i] = self._index.get(next_context(node.context, state, max_order), 0)

        self._resolved_order = max_order
        HMMFORGE_LOGGER.debug(
            "resolved context graph of order %d: %d nodes, %d synthesized", max_order, len(self._nodes), len(pending)
        )
        return len(pending)

    def validate(self, require_absorbing: bool = True) -> None:
        """Check that the graph is resolved, has a start node and, optionally, an absorbing node."""
        starts = [node_id for node_id, node in enumerate(self._nodes) if node.is_start]
        if len(starts) > 1:
            raise GraphConsistencyError("Multiple start transitions!")
        if not starts:
            raise GraphConsistencyError("No start transition!")
        if not self.is_resolved:
            raise GraphConsistencyError("Context graph has unresolved children; call resolve_children first")
        if require_absorbing and not self.absorbing_indices:
            raise GraphConsistencyError("No absorbing state!")

    def finalize(self, max_order: int | None = None, require_absorbing: bool = True) -> "ContextGraph":
        """Resolve all children and validate the result."""
        self.resolve_children(self.max_context_length if max_order is None else max_order)
        self.validate(require_absorbing=require_absorbing)
        return self


class ContextContainer:
    """Insertion-ordered collection of contexts that ignores contexts already stored.

    The container may grow while it is being walked by index.
    """

    def __init__(self, contexts: Iterable[Sequence[int]] = ()) -> None:
        self._contexts: list[Context] = []
        self._seen: set[Context] = set()
        for context in contexts:
            self.add_conditional(context)

    def add_conditional(self, context: Sequence[int]) -> bool:
        """Add `context` unless an equal context is stored; return whether it was added."""
        context = tuple(context)
        if context in self._seen:
            return False
        self._seen.add(context)
        self._contexts.append(context)
        return True

    def __len__(self) -> int:
        return len(self._contexts)

    def __getitem__(self, i: int) -> Context:
        return self._contexts[i]

    def __iter__(self) -> Iterator[Context]:
        return iter(self._contexts)

    def __contains__(self, context: object) -> bool:
        return isinstance(context, tuple) and context in self._seen
