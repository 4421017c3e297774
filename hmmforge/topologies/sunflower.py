"""Sunflower topologies: a central background state with linear motif petals."""

from collections.abc import Sequence
from typing import Any

import numpy as np

from hmmforge.emissions import EmissionKind, EmissionSpec
from hmmforge.exceptions import TopologyError
from hmmforge.topologies.context_graph import ContextGraph
from hmmforge.topologies.topology import Topology

CENTER: int = 0
CENTER_NAME: str = "bg"
DEFAULT_TOTAL_MOTIF_PROB: float = 0.1


def petal_heads(motif_lengths: Sequence[int]) -> list[int]:
    """The index of the first state of every petal."""
    heads = []
    offset = CENTER + 1
    for length in motif_lengths:
        heads.append(offset)
        offset += length
    return heads


def create_sunflower_topology(
    motif_lengths: Sequence[int],
    ess: float,
    expected_sequence_length: int,
    start_central: bool = True,
    motif_probs: Sequence[float] | None = None,
    trees: Sequence[Any] | None = None,
) -> Topology:
    """Create a first order sunflower topology.

    The center moves to the head of petal `m` with prior probability
    `motif_probs[m]` and stays in the center otherwise. Petals are traversed
    linearly and their last state returns to the center. As the walk never ends,
    the ESS is propagated for one round out of the start node followed by
    `expected_sequence_length` rounds over the states, so the state ESS sums to
    `ess * expected_sequence_length`.

    Args:
        motif_lengths: the length of every petal
        ess: the equivalent sample size
        expected_sequence_length: the expected length of the modelled sequences
        start_central: whether sequences start in the center; otherwise they may start
            in any state with prior mass split like the petal probabilities
        motif_probs: the prior probability of entering each petal, by default 0.1 split evenly
        trees: a background and a motif tree; if given, all states get phylogenetic emissions
    """
    if not motif_lengths:
        raise TopologyError("A sunflower HMM needs at least one petal")
    if any(length < 1 for length in motif_lengths):
        raise TopologyError(f"motif_lengths must be positive, got {list(motif_lengths)}")
    if not ess > 0:
        raise TopologyError(f"ess must be positive, got {ess}")
    if expected_sequence_length < 1:
        raise TopologyError(f"expected_sequence_length must be positive, got {expected_sequence_length}")
    if motif_probs is None:
        motif_probs = [DEFAULT_TOTAL_MOTIF_PROB / len(motif_lengths)] * len(motif_lengths)
    probs = np.asarray(motif_probs, dtype=np.float64)
    if probs.shape != (len(motif_lengths),):
        raise TopologyError(f"Expected {len(motif_lengths)} motif probabilities, got {probs.shape}")
    if np.any(probs < 0) or probs.sum() > 1 + 1e-12:
        raise TopologyError(f"motif_probs must be non-negative and sum to at most 1, got {probs.tolist()}")
    if trees is not None and len(trees) != 2:
        raise TopologyError(f"trees must hold a background and a motif tree, got {len(trees)}")
    stay = max(1 - probs.sum(), 0.0)

    heads = petal_heads(motif_lengths)
    num_states = heads[-1] + motif_lengths[-1]
    graph = ContextGraph()
    if start_central:
        graph.add_node((), (CENTER,))
    else:
        start_weights = np.empty(num_states)
        start_weights[CENTER] = stay
        for head, length, prob in zip(heads, motif_lengths, probs, strict=True):
            start_weights[head : head + length] = prob / length
        graph.add_node((), range(num_states), start_weights)
    graph.add_node((CENTER,), (CENTER, *heads), np.concatenate([[stay], probs]))

    names = [CENTER_NAME]
    for m, (head, length) in enumerate(zip(heads, motif_lengths, strict=True)):
        for position in range(length):
            state = head + position
            names.append(f"motif {m} position {position}")
            graph.add_node((state,), (CENTER if position == length - 1 else state + 1,))
    graph.finalize(1, require_absorbing=False)

    if trees is None:
        emissions = [EmissionSpec(EmissionKind.DISCRETE) for _ in names]
    else:
        background_tree, motif_tree = trees
        emissions = [EmissionSpec(EmissionKind.PHYLO_DISCRETE, tree=background_tree)]
        emissions += [EmissionSpec(EmissionKind.PHYLO_DISCRETE, tree=motif_tree) for _ in names[1:]]

    return Topology(
        names=names,
        emissions=emissions,
        graph=graph,
        order=1,
        ess=ess,
        max_rounds=expected_sequence_length + 1,
    )
