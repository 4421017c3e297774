"""Profile HMM topologies of arbitrary Markov order.

States are laid out as

    E0 .. E(o-1)   silent end chain
    S0 .. S(o-1)   silent start chain
    D1 I1 M1 .. Dn In Mn   delete, insert and match state of every layer
    F              silent absorbing final state
    J0 .. J(j-1)   optional joining states

The start chain primes the history so that the transitions into the first layer
have a context of full length, and the end chain drains it again. The begin
state S(o-1) acts as the match state of layer 0 and E0 takes the place of the
match state of layer n+1, so every layer is connected to the next one with the
same edge template. Joining states lead from the end chain back to the start
chain, allowing the profile to be traversed several times.
"""

from collections.abc import Sequence

import numpy as np

from hmmforge.emissions import EmissionKind, EmissionSpec, to_emission_kind
from hmmforge.exceptions import TopologyError
from hmmforge.logger import HMMFORGE_LOGGER
from hmmforge.topologies.architectures import (
    SAME_LAYER,
    Architecture,
    get_init_from_to,
    has_delete_states,
    has_insert_states,
    validate_init_from_to,
)
from hmmforge.topologies.context_graph import Context, ContextContainer, ContextGraph
from hmmforge.topologies.topology import Topology

SAME_LAYER_WEIGHT: float = 1000.0
NEXT_LAYER_WEIGHT: float = 1.0
MATCH_KINDS = (EmissionKind.UNIFORM, EmissionKind.DISCRETE, EmissionKind.REFERENCE_DISCRETE)

# (match, insert, delete) state indices of one layer, -1 where a state does not exist
LayerStates = tuple[int, int, int]


def shift(context: Context, state: int) -> Context:
    """Drop the oldest entry of `context` and append `state`."""
    return (*context[1:], state)


def add_profile_transitions(
    graph: ContextGraph,
    init_from_to: np.ndarray,
    states: Sequence[int],
    frontier: ContextContainer,
) -> ContextContainer:
    """Add the nodes of all contexts ending in the current layer.

    Args:
        graph: the graph receiving the nodes
        init_from_to: the edge template
        states: the match, insert and delete state of the current layer followed by
            those of the next layer, -1 where a state does not exist
        frontier: the contexts ending in a state of the current layer; contexts that stay
            in the current layer are appended to it while it is processed

    Returns:
        The contexts ending in a state of the next layer.
    """
    next_frontier = ContextContainer()
    current_layer = list(states[: len(SAME_LAYER)])
    i = 0
    while i < len(frontier):
        context = frontier[i]
        i += 1
        row = init_from_to[current_layer.index(context[-1])]

        columns = [c for c, state in enumerate(states) if state >= 0 and not np.isnan(row[c])]
        if not columns:
            continue
        graph.add_node(
            context,
            [states[c] for c in columns],
            row[columns],
            [SAME_LAYER_WEIGHT if c in SAME_LAYER else NEXT_LAYER_WEIGHT for c in columns],
        )
        for c in columns:
            target = frontier if c in SAME_LAYER else next_frontier
            target.add_conditional(shift(context, states[c]))
    return next_frontier


def _match_kinds(
    num_layers: int, reference_match: bool, match_kinds: Sequence[EmissionKind | str] | None
) -> list[EmissionKind]:
    if match_kinds is None:
        return [EmissionKind.REFERENCE_DISCRETE if reference_match else EmissionKind.DISCRETE] * num_layers
    kinds = [to_emission_kind(kind) for kind in match_kinds]
    if len(kinds) == 1:
        kinds = kinds * num_layers
    if len(kinds) != num_layers:
        raise TopologyError(f"Expected 1 or {num_layers} match kinds, got {len(kinds)}")
    for kind in kinds:
        if kind not in MATCH_KINDS:
            raise TopologyError(f"Match states can not use {kind.value} emissions")
    return kinds


def _add_joining_states(
    graph: ContextGraph,
    end_context: Context,
    final: int,
    joining_states: int,
    start_chain: Sequence[int],
    ess: float,
) -> None:
    first = final + 1
    graph.add_node(end_context, (final, first), (ess / 2.0, ess / 2.0))

    pending = [ContextContainer() for _ in range(joining_states)]
    pending[0].add_conditional(shift(end_context, first))
    returning = ContextContainer()
    for j in range(joining_states):
        current = first + j
        if j + 1 == joining_states:
            children, prior = (current, start_chain[0]), (ess / 2.0, ess / 2.0)
        else:
            children, prior = (current, current + 1, start_chain[0]), (ess / 3.0, ess / 3.0, ess / 3.0)
        k = 0
        while k < len(pending[j]):
            context = pending[j][k]
            k += 1
            graph.add_node(context, children, prior)
            for child in children:
                if child == start_chain[0]:
                    returning.add_conditional(shift(context, child))
                else:
                    pending[child - first].add_conditional(shift(context, child))

    # walk the start chain again until the history equals the one after a regular start
    for context in returning:
        for state in start_chain[1:]:
            if context not in graph:
                graph.add_node(context, (state,), (ess,))
            context = shift(context, state)


def create_profile_topology(
    num_layers: int,
    order: int,
    ess: float,
    architecture: Architecture | str = Architecture.PLAN7,
    init_from_to: np.ndarray | Sequence[Sequence[float]] | None = None,
    joining_states: int = 0,
    insert_uniform: bool = False,
    reference_match: bool = False,
    match_kinds: Sequence[EmissionKind | str] | None = None,
    condition_init_probs: np.ndarray | Sequence[Sequence[float]] | None = None,
) -> Topology:
    """Create a profile HMM topology.

    Args:
        num_layers: the number of match layers
        order: the Markov order, at least 1
        ess: the equivalent sample size
        architecture: the standard edge template to use if `init_from_to` is not given
        init_from_to: an explicit 3x6 edge template, see `hmmforge.topologies.architectures`
        joining_states: the number of joining states; 0 leaves the profile open
        insert_uniform: whether insert and joining states use uniform emissions
        reference_match: whether match states are conditioned on a reference sequence
        match_kinds: the emission kind of the match states, either one for all layers or
            one per layer; overrides `reference_match`
        condition_init_probs: a-priori probabilities of reference-conditioned match emissions
    """
    if order < 1:
        raise TopologyError("The order of a profile HMM has to be at least 1.")
    if num_layers < 1:
        raise TopologyError(f"num_layers must be positive, got {num_layers}")
    if joining_states < 0:
        raise TopologyError(f"joining_states must be non-negative, got {joining_states}")
    if not ess > 0:
        raise TopologyError(f"ess must be positive, got {ess}")
    if init_from_to is None:
        init_from_to = get_init_from_to(architecture, ess)
    init_from_to = validate_init_from_to(np.asarray(init_from_to, dtype=np.float64))
    layer_match_kinds = _match_kinds(num_layers, reference_match, match_kinds)
    insert_kind = EmissionKind.UNIFORM if insert_uniform else EmissionKind.DISCRETE
    initial_probabilities = None if condition_init_probs is None else np.asarray(condition_init_probs, dtype=float)

    names: list[str] = []
    emissions: list[EmissionSpec] = []

    def add_state(name: str, spec: EmissionSpec) -> int:
        names.append(name)
        emissions.append(spec)
        return len(names) - 1

    silent = EmissionSpec(EmissionKind.SILENT)
    end_chain = [add_state(f"E{i}", silent) for i in range(order)]
    start_chain = [add_state(f"S{i}", silent) for i in range(order)]

    with_inserts = has_insert_states(init_from_to)
    with_deletes = has_delete_states(init_from_to)
    layers: list[LayerStates] = []
    reference_index = 0
    for layer, match_kind in enumerate(layer_match_kinds, start=1):
        delete = add_state(f"D{layer}", silent) if with_deletes else -1
        insert = add_state(f"I{layer}", EmissionSpec(insert_kind)) if with_inserts else -1
        if match_kind is EmissionKind.REFERENCE_DISCRETE:
            match_spec = EmissionSpec(
                match_kind, reference_index=reference_index, initial_probabilities=initial_probabilities
            )
            reference_index += 1
        else:
            match_spec = EmissionSpec(match_kind)
        match = add_state(f"M{layer}", match_spec)
        layers.append((match, insert, delete))
    final = add_state("F", silent)
    for j in range(joining_states):
        add_state(f"J{j}", EmissionSpec(insert_kind))

    graph = ContextGraph()
    for i, state in enumerate(start_chain):
        graph.add_node(start_chain[:i], (state,), (ess,))

    frontier = ContextContainer([tuple(start_chain)])
    frontier = add_profile_transitions(graph, init_from_to, (start_chain[-1], -1, -1, *layers[0]), frontier)
    for layer, states in enumerate(layers):
        following = layers[layer + 1] if layer + 1 < num_layers else (end_chain[0], -1, -1)
        frontier = add_profile_transitions(graph, init_from_to, (*states, *following), frontier)
    for previous, state in zip(end_chain, end_chain[1:]):
        frontier = add_profile_transitions(graph, init_from_to, (previous, -1, -1, state, -1, -1), frontier)

    end_context = tuple(end_chain)
    if joining_states > 0:
        _add_joining_states(graph, end_context, final, joining_states, start_chain, ess)
    else:
        graph.add_node(end_context, (final,), (ess,))

    graph.finalize(order)
    HMMFORGE_LOGGER.debug(
        "created profile topology with %d layers, order %d and %d joining states: %d states, %d nodes",
        num_layers,
        order,
        joining_states,
        len(names),
        len(graph),
    )
    return Topology(names=names, emissions=emissions, graph=graph, order=order, ess=ess)
