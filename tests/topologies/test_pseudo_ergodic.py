"""Tests for pseudo-ergodic topologies."""

import numpy as np
import pytest

from hmmforge.emissions import EmissionKind
from hmmforge.exceptions import TopologyError
from hmmforge.topologies.pseudo_ergodic import FINAL_NAME, create_pseudo_ergodic_topology
from tests.assertions import assert_hyperparameters_consistent, assert_mass_conserved, assert_normalized


def test_three_states():
    topology = create_pseudo_ergodic_topology(3, 12.0, 0.5, 0.2)
    graph = topology.graph
    assert topology.names == ["0", "1", "2", FINAL_NAME]
    assert_normalized(graph)
    np.testing.assert_allclose(graph[graph.index_of((1,))].prob, [0.15, 0.5, 0.15, 0.2])
    assert graph.absorbing_indices == [graph.index_of((3,))]

    result = topology.propagate()
    for state in range(3):
        node_id = graph.index_of((state,))
        # every state is visited 1 / (1 - 0.8) times per unit of entering mass
        assert result.cumulated[node_id] == pytest.approx(20.0)
        share = result.cumulated[node_id] / 12.0
        assert result.hyperparameters[node_id][state] == pytest.approx(0.5 * 12.0 * share)
    np.testing.assert_allclose(result.state_ess, [20.0, 20.0, 20.0, 12.0], rtol=1e-9)
    assert_mass_conserved(graph, result, 12.0)
    assert_hyperparameters_consistent(graph, result)


def test_emissions():
    skeleton = create_pseudo_ergodic_topology(2, 1.0, 0.3, 0.3).assemble()
    assert skeleton.emission_kinds == [EmissionKind.DISCRETE, EmissionKind.DISCRETE, EmissionKind.SILENT]
    skeleton = create_pseudo_ergodic_topology(2, 1.0, 0.3, 0.3, insert_uniform=True).assemble()
    assert skeleton.emission_kinds == [EmissionKind.UNIFORM, EmissionKind.UNIFORM, EmissionKind.SILENT]


def test_single_state_has_no_spread():
    topology = create_pseudo_ergodic_topology(1, 2.0, 0.75, 0.25)
    graph = topology.graph
    np.testing.assert_allclose(graph[graph.index_of((0,))].prob, [0.75, 0.25])
    result = topology.propagate()
    assert result.state_ess[0] == pytest.approx(8.0)


def test_fractions_summing_to_one():
    topology = create_pseudo_ergodic_topology(4, 1.0, 0.6, 0.4)
    node = topology.graph[topology.graph.index_of((0,))]
    np.testing.assert_allclose(node.prob, [0.6, 0.0, 0.0, 0.0, 0.4])


@pytest.mark.parametrize(
    "args,match",
    [
        ((0, 1.0, 0.5, 0.2), "num_states must be positive"),
        ((3, 0.0, 0.5, 0.2), "ess must be positive"),
        ((3, 1.0, -0.1, 0.2), "self_transition_fraction must be in"),
        ((3, 1.0, 0.5, 1.2), "final_transition_fraction must be in"),
        ((3, 1.0, 0.5, 0.0), "final_transition_fraction must be positive"),
        ((3, 1.0, 0.7, 0.5), "must not sum to more than 1"),
    ],
)
def test_invalid_arguments(args, match):
    with pytest.raises(TopologyError, match=match):
        create_pseudo_ergodic_topology(*args)
