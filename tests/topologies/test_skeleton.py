"""Tests for assembling HMM skeletons."""

import chex
import jax.numpy as jnp
import numpy as np
import pytest

from hmmforge.emissions import EmissionKind, EmissionSpec
from hmmforge.topologies.context_graph import ContextGraph
from hmmforge.topologies.profile import create_profile_topology
from hmmforge.topologies.pseudo_ergodic import create_pseudo_ergodic_topology
from hmmforge.topologies.skeleton import TransitionElement
from hmmforge.topologies.topology import Topology


@pytest.fixture
def skeleton():
    return create_pseudo_ergodic_topology(2, 4.0, 0.5, 0.25).assemble()


def test_transition_element():
    element = TransitionElement((0,), (0, 1), np.array([3.0, 1.0]), np.ones(2))
    assert element.ess == pytest.approx(4.0)
    np.testing.assert_allclose(element.probabilities(), [0.75, 0.25])

    empty = TransitionElement((1,), (0, 1), np.zeros(2), np.ones(2))
    np.testing.assert_allclose(empty.probabilities(), [0.5, 0.5])

    absorbing = TransitionElement((2,), (), np.zeros(0), np.zeros(0))
    assert absorbing.probabilities().size == 0


def test_assemble(skeleton):
    assert skeleton.num_states == 3
    assert skeleton.names == ["0", "1", "F"]
    assert skeleton.ess == 4.0
    assert skeleton.order == 1
    assert len(skeleton.transitions) == 4
    for spec, ess in zip(skeleton.emissions, skeleton.state_ess, strict=True):
        assert spec.ess == pytest.approx(ess)
    assert skeleton.state_ess[skeleton.state_index("F")] == pytest.approx(4.0)


def test_transition_lookup(skeleton):
    element = skeleton.transition((0,))
    assert element.states == (0, 1, 2)
    np.testing.assert_allclose(element.probabilities(), [0.5, 0.25, 0.25])
    with pytest.raises(KeyError):
        skeleton.transition((7,))


def test_transition_elements(skeleton):
    elements = skeleton.transition_elements()
    assert len(elements) == len(skeleton.transitions)
    context, states, hyperparameters, weights = elements[0]
    assert context == ()
    assert states == (0, 1)
    np.testing.assert_allclose(hyperparameters, [2.0, 2.0])
    np.testing.assert_allclose(weights, [1.0, 1.0])


def test_initial_distribution(skeleton):
    chex.assert_trees_all_close(skeleton.initial_distribution(), jnp.array([0.5, 0.5, 0.0]))


def test_first_order_transition_matrix(skeleton):
    matrix = skeleton.first_order_transition_matrix()
    expected = jnp.array(
        [
            [0.5, 0.25, 0.25],
            [0.25, 0.5, 0.25],
            [0.0, 0.0, 0.0],
        ]
    )
    chex.assert_trees_all_close(matrix, expected)


def test_transition_matrix_requires_first_order():
    skeleton = create_profile_topology(2, 2, 1.0).assemble()
    with pytest.raises(ValueError, match="first order"):
        skeleton.first_order_transition_matrix()


def test_bounded_topology_needs_no_absorbing_state():
    graph = ContextGraph()
    graph.add_node((), (0,))
    graph.add_node((0,), (0,))
    graph.finalize(1, require_absorbing=False)
    bounded = Topology(["a"], [EmissionSpec(EmissionKind.DISCRETE)], graph, order=1, ess=1.0, max_rounds=3)
    assert bounded.assemble().state_ess[0] == pytest.approx(2.0)
