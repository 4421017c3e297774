"""The finished HMM description handed on to an inference engine."""

from collections.abc import Sequence
from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np

from hmmforge.emissions import EmissionKind, EmissionSpec


@dataclass(frozen=True)
class TransitionElement:
    """Dirichlet prior of the transitions out of one context."""

    context: tuple[int, ...]
    states: tuple[int, ...]
    hyperparameters: np.ndarray
    weights: np.ndarray

    @property
    def ess(self) -> float:
        """The total pseudo-count of this element."""
        return float(self.hyperparameters.sum())

    def probabilities(self) -> np.ndarray:
        """The prior mean of the transition probabilities."""
        total = self.hyperparameters.sum()
        if total <= 0:
            return np.full(len(self.states), 1.0 / len(self.states)) if self.states else np.zeros(0)
        return self.hyperparameters / total


@dataclass(frozen=True)
class HMMSkeleton:
    """State names, emissions and transition priors of an HMM.

    Attributes:
        names: the name of every state
        emissions: the emission of every state, with its ESS filled in
        transitions: the transition prior of every context node
        state_ess: the ESS attributed to every state
        ess: the global equivalent sample size
        order: the Markov order of the transitions
    """

    names: list[str]
    emissions: list[EmissionSpec]
    transitions: list[TransitionElement]
    state_ess: np.ndarray
    ess: float
    order: int

    @property
    def num_states(self) -> int:
        """The number of states."""
        return len(self.names)

    @property
    def emission_kinds(self) -> list[EmissionKind]:
        """The emission kind of every state."""
        return [spec.kind for spec in self.emissions]

    def state_index(self, name: str) -> int:
        """The index of the state called `name`."""
        return self.names.index(name)

    def transition(self, context: Sequence[int]) -> TransitionElement:
        """The transition element of `context`."""
        context = tuple(context)
        for element in self.transitions:
            if element.context == context:
                return element
        raise KeyError(f"No transition element for context {context}")

    def transition_elements(self) -> list[tuple[tuple[int, ...], tuple[int, ...], np.ndarray, np.ndarray]]:
        """(context, states, hyperparameters, display weights) for every element."""
        return [(t.context, t.states, t.hyperparameters, t.weights) for t in self.transitions]

    def initial_distribution(self) -> jax.Array:
        """The prior mean of the first state."""
        distribution = np.zeros(self.num_states)
        start = self.transition(())
        distribution[list(start.states)] = start.probabilities()
        return jnp.asarray(distribution)

    def first_order_transition_matrix(self) -> jax.Array:
        """Prior mean transition probabilities between states.

        Row `i` holds the distribution of the state following state `i`; rows of
        absorbing states are zero.
        """
        if self.order > 1:
            raise ValueError(f"A transition matrix only describes first order models, got order {self.order}")
        matrix = np.zeros((self.num_states, self.num_states))
        for element in self.transitions:
            if len(element.context) == 1 and element.states:
                matrix[element.context[0], list(element.states)] = element.probabilities()
        return jnp.asarray(matrix)
