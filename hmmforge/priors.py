"""Dirichlet priors of HMM transitions as jax arrays."""

from collections.abc import Sequence

import chex
import equinox as eqx
import jax
import jax.numpy as jnp
import numpy as np
from jax.scipy.special import gammaln

from hmmforge.topologies.skeleton import HMMSkeleton, TransitionElement


class DirichletTransitionPrior(eqx.Module):
    """Independent Dirichlet priors, one per transition element.

    Elements have different numbers of choices, so hyperparameters and child states
    are stored in matrices padded to the largest number of choices. Padding entries
    have a hyperparameter of zero and a child state of -1.
    """

    hyperparameters: jax.Array
    children: jax.Array
    mask: jax.Array

    def __init__(self, transitions: Sequence[TransitionElement]):
        width = max((len(t.states) for t in transitions), default=0)
        hyperparameters = np.zeros((len(transitions), width))
        children = np.full((len(transitions), width), -1, dtype=np.int32)
        for i, transition in enumerate(transitions):
            hyperparameters[i, : len(transition.states)] = transition.hyperparameters
            children[i, : len(transition.states)] = transition.states
        self.hyperparameters = jnp.asarray(hyperparameters)
        self.children = jnp.asarray(children)
        self.mask = self.children >= 0

    @classmethod
    def from_skeleton(cls, skeleton: HMMSkeleton) -> "DirichletTransitionPrior":
        """Create the prior of all transition elements of `skeleton`."""
        return cls(skeleton.transitions)

    @property
    def num_elements(self) -> int:
        """The number of transition elements."""
        return self.hyperparameters.shape[0]

    @property
    def active(self) -> jax.Array:
        """Entries with a positive hyperparameter."""
        return self.mask & (self.hyperparameters > 0)

    @eqx.filter_jit
    def mean(self) -> jax.Array:
        """The prior mean of every element; rows without pseudo-counts are zero."""
        totals = jnp.sum(self.hyperparameters, axis=1, keepdims=True)
        return jnp.where(totals > 0, self.hyperparameters / jnp.where(totals > 0, totals, 1.0), 0.0)

    @eqx.filter_jit
    def log_density(self, probabilities: jax.Array) -> jax.Array:
        """The log density of padded transition probabilities under the prior.

        Entries and elements without pseudo-counts do not contribute.
        """
        chex.assert_equal_shape([probabilities, self.hyperparameters])
        active = self.active
        alpha = jnp.where(active, self.hyperparameters, 1.0)
        log_p = jnp.log(jnp.where(active, probabilities, 1.0))
        normalizer = gammaln(jnp.sum(jnp.where(active, alpha, 0.0), axis=1)) - jnp.sum(
            jnp.where(active, gammaln(alpha), 0.0), axis=1
        )
        rows = jnp.any(active, axis=1)
        per_row = normalizer + jnp.sum(jnp.where(active, (alpha - 1) * log_p, 0.0), axis=1)
        return jnp.sum(jnp.where(rows, per_row, 0.0))

    @eqx.filter_jit
    def sample(self, key: chex.PRNGKey) -> jax.Array:
        """Draw padded transition probabilities from the prior."""
        active = self.active
        alpha = jnp.where(active, self.hyperparameters, 1.0)
        draws = jnp.where(active, jax.random.dirichlet(key, alpha), 0.0)
        totals = jnp.sum(draws, axis=1, keepdims=True)
        return jnp.where(totals > 0, draws / jnp.where(totals > 0, totals, 1.0), 0.0)
