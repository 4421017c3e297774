"""Builders for HMM skeletons."""

# pylint: disable-all
# Temporarily disable all pylint checkers during AST traversal to prevent crash.
# The imports checker crashes when resolving hmmforge package imports due to a bug
# in pylint/astroid: https://github.com/pylint-dev/pylint/issues/10185
# pylint: enable=all
# Re-enable all pylint checkers for the checking phase. This allows other checks
# (code quality, style, undefined names, etc.) to run normally while bypassing
# the problematic imports checker that would crash during AST traversal.

import inspect
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import hydra
import numpy as np
from omegaconf import DictConfig

from hmmforge.emissions import EmissionKind
from hmmforge.exceptions import ConfigValidationError
from hmmforge.logger import HMMFORGE_LOGGER
from hmmforge.structured_configs.topology import TOPOLOGY_CONFIG_VALIDATORS
from hmmforge.topologies.architectures import Architecture
from hmmforge.topologies.ergodic import create_ergodic_topology
from hmmforge.topologies.profile import create_profile_topology
from hmmforge.topologies.pseudo_ergodic import create_pseudo_ergodic_topology
from hmmforge.topologies.skeleton import HMMSkeleton
from hmmforge.topologies.sunflower import create_sunflower_topology


def build_ergodic_model(
    emission_kinds: Sequence[EmissionKind | str],
    order: int,
    ess: float,
    self_transition_fraction: float,
    expected_sequence_length: int,
) -> HMMSkeleton:
    """Build an ergodic HMM skeleton."""
    return create_ergodic_topology(
        emission_kinds, order, ess, self_transition_fraction, expected_sequence_length
    ).assemble()


def build_pseudo_ergodic_model(
    num_states: int,
    ess: float,
    self_transition_fraction: float,
    final_transition_fraction: float,
    insert_uniform: bool = False,
) -> HMMSkeleton:
    """Build a pseudo-ergodic HMM skeleton."""
    return create_pseudo_ergodic_topology(
        num_states, ess, self_transition_fraction, final_transition_fraction, insert_uniform
    ).assemble()


def build_sunflower_model(
    motif_lengths: Sequence[int],
    ess: float,
    expected_sequence_length: int,
    start_central: bool = True,
    motif_probs: Sequence[float] | None = None,
    trees: Sequence[Any] | None = None,
) -> HMMSkeleton:
    """Build a sunflower HMM skeleton."""
    return create_sunflower_topology(
        motif_lengths, ess, expected_sequence_length, start_central, motif_probs, trees
    ).assemble()


def build_profile_model(
    num_layers: int,
    order: int,
    ess: float,
    architecture: Architecture | str = Architecture.PLAN7,
    init_from_to: np.ndarray | Sequence[Sequence[float]] | None = None,
    joining_states: int = 0,
    close_circle: bool = False,
    insert_uniform: bool = False,
    reference_match: bool = False,
    match_kinds: Sequence[EmissionKind | str] | None = None,
    condition_init_probs: np.ndarray | Sequence[Sequence[float]] | None = None,
) -> HMMSkeleton:
    """Build a profile HMM skeleton.

    `close_circle` is a shorthand for a single joining state.
    """
    if close_circle and joining_states == 0:
        joining_states = 1
    return create_profile_topology(
        num_layers,
        order,
        ess,
        architecture=architecture,
        init_from_to=init_from_to,
        joining_states=joining_states,
        insert_uniform=insert_uniform,
        reference_match=reference_match,
        match_kinds=match_kinds,
        condition_init_probs=condition_init_probs,
    ).assemble()


TOPOLOGY_BUILDERS: dict[str, Callable[..., HMMSkeleton]] = {
    "ergodic": build_ergodic_model,
    "pseudo_ergodic": build_pseudo_ergodic_model,
    "sunflower": build_sunflower_model,
    "profile": build_profile_model,
}


def build_topology(topology_name: str, topology_params: Mapping[str, Any] | None = None) -> HMMSkeleton:
    """Build the skeleton of a named topology."""
    if topology_name not in TOPOLOGY_BUILDERS:
        raise KeyError(
            f'Unknown topology type: "{topology_name}".  '
            f"Available topologies are: {', '.join(TOPOLOGY_BUILDERS.keys())}"
        )
    builder = TOPOLOGY_BUILDERS[topology_name]
    topology_params = topology_params or {}
    sig = inspect.signature(builder)
    try:
        sig.bind(**topology_params)
    except TypeError as e:
        params = ", ".join(f"{k}: {v.annotation}" for k, v in sig.parameters.items())
        raise TypeError(f"Invalid arguments for {topology_name}: {e}.  Signature is: {params}") from e
    return builder(**topology_params)


def build_model_from_config(cfg: DictConfig) -> HMMSkeleton:
    """Validate a topology config and instantiate its target."""
    target = cfg.get("_target_", None)
    if target not in TOPOLOGY_CONFIG_VALIDATORS:
        raise ConfigValidationError(f"Not a topology builder target: {target}")
    TOPOLOGY_CONFIG_VALIDATORS[target](cfg)
    HMMFORGE_LOGGER.info("building %s", target.rsplit(".", 1)[-1])
    return hydra.utils.instantiate(cfg, _convert_="all")
