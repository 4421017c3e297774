"""Topology configuration dataclasses."""

# pylint: disable=all
# Temporarily disable all pylint checkers during AST traversal to prevent crash.
# The imports checker crashes when resolving hmmforge package imports due to a bug
# in pylint/astroid: https://github.com/pylint-dev/pylint/issues/10185
# pylint: enable=all
# Re-enable all pylint checkers for the checking phase. This allows other checks
# (code quality, style, undefined names, etc.) to run normally while bypassing
# the problematic imports checker that would crash during AST traversal.

from collections.abc import Callable
from dataclasses import dataclass

from omegaconf import DictConfig

from hmmforge.emissions import to_emission_kind
from hmmforge.exceptions import ConfigValidationError
from hmmforge.structured_configs.instance import InstanceConfig, validate_instance_config
from hmmforge.structured_configs.validation import (
    validate_bool,
    validate_fraction,
    validate_matrix,
    validate_non_negative_int,
    validate_nonempty_str,
    validate_positive_float,
    validate_positive_int,
    validate_sequence,
)
from hmmforge.topologies.architectures import to_architecture

ERGODIC_TARGET = "hmmforge.topologies.builder.build_ergodic_model"
PSEUDO_ERGODIC_TARGET = "hmmforge.topologies.builder.build_pseudo_ergodic_model"
SUNFLOWER_TARGET = "hmmforge.topologies.builder.build_sunflower_model"
PROFILE_TARGET = "hmmforge.topologies.builder.build_profile_model"


@dataclass
class ErgodicModelConfig(InstanceConfig):
    """Configuration for the ergodic model builder."""

    emission_kinds: list[str]
    order: int
    ess: float
    self_transition_fraction: float
    expected_sequence_length: int

    def __init__(
        self,
        emission_kinds: list[str],
        order: int,
        ess: float,
        self_transition_fraction: float,
        expected_sequence_length: int,
        _target_: str = ERGODIC_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.emission_kinds = emission_kinds
        self.order = order
        self.ess = ess
        self.self_transition_fraction = self_transition_fraction
        self.expected_sequence_length = expected_sequence_length


def is_ergodic_model_target(target: str) -> bool:
    """Check if the target is the ergodic model builder."""
    return target == ERGODIC_TARGET


def is_ergodic_model_config(cfg: DictConfig) -> bool:
    """Check if the configuration is an ergodic model config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_ergodic_model_target(target)
    return False


def _validate_emission_kinds(kinds: object, field_name: str) -> None:
    validate_sequence(kinds, field_name, element_type=str, is_empty_allowed=False)
    for kind in kinds:  # type: ignore[union-attr]
        try:
            resolved = to_emission_kind(kind)
        except ValueError as e:
            raise ConfigValidationError(f"{field_name} contains an unknown emission kind: {e}") from e
        if resolved.is_silent:
            raise ConfigValidationError(f"{field_name} must not contain silent emissions")


def validate_ergodic_model_config(cfg: DictConfig) -> None:
    """Validate an ErgodicModelConfig.

    Args:
        cfg: A DictConfig with ErgodicModelConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=ERGODIC_TARGET)
    _validate_emission_kinds(cfg.get("emission_kinds"), "ErgodicModelConfig.emission_kinds")
    order = cfg.get("order")
    validate_non_negative_int(order, "ErgodicModelConfig.order")
    validate_positive_float(cfg.get("ess"), "ErgodicModelConfig.ess")
    validate_fraction(cfg.get("self_transition_fraction"), "ErgodicModelConfig.self_transition_fraction")
    length = cfg.get("expected_sequence_length")
    validate_positive_int(length, "ErgodicModelConfig.expected_sequence_length")
    if length <= order:
        raise ConfigValidationError(
            f"ErgodicModelConfig.expected_sequence_length must exceed the order, got {length} <= {order}"
        )


@dataclass
class PseudoErgodicModelConfig(InstanceConfig):
    """Configuration for the pseudo-ergodic model builder."""

    num_states: int
    ess: float
    self_transition_fraction: float
    final_transition_fraction: float
    insert_uniform: bool = False

    def __init__(
        self,
        num_states: int,
        ess: float,
        self_transition_fraction: float,
        final_transition_fraction: float,
        insert_uniform: bool = False,
        _target_: str = PSEUDO_ERGODIC_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.num_states = num_states
        self.ess = ess
        self.self_transition_fraction = self_transition_fraction
        self.final_transition_fraction = final_transition_fraction
        self.insert_uniform = insert_uniform


def is_pseudo_ergodic_model_target(target: str) -> bool:
    """Check if the target is the pseudo-ergodic model builder."""
    return target == PSEUDO_ERGODIC_TARGET


def is_pseudo_ergodic_model_config(cfg: DictConfig) -> bool:
    """Check if the configuration is a pseudo-ergodic model config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_pseudo_ergodic_model_target(target)
    return False


def validate_pseudo_ergodic_model_config(cfg: DictConfig) -> None:
    """Validate a PseudoErgodicModelConfig.

    Args:
        cfg: A DictConfig with PseudoErgodicModelConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=PSEUDO_ERGODIC_TARGET)
    validate_positive_int(cfg.get("num_states"), "PseudoErgodicModelConfig.num_states")
    validate_positive_float(cfg.get("ess"), "PseudoErgodicModelConfig.ess")
    self_fraction = cfg.get("self_transition_fraction")
    final_fraction = cfg.get("final_transition_fraction")
    validate_fraction(self_fraction, "PseudoErgodicModelConfig.self_transition_fraction")
    validate_fraction(final_fraction, "PseudoErgodicModelConfig.final_transition_fraction")
    if final_fraction == 0:
        raise ConfigValidationError("PseudoErgodicModelConfig.final_transition_fraction must be positive")
    if self_fraction + final_fraction > 1:
        raise ConfigValidationError(
            "PseudoErgodicModelConfig.self_transition_fraction and final_transition_fraction must not sum to more "
            f"than 1, got {self_fraction} + {final_fraction}"
        )
    validate_bool(cfg.get("insert_uniform", False), "PseudoErgodicModelConfig.insert_uniform")


@dataclass
class SunflowerModelConfig(InstanceConfig):
    """Configuration for the sunflower model builder."""

    motif_lengths: list[int]
    ess: float
    expected_sequence_length: int
    start_central: bool = True
    motif_probs: list[float] | None = None

    def __init__(
        self,
        motif_lengths: list[int],
        ess: float,
        expected_sequence_length: int,
        start_central: bool = True,
        motif_probs: list[float] | None = None,
        _target_: str = SUNFLOWER_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.motif_lengths = motif_lengths
        self.ess = ess
        self.expected_sequence_length = expected_sequence_length
        self.start_central = start_central
        self.motif_probs = motif_probs


def is_sunflower_model_target(target: str) -> bool:
    """Check if the target is the sunflower model builder."""
    return target == SUNFLOWER_TARGET


def is_sunflower_model_config(cfg: DictConfig) -> bool:
    """Check if the configuration is a sunflower model config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_sunflower_model_target(target)
    return False


def validate_sunflower_model_config(cfg: DictConfig) -> None:
    """Validate a SunflowerModelConfig.

    Args:
        cfg: A DictConfig with SunflowerModelConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=SUNFLOWER_TARGET)
    motif_lengths = cfg.get("motif_lengths")
    validate_sequence(motif_lengths, "SunflowerModelConfig.motif_lengths", element_type=int, is_empty_allowed=False)
    for length in motif_lengths:
        validate_positive_int(length, "SunflowerModelConfig.motif_lengths items")
    validate_positive_float(cfg.get("ess"), "SunflowerModelConfig.ess")
    validate_positive_int(cfg.get("expected_sequence_length"), "SunflowerModelConfig.expected_sequence_length")
    validate_bool(cfg.get("start_central", True), "SunflowerModelConfig.start_central")
    motif_probs = cfg.get("motif_probs")
    validate_sequence(motif_probs, "SunflowerModelConfig.motif_probs", element_type=(int, float), is_none_allowed=True)
    if motif_probs is not None:
        if len(motif_probs) != len(motif_lengths):
            raise ConfigValidationError(
                "SunflowerModelConfig.motif_probs must have one entry per motif, "
                f"got {len(motif_probs)} != {len(motif_lengths)}"
            )
        for prob in motif_probs:
            validate_fraction(prob, "SunflowerModelConfig.motif_probs items")
        if sum(motif_probs) > 1:
            raise ConfigValidationError(f"SunflowerModelConfig.motif_probs must sum to at most 1, got {sum(motif_probs)}")


@dataclass
class ProfileModelConfig(InstanceConfig):
    """Configuration for the profile model builder."""

    num_layers: int
    order: int
    ess: float
    architecture: str = "PLAN7"
    init_from_to: list[list[float]] | None = None
    joining_states: int = 0
    close_circle: bool = False
    insert_uniform: bool = False
    reference_match: bool = False
    match_kinds: list[str] | None = None
    condition_init_probs: list[list[float]] | None = None

    def __init__(
        self,
        num_layers: int,
        order: int,
        ess: float,
        architecture: str = "PLAN7",
        init_from_to: list[list[float]] | None = None,
        joining_states: int = 0,
        close_circle: bool = False,
        insert_uniform: bool = False,
        reference_match: bool = False,
        match_kinds: list[str] | None = None,
        condition_init_probs: list[list[float]] | None = None,
        _target_: str = PROFILE_TARGET,
    ) -> None:
        super().__init__(_target_=_target_)
        self.num_layers = num_layers
        self.order = order
        self.ess = ess
        self.architecture = architecture
        self.init_from_to = init_from_to
        self.joining_states = joining_states
        self.close_circle = close_circle
        self.insert_uniform = insert_uniform
        self.reference_match = reference_match
        self.match_kinds = match_kinds
        self.condition_init_probs = condition_init_probs


def is_profile_model_target(target: str) -> bool:
    """Check if the target is the profile model builder."""
    return target == PROFILE_TARGET


def is_profile_model_config(cfg: DictConfig) -> bool:
    """Check if the configuration is a profile model config."""
    target = cfg.get("_target_", None)
    if isinstance(target, str):
        return is_profile_model_target(target)
    return False


def validate_profile_model_config(cfg: DictConfig) -> None:
    """Validate a ProfileModelConfig.

    Args:
        cfg: A DictConfig with ProfileModelConfig fields (from Hydra).
    """
    validate_instance_config(cfg, expected_target=PROFILE_TARGET)
    num_layers = cfg.get("num_layers")
    validate_positive_int(num_layers, "ProfileModelConfig.num_layers")
    validate_positive_int(cfg.get("order"), "ProfileModelConfig.order")
    validate_positive_float(cfg.get("ess"), "ProfileModelConfig.ess")
    architecture = cfg.get("architecture", "PLAN7")
    validate_nonempty_str(architecture, "ProfileModelConfig.architecture")
    try:
        to_architecture(architecture)
    except ValueError as e:
        raise ConfigValidationError(f"ProfileModelConfig.architecture is invalid: {e}") from e
    validate_matrix(cfg.get("init_from_to"), "ProfileModelConfig.init_from_to", shape=(3, 6), is_none_allowed=True)
    validate_non_negative_int(cfg.get("joining_states", 0), "ProfileModelConfig.joining_states")
    for flag in ("close_circle", "insert_uniform", "reference_match"):
        validate_bool(cfg.get(flag, False), f"ProfileModelConfig.{flag}")
    match_kinds = cfg.get("match_kinds")
    validate_sequence(match_kinds, "ProfileModelConfig.match_kinds", element_type=str, is_none_allowed=True)
    if match_kinds is not None and len(match_kinds) not in (1, num_layers):
        raise ConfigValidationError(
            f"ProfileModelConfig.match_kinds must have 1 or {num_layers} entries, got {len(match_kinds)}"
        )
    validate_matrix(cfg.get("condition_init_probs"), "ProfileModelConfig.condition_init_probs", is_none_allowed=True)


TOPOLOGY_CONFIG_VALIDATORS: dict[str, Callable[[DictConfig], None]] = {
    ERGODIC_TARGET: validate_ergodic_model_config,
    PSEUDO_ERGODIC_TARGET: validate_pseudo_ergodic_model_config,
    SUNFLOWER_TARGET: validate_sunflower_model_config,
    PROFILE_TARGET: validate_profile_model_config,
}
