"""Instance configuration dataclasses."""

from dataclasses import dataclass

from omegaconf import DictConfig

from hmmforge.exceptions import ConfigValidationError
from hmmforge.structured_configs.validation import validate_nonempty_str


@dataclass
class InstanceConfig:
    """Config for an object that can be instantiated by hydra."""

    _target_: str


def validate_instance_config(cfg: DictConfig, expected_target: str | None = None) -> None:
    """Validate an InstanceConfig.

    Args:
        cfg: A DictConfig with an _target_ field (from Hydra).
        expected_target: The expected target, if any.
    """
    target = cfg.get("_target_", None)

    validate_nonempty_str(target, "InstanceConfig._target_")
    if expected_target is not None and target != expected_target:
        raise ConfigValidationError(f"InstanceConfig._target_ must be {expected_target}, got {target}")
