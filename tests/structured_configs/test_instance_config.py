"""Tests for InstanceConfig.

This module contains tests for the InstanceConfig dataclass and the shared
validation of hydra targets.
"""

# pylint: disable-all
# Temporarily disable all pylint checkers during AST traversal to prevent crash.
# The imports checker crashes when resolving hmmforge package imports due to a bug
# in pylint/astroid: https://github.com/pylint-dev/pylint/issues/10185
# pylint: enable=all
# Re-enable all pylint checkers for the checking phase. This allows other checks
# (code quality, style, undefined names, etc.) to run normally while bypassing
# the problematic imports checker that would crash during AST traversal.

from dataclasses import dataclass

import pytest
from omegaconf import DictConfig, OmegaConf

from hmmforge.exceptions import ConfigValidationError
from hmmforge.structured_configs.instance import InstanceConfig, validate_instance_config


class TestInstanceConfig:
    """Test InstanceConfig."""

    def test_instance_derived_config(self) -> None:
        """Test creating a derived instance config from a dataclass."""

        @dataclass
        class LayeredInstance(InstanceConfig):
            """Some layered topology config."""

            num_layers: int
            order: int = 1

        cfg: DictConfig = OmegaConf.structured(LayeredInstance(_target_="hmmforge.Layered", num_layers=4))
        assert cfg.get("_target_") == "hmmforge.Layered"
        assert cfg.get("num_layers") == 4
        assert cfg.get("order") == 1

    def test_validate_instance_config_valid(self) -> None:
        validate_instance_config(DictConfig({"_target_": "hmmforge.topologies.builder.build_topology"}))
        validate_instance_config(DictConfig({"_target_": "expected.Target"}), expected_target="expected.Target")

    @pytest.mark.parametrize(
        "cfg,match",
        [
            ({}, "InstanceConfig._target_ must be a string"),
            ({"_target_": "  "}, "InstanceConfig._target_ must be a non-empty string"),
            ({"_target_": 123}, "InstanceConfig._target_ must be a string"),
        ],
    )
    def test_validate_instance_config_invalid_target(self, cfg, match) -> None:
        with pytest.raises(ConfigValidationError, match=match):
            validate_instance_config(DictConfig(cfg))

    def test_validate_instance_config_unexpected_target(self) -> None:
        cfg = DictConfig({"_target_": "actual.Target"})
        with pytest.raises(ConfigValidationError, match="InstanceConfig._target_ must be expected.Target, got actual.Target"):
            validate_instance_config(cfg, expected_target="expected.Target")
