"""Tests for the hmmforge exception hierarchy."""

import pytest

from hmmforge.exceptions import ConfigValidationError, GraphConsistencyError, HmmForgeException, TopologyError


@pytest.mark.parametrize("exception", [ConfigValidationError, GraphConsistencyError, TopologyError])
def test_exceptions_share_base(exception) -> None:
    assert issubclass(exception, HmmForgeException)


def test_topology_error_is_value_error() -> None:
    assert issubclass(TopologyError, ValueError)
    assert not issubclass(GraphConsistencyError, ValueError)
