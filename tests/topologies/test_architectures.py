"""Tests for the profile edge templates."""

import numpy as np
import pytest

from hmmforge.exceptions import TopologyError
from hmmforge.topologies.architectures import (
    DELETE,
    INSERT,
    MATCH,
    MATCH_NEXT,
    Architecture,
    get_init_from_to,
    has_delete_states,
    has_insert_states,
    to_architecture,
    validate_init_from_to,
)


def _edges(template: np.ndarray) -> list[list[int]]:
    return [np.flatnonzero(~np.isnan(row)).tolist() for row in template]


@pytest.mark.parametrize(
    "architecture,expected",
    [
        (Architecture.PLAN7, [[1, 3, 5], [1, 3], [3, 5]]),
        (Architecture.PLAN8I, [[1, 3, 5], [1, 3], [1, 3, 5]]),
        (Architecture.PLAN8D, [[1, 3, 5], [1, 3, 5], [3, 5]]),
        (Architecture.PLAN9, [[1, 3, 5], [1, 3, 5], [1, 3, 5]]),
    ],
)
def test_templates(architecture, expected):
    template = get_init_from_to(architecture, 6.0)
    assert template.shape == (3, 6)
    assert _edges(template) == expected
    np.testing.assert_allclose(np.nansum(template, axis=1), [6.0, 6.0, 6.0])


def test_template_rows():
    assert (MATCH, INSERT, DELETE) == (0, 1, 2)
    assert MATCH_NEXT == 3


def test_to_architecture():
    assert to_architecture("plan8i") is Architecture.PLAN8I
    assert to_architecture(Architecture.PLAN9) is Architecture.PLAN9
    with pytest.raises(ValueError, match="Unknown architecture"):
        to_architecture("PLAN10")


def test_validate_init_from_to():
    template = get_init_from_to("PLAN7", 1.0)
    np.testing.assert_array_equal(validate_init_from_to(template.tolist()), template)

    with pytest.raises(TopologyError, match="shape"):
        validate_init_from_to(np.ones((2, 6)))

    negative = template.copy()
    negative[0, 1] = -1.0
    with pytest.raises(TopologyError, match="non-negative"):
        validate_init_from_to(negative)

    disconnected = template.copy()
    disconnected[2, MATCH_NEXT] = np.nan
    with pytest.raises(TopologyError, match="match state of the next layer"):
        validate_init_from_to(disconnected)


def test_state_kinds_in_use():
    template = get_init_from_to("PLAN9", 1.0)
    assert has_insert_states(template)
    assert has_delete_states(template)

    match_only = np.full((3, 6), np.nan)
    match_only[:, MATCH_NEXT] = 1.0
    assert not has_insert_states(match_only)
    assert not has_delete_states(match_only)
