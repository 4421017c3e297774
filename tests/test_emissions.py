"""Tests for emission kinds and the emission factory."""

from dataclasses import dataclass
from typing import Any

import numpy as np
import pytest

from hmmforge.emissions import EmissionKind, EmissionSpec, create_emission, create_emissions, to_emission_kind

ALPHABET = "ACGT"


@dataclass
class Silent:
    pass


@dataclass
class Uniform:
    alphabet: str


@dataclass
class Discrete:
    alphabet: str
    ess: float


@dataclass
class Phylo:
    alphabet: str
    ess: float
    tree: Any


@dataclass
class Reference:
    alphabet: str
    reference_index: int
    ess: float
    initial_hyperparameters: np.ndarray | None


CONSTRUCTORS = {
    EmissionKind.SILENT: Silent,
    EmissionKind.UNIFORM: Uniform,
    EmissionKind.DISCRETE: Discrete,
    EmissionKind.PHYLO_DISCRETE: Phylo,
    EmissionKind.REFERENCE_DISCRETE: Reference,
}


@pytest.mark.parametrize(
    "kind,expected",
    [
        ("silent", EmissionKind.SILENT),
        ("DISCRETE", EmissionKind.DISCRETE),
        ("phylo_discrete", EmissionKind.PHYLO_DISCRETE),
        ("Reference_Discrete", EmissionKind.REFERENCE_DISCRETE),
        (EmissionKind.UNIFORM, EmissionKind.UNIFORM),
    ],
)
def test_to_emission_kind(kind, expected):
    assert to_emission_kind(kind) is expected


def test_to_emission_kind_unknown():
    with pytest.raises(ValueError, match='Unknown emission kind: "normal"'):
        to_emission_kind("normal")


def test_is_silent():
    assert EmissionKind.SILENT.is_silent
    assert not any(kind.is_silent for kind in EmissionKind if kind is not EmissionKind.SILENT)


def test_with_ess():
    spec = EmissionSpec(EmissionKind.DISCRETE)
    updated = spec.with_ess(np.float64(2.5))
    assert spec.ess == 0.0
    assert updated.ess == 2.5
    assert isinstance(updated.ess, float)
    assert updated.kind is EmissionKind.DISCRETE


def test_initial_hyperparameters():
    assert EmissionSpec(EmissionKind.REFERENCE_DISCRETE).initial_hyperparameters is None
    spec = EmissionSpec(EmissionKind.REFERENCE_DISCRETE, ess=4.0, initial_probabilities=np.array([[0.75, 0.25]]))
    np.testing.assert_allclose(spec.initial_hyperparameters, [[3.0, 1.0]])


def test_create_emission():
    assert create_emission(EmissionSpec(EmissionKind.SILENT), CONSTRUCTORS, ALPHABET) == Silent()
    assert create_emission(EmissionSpec(EmissionKind.UNIFORM), CONSTRUCTORS, ALPHABET) == Uniform(ALPHABET)
    assert create_emission(EmissionSpec(EmissionKind.DISCRETE, ess=2.0), CONSTRUCTORS, ALPHABET) == Discrete(
        ALPHABET, 2.0
    )
    spec = EmissionSpec(EmissionKind.PHYLO_DISCRETE, ess=1.0, tree="((A,B),C);")
    phylo = create_emission(spec, CONSTRUCTORS, ALPHABET)
    assert phylo == Phylo(ALPHABET, 1.0, "((A,B),C);")


def test_create_reference_emission():
    spec = EmissionSpec(
        EmissionKind.REFERENCE_DISCRETE, ess=2.0, reference_index=3, initial_probabilities=np.array([0.5, 0.5])
    )
    emission = create_emission(spec, CONSTRUCTORS, ALPHABET)
    assert isinstance(emission, Reference)
    assert emission.reference_index == 3
    np.testing.assert_allclose(emission.initial_hyperparameters, [1.0, 1.0])


def test_create_emission_missing_constructor():
    with pytest.raises(KeyError):  # noqa: PT011
        create_emission(EmissionSpec(EmissionKind.UNIFORM), {EmissionKind.SILENT: Silent}, ALPHABET)


def test_create_emission_invalid_constructor():
    with pytest.raises(TypeError, match="Invalid constructor for discrete"):
        create_emission(EmissionSpec(EmissionKind.DISCRETE), {EmissionKind.DISCRETE: Uniform}, ALPHABET)


def test_create_emissions():
    specs = [EmissionSpec(EmissionKind.SILENT), EmissionSpec(EmissionKind.DISCRETE, ess=1.0)]
    assert create_emissions(specs, CONSTRUCTORS, ALPHABET) == [Silent(), Discrete(ALPHABET, 1.0)]
