"""Emission kinds and the factory that turns them into emission objects.

Topologies only record which kind of emission each state uses. Actual emission
objects are created by caller-supplied constructors, one per kind.
"""

import dataclasses
import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

import numpy as np

T = TypeVar("T")


class EmissionKind(str, Enum):
    """The kinds of emission a state can use."""

    SILENT = "silent"
    UNIFORM = "uniform"
    DISCRETE = "discrete"
    PHYLO_DISCRETE = "phylo_discrete"
    REFERENCE_DISCRETE = "reference_discrete"

    @property
    def is_silent(self) -> bool:
        """Whether a state of this kind emits nothing."""
        return self is EmissionKind.SILENT


def to_emission_kind(kind: "EmissionKind | str") -> EmissionKind:
    """Convert a kind or its name/value to an EmissionKind."""
    if isinstance(kind, EmissionKind):
        return kind
    try:
        return EmissionKind(kind.lower())
    except ValueError:
        try:
            return EmissionKind[kind.upper()]
        except KeyError as e:
            raise ValueError(
                f'Unknown emission kind: "{kind}".  Available kinds are: {", ".join(k.value for k in EmissionKind)}'
            ) from e


@dataclass(frozen=True)
class EmissionSpec:
    """Everything needed to create the emission of one state.

    Attributes:
        kind: the kind of emission
        ess: the equivalent sample size of the emission's prior
        tree: a phylogenetic tree handle for PHYLO_DISCRETE emissions
        reference_index: the position in the reference sequence for REFERENCE_DISCRETE emissions
        initial_probabilities: a-priori conditional probabilities for REFERENCE_DISCRETE emissions
    """

    kind: EmissionKind
    ess: float = 0.0
    tree: Any = None
    reference_index: int | None = None
    initial_probabilities: np.ndarray | None = dataclasses.field(default=None, compare=False)

    def with_ess(self, ess: float) -> "EmissionSpec":
        """A copy of this spec with a different ESS."""
        return dataclasses.replace(self, ess=float(ess))

    @property
    def initial_hyperparameters(self) -> np.ndarray | None:
        """The a-priori probabilities scaled by the ESS."""
        if self.initial_probabilities is None:
            return None
        return np.asarray(self.initial_probabilities, dtype=np.float64) * self.ess

    def constructor_arguments(self, alphabet: Any) -> dict[str, Any]:
        """The keyword arguments passed to the constructor of this kind."""
        return _CONSTRUCTOR_ARGUMENTS[self.kind](self, alphabet)


_CONSTRUCTOR_ARGUMENTS: dict[EmissionKind, Callable[[EmissionSpec, Any], dict[str, Any]]] = {
    EmissionKind.SILENT: lambda spec, alphabet: {},
    EmissionKind.UNIFORM: lambda spec, alphabet: {"alphabet": alphabet},
    EmissionKind.DISCRETE: lambda spec, alphabet: {"alphabet": alphabet, "ess": spec.ess},
    EmissionKind.PHYLO_DISCRETE: lambda spec, alphabet: {"alphabet": alphabet, "ess": spec.ess, "tree": spec.tree},
    EmissionKind.REFERENCE_DISCRETE: lambda spec, alphabet: {
        "alphabet": alphabet,
        "reference_index": spec.reference_index,
        "ess": spec.ess,
        "initial_hyperparameters": spec.initial_hyperparameters,
    },
}


def create_emission(spec: EmissionSpec, constructors: Mapping[EmissionKind, Callable[..., T]], alphabet: Any) -> T:
    """Create the emission described by `spec` with the constructor registered for its kind."""
    if spec.kind not in constructors:
        raise KeyError(
            f'No constructor for emission kind: "{spec.kind.value}".  '
            f"Available kinds are: {', '.join(kind.value for kind in constructors)}"
        )
    constructor = constructors[spec.kind]
    arguments = spec.constructor_arguments(alphabet)
    sig = inspect.signature(constructor)
    try:
        sig.bind(**arguments)
    except TypeError as e:
        params = ", ".join(f"{k}: {v.annotation}" for k, v in sig.parameters.items())
        raise TypeError(f"Invalid constructor for {spec.kind.value}: {e}.  Signature is: {params}") from e
    return constructor(**arguments)


def create_emissions(
    specs: Sequence[EmissionSpec], constructors: Mapping[EmissionKind, Callable[..., T]], alphabet: Any
) -> list[T]:
    """Create the emissions of all states."""
    return [create_emission(spec, constructors, alphabet) for spec in specs]
