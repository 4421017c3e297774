"""A populated context graph together with its states."""

from dataclasses import dataclass

from hmmforge.emissions import EmissionSpec
from hmmforge.logger import HMMFORGE_LOGGER
from hmmforge.topologies.context_graph import ContextGraph
from hmmforge.topologies.propagation import PropagationResult, propagate_ess
from hmmforge.topologies.skeleton import HMMSkeleton, TransitionElement


@dataclass
class Topology:
    """The output of a topology builder.

    Attributes:
        names: the name of every state
        emissions: the emission of every state; the ESS is filled in by `assemble`
        graph: the resolved context graph
        order: the Markov order of the model
        ess: the global equivalent sample size
        max_rounds: the number of propagation rounds for graphs without absorbing nodes
    """

    names: list[str]
    emissions: list[EmissionSpec]
    graph: ContextGraph
    order: int
    ess: float
    max_rounds: int | None = None

    @property
    def num_states(self) -> int:
        """The number of states."""
        return len(self.names)

    def propagate(self) -> PropagationResult:
        """Propagate the ESS through the graph."""
        return propagate_ess(self.graph, self.ess, max_rounds=self.max_rounds, num_states=self.num_states)

    def assemble(self) -> HMMSkeleton:
        """Derive all pseudo-counts and bundle them with the states."""
        result = self.propagate()
        transitions = [
            TransitionElement(node.context, node.states, hyperparameters, node.weights)
            for node, hyperparameters in zip(self.graph, result.hyperparameters, strict=True)
        ]
        emissions = [spec.with_ess(ess) for spec, ess in zip(self.emissions, result.state_ess, strict=True)]
        HMMFORGE_LOGGER.debug(
            "assembled %d states and %d transition elements", len(self.names), len(transitions)
        )
        return HMMSkeleton(
            names=list(self.names),
            emissions=emissions,
            transitions=transitions,
            state_ess=result.state_ess,
            ess=self.ess,
            order=self.order,
        )
