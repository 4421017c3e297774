"""Context graphs, ESS propagation and the topology builders."""

from hmmforge.topologies.architectures import Architecture, get_init_from_to
from hmmforge.topologies.context_graph import ContextContainer, ContextGraph, PseudoTransitionElement
from hmmforge.topologies.ergodic import create_ergodic_topology
from hmmforge.topologies.profile import create_profile_topology
from hmmforge.topologies.propagation import PropagationResult, propagate_ess
from hmmforge.topologies.pseudo_ergodic import create_pseudo_ergodic_topology
from hmmforge.topologies.skeleton import HMMSkeleton, TransitionElement
from hmmforge.topologies.sunflower import create_sunflower_topology
from hmmforge.topologies.topology import Topology

__all__ = [
    # Graph
    "ContextContainer",
    "ContextGraph",
    "PseudoTransitionElement",
    # Propagation
    "PropagationResult",
    "propagate_ess",
    # Topologies
    "Architecture",
    "Topology",
    "create_ergodic_topology",
    "create_profile_topology",
    "create_pseudo_ergodic_topology",
    "create_sunflower_topology",
    "get_init_from_to",
    # Assembly
    "HMMSkeleton",
    "TransitionElement",
]
