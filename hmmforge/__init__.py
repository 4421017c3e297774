"""hmmforge package for building the topologies and transition priors of HMMs."""

from .priors import DirichletTransitionPrior
from .topologies.builder import build_model_from_config, build_topology
from .topologies.skeleton import HMMSkeleton

__all__ = ["DirichletTransitionPrior", "HMMSkeleton", "build_model_from_config", "build_topology"]
