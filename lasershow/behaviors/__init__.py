"""Beam behaviors and the registry that builds them from stored configs."""

from .base import Behavior, BehaviorKind, BeamParameters, UnknownBehaviorError
from .corner_array import CornerArrayBehavior
from .default import DefaultBehavior
from .registry import create_behavior
from .start import StartBehavior
from .wireframe import WireframeBehavior

__all__ = [
    "Behavior",
    "BehaviorKind",
    "BeamParameters",
    "UnknownBehaviorError",
    "CornerArrayBehavior",
    "DefaultBehavior",
    "StartBehavior",
    "WireframeBehavior",
    "create_behavior",
]
