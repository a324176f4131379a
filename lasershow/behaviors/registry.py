"""Map a stored behavior config onto a fresh behavior instance."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from lasershow.behaviors.base import Behavior, BehaviorKind, UnknownBehaviorError, behavior_kind_of
from lasershow.behaviors.corner_array import CornerArrayBehavior
from lasershow.behaviors.default import DefaultBehavior
from lasershow.behaviors.start import StartBehavior
from lasershow.behaviors.wireframe import WireframeBehavior


def _create_default(config: Mapping[str, Any], behavior_id: Optional[str]) -> Behavior:
    return DefaultBehavior(config, behavior_id)


def _create_wireframe(config: Mapping[str, Any], behavior_id: Optional[str]) -> Behavior:
    return WireframeBehavior(config, behavior_id)


def _create_corner_array(config: Mapping[str, Any], behavior_id: Optional[str]) -> Behavior:
    return CornerArrayBehavior(config, behavior_id)


def _create_start(config: Mapping[str, Any], behavior_id: Optional[str]) -> Behavior:
    return StartBehavior(config, behavior_id)


def create_behavior(config: Optional[Mapping[str, Any]] = None, behavior_id: Optional[str] = None) -> Behavior:
    """Build a behavior for ``config["behaviorType"]`` (``default`` when absent).

    The config is copied, so instances never share mutable parameters.
    Raises :class:`UnknownBehaviorError` for a type outside :class:`BehaviorKind`.
    """

    config = dict(config or {})
    kind = behavior_kind_of(config)
    if kind is BehaviorKind.DEFAULT:
        return _create_default(config, behavior_id)
    elif kind is BehaviorKind.WIREFRAME:
        return _create_wireframe(config, behavior_id)
    elif kind is BehaviorKind.CORNER_ARRAY:
        return _create_corner_array(config, behavior_id)
    elif kind is BehaviorKind.START:
        return _create_start(config, behavior_id)
    raise UnknownBehaviorError(kind)


def known_kinds() -> list[str]:
    return [kind.value for kind in BehaviorKind]


def is_known_kind(value: Optional[str]) -> bool:
    try:
        BehaviorKind.parse(value)
    except UnknownBehaviorError:
        return False
    return True


__all__ = [
    "BehaviorKind",
    "UnknownBehaviorError",
    "create_behavior",
    "known_kinds",
    "is_known_kind",
]
