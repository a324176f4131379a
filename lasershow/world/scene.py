"""Scene root and helper overlay collaborators."""
from __future__ import annotations

from typing import Iterable, List

from lasershow.render.beam import Beam


class SceneRoot:
    """Flat container of drawables; the renderer walks ``children``."""

    def __init__(self) -> None:
        self._children: List[object] = []

    @property
    def children(self) -> tuple[object, ...]:
        return tuple(self._children)

    def add(self, obj: object) -> None:
        if not self._contains(obj):
            self._children.append(obj)

    def remove(self, obj: object) -> None:
        for index, child in enumerate(self._children):
            if child is obj:
                del self._children[index]
                return

    def _contains(self, obj: object) -> bool:
        return any(child is obj for child in self._children)

    def beams(self) -> Iterable[Beam]:
        return [child for child in self._children if isinstance(child, Beam)]

    def clear(self) -> None:
        self._children.clear()

    def __contains__(self, obj: object) -> bool:
        return self._contains(obj)

    def __len__(self) -> int:
        return len(self._children)


class HelperOverlay:
    """Debug and lighting helpers whose visibility is persisted."""

    def __init__(self, visible: bool = False) -> None:
        self.visible = visible

    def set_visible(self, visible: bool) -> None:
        self.visible = bool(visible)


__all__ = ["SceneRoot", "HelperOverlay"]
