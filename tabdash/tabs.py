"""Base class for dashboard tabs."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import Engine


class Tab(ABC):
    """
    A named panel drawn by the engine.

    Creating a tab registers it with ``engine``. Unless ``debug`` is set,
    registration also starts the engine's threads; tests pass ``debug=True``
    to keep everything on the calling thread.
    """

    def __init__(self, engine: Engine, name: str, debug: bool = False):
        if not name:
            raise ValueError("tab name must be a non-empty string")
        self.engine = engine
        self.name = name
        self.debug = debug
        # Should only be turned off temporarily, e.g. while a tab uses the
        # arrow keys for its own navigation.
        self.allow_arrow_tab_switch = True
        engine.register(self, start=not debug)

    @abstractmethod
    def draw(self, allowed_lines: int) -> list[str]:
        """
        Return the lines to show this frame, at most ``allowed_lines``.

        Called on the render thread. Must not block or touch engine state.
        Lines may be any width; the engine wraps and pads them.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
