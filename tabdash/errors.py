"""Exceptions raised by tabdash."""


class TabdashError(Exception):
    """Base class for dashboard errors."""


class NamingConflictError(TabdashError, ValueError):
    """A tab or watcher name is already taken."""


class DrawOverflowError(TabdashError, RuntimeError):
    """A tab returned more lines than it was allowed to draw.

    This is a defect in the tab, so the render loop stops instead of
    trying to recover.
    """
