"""
Keyed handler tables.

``new_registry`` returns an empty table and a decorator that files handlers
into it. The pattern generators in :py:mod:`layerpaint.composite.paint` are
kept this way::

    GENERATORS, register = new_registry(attribute='pattern')

    @register('dots')
    def draw_dots(size, rgba):
        ...

    tile = GENERATORS['dots'](24, (0.0, 0.0, 0.0, 1.0))
"""

from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


def new_registry(
    attribute: Optional[str] = None,
) -> Tuple[Dict[Any, Callable], Callable]:
    """
    Create a handler table and its ``@register(key)`` decorator.

    :param attribute: When given, each handler gets its key stored under this
        attribute name.
    :raise KeyError: from the decorator when ``key`` is already taken.
    """
    table: Dict[Any, Callable] = {}

    def register(key: Any) -> Callable[[F], F]:
        if key in table:
            raise KeyError("%r is already registered" % (key,))

        def decorator(func: F) -> F:
            table[key] = func
            if attribute:
                setattr(func, attribute, key)
            return func

        return decorator

    return table, register
