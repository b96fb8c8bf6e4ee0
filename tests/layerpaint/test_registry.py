import logging

import pytest

from layerpaint.registry import new_registry

logger = logging.getLogger(__name__)


def test_new_registry():
    table, register = new_registry(attribute="kind")

    @register("square")
    def draw_square():
        return "square"

    assert table == {"square": draw_square}
    assert draw_square.kind == "square"


def test_new_registry_duplicate_key():
    table, register = new_registry()
    register("a")(lambda: None)
    with pytest.raises(KeyError):
        register("a")
