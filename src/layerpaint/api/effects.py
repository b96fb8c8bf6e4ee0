"""
Effects module.

Settings for the border effects derived from the mask silhouette. Settings
are plain values owned by the caller; the compositor only reads them.

Example::

    from layerpaint.api.effects import EffectSettings

    settings = EffectSettings.from_dict({
        'stroke': {'enabled': True, 'color': '#000000', 'width': 0.5},
        'ripples': {'enabled': True, 'count': 3, 'width': 1, 'gap': 1.5},
    })
    settings = attrs.evolve(settings, enabled=False)
"""

import logging
from typing import Any, Iterator

from attrs import asdict, define, field, fields

from layerpaint.validators import color_, integer_, range_

logger = logging.getLogger(__name__)


def _whole(value):
    # Integral floats, as decoded from JSON, become ints.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@define(frozen=True)
class Stroke:
    """Line hugging the silhouette: the configured width, then a 2 px pass."""

    enabled: bool = True
    color: str = field(default="#000000", validator=color_())
    width: float = field(default=0.5, validator=range_(0, 1000))


@define(frozen=True)
class Outline:
    """Band around the silhouette at full and half width."""

    enabled: bool = False
    color: str = field(default="#000000", validator=color_())
    width: float = field(default=1.0, validator=range_(0, 1000))


@define(frozen=True)
class Shadow:
    """Blurred silhouette, outside (outer) or inside (inner) the mask."""

    enabled: bool = True
    color: str = field(default="#000000", validator=color_())
    blur: float = field(default=10.0, validator=range_(0, 1000))


@define(frozen=True)
class Ripples:
    """Concentric blurred rings spreading away from the silhouette."""

    enabled: bool = True
    color: str = field(default="#000000", validator=color_())
    count: int = field(
        default=9, converter=_whole, validator=[integer_(), range_(0, 100)]
    )
    width: float = field(default=1.2, validator=range_(0, 1000))
    gap: float = field(default=1.7, validator=range_(0, 1000))


@define(frozen=True)
class EffectSettings:
    """All border effects plus a master switch."""

    enabled: bool = True
    stroke: Stroke = field(factory=Stroke)
    outline: Outline = field(factory=Outline)
    outer_shadow: Shadow = field(factory=Shadow)
    inner_shadow: Shadow = field(factory=Shadow)
    ripples: Ripples = field(factory=Ripples)

    @classmethod
    def from_dict(cls, data: dict) -> "EffectSettings":
        """
        Build settings from nested dicts.

        Accepts both ``outer_shadow``/``inner_shadow`` keys and the
        ``shadows: {outer, inner}`` layout. Unknown keys are ignored.
        """
        data = dict(data)
        shadows = data.pop("shadows", None) or {}
        if "outer" in shadows:
            data.setdefault("outer_shadow", shadows["outer"])
        if "inner" in shadows:
            data.setdefault("inner_shadow", shadows["inner"])

        kwargs: dict[str, Any] = {}
        for attribute in fields(cls):
            if attribute.name not in data:
                continue
            value = data[attribute.name]
            if isinstance(value, dict):
                value = _from_dict(attribute.type, value)
            kwargs[attribute.name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Iterate ``(name, effect)`` over the enabled effects."""
        if not self.enabled:
            return
        for attribute in fields(type(self)):
            value = getattr(self, attribute.name)
            if getattr(value, "enabled", False):
                yield attribute.name, value

    def has_active(self) -> bool:
        return any(True for _ in self)


def _from_dict(kls, value: dict):
    names = {attribute.name for attribute in fields(kls)}
    unknown = set(value) - names
    if unknown:
        logger.debug("Ignoring unknown %s keys: %s" % (kls.__name__, sorted(unknown)))
    return kls(**{k: v for k, v in value.items() if k in names})
