"""
attrs validators for effect settings.
"""
import attr

__all__ = ['range_', 'integer_', 'color_']


@attr.s(repr=False, slots=True, hash=True)
class _RangeValidator(object):
    minimum = attr.ib()
    maximum = attr.ib()

    def __call__(self, inst, attribute, value):
        try:
            ok = self.minimum <= value <= self.maximum
        except TypeError:
            ok = False
        if not ok:
            raise ValueError(
                "%s must be within [%r, %r], got %r"
                % (attribute.name, self.minimum, self.maximum, value)
            )

    def __repr__(self):
        return "<range_ validator [%r, %r]>" % (self.minimum, self.maximum)


@attr.s(repr=False, slots=True, hash=True)
class _IntegerValidator(object):
    def __call__(self, inst, attribute, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("%s must be an integer, got %r" % (attribute.name, value))

    def __repr__(self):
        return "<integer_ validator>"


@attr.s(repr=False, slots=True, hash=True)
class _ColorValidator(object):
    def __call__(self, inst, attribute, value):
        # Imported late: paint pulls in the api package.
        from layerpaint.composite.paint import parse_color

        if parse_color(value) is None:
            raise ValueError("%s must be a hex color, got %r" % (attribute.name, value))

    def __repr__(self):
        return "<color_ validator>"


def range_(minimum, maximum):
    """
    Raise :exc:`ValueError` for values outside ``[minimum, maximum]`` or not
    comparable with them.
    """
    return _RangeValidator(minimum, maximum)


def color_():
    """
    Raise :exc:`ValueError` unless the value is a CSS hex color such as
    ``'#000'``, ``'#1a2b3c'`` or ``'#1a2b3c80'``.
    """
    return _ColorValidator()


def integer_():
    """
    Raise :exc:`ValueError` unless the value is an :class:`int`. Booleans are
    rejected.
    """
    return _IntegerValidator()
