"""Enumerations shared across the engine."""

from enum import Enum


class AttributeTag(str, Enum):
    """Well-known attribute tags.

    Any other string is accepted as a user tag.
    """

    WEIGHT = "weight"
    COLOR = "color"
    DIRECTED = "directed"
    WEIGHTED = "weighted"
    POSITION = "position"
    LABEL = "label"


class LayoutStyle(Enum):
    """Drawing strategies understood by the layout dispatcher."""

    DEFAULT = "default"
    SPRING = "spring"
    MULTILEVEL = "multilevel"
    SPRING_3D = "spring3d"
    TREE = "tree"
    PLANAR = "planar"
    CIRCLE = "circle"


class Color(int, Enum):
    """Palette indices used for highlighting."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
