class ElPiTopoError(ValueError):
    """Base class of the errors raised by the topology operators"""


class InvalidLeafError(ElPiTopoError):
    """A node requested for extension is not a leaf (degree != 1)"""


class InvalidModeError(ElPiTopoError):
    """The Mode argument is not one of the supported modes"""


class EmptySelectionError(ElPiTopoError):
    """No data point is available to position a new node"""


class DimensionMismatchError(ElPiTopoError):
    """Node positions, edges, weights or data have inconsistent shapes"""
