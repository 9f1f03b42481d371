from ._AlterStructure import (
    ExtendLeaves,
    CollapseBranches,
    BranchStatistics,
    RemoveNodesbyIDs,
)
from ._errors import (
    ElPiTopoError,
    InvalidLeafError,
    InvalidModeError,
    EmptySelectionError,
    DimensionMismatchError,
)
from . import src
from . import utils
from ._version import __version__
