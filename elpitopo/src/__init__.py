from . import core
from . import distutils
from . import graphs
from . import reporting
