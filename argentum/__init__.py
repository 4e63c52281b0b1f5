__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argentum'
__author__ = 'Argentum contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .conversion import *
from .engine import *
from .events import *
from .faults import *
from .names import *
from .options import *
from .parser import *
from .schema import *
from .tokens import *
from .utils import Unset
from .validation import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "Unset",
)

# Load the exposed API of the schema (descriptors, builders)
__all__ += schema.__all__  # type: ignore[attr-defined]
# Load the exposed API of the options
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the converters
__all__ += conversion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validators
__all__ += validation.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tokenizer and the name resolver
__all__ += tokens.__all__  # type: ignore[attr-defined]
__all__ += names.__all__  # type: ignore[attr-defined]
# Load the exposed API of the hooks
__all__ += events.__all__  # type: ignore[attr-defined]
# Load the exposed API of the engine and the command-line surface
__all__ += engine.__all__  # type: ignore[attr-defined]
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
