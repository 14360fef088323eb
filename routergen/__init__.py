from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

from routergen.module import ModuleDescriptor
from routergen.router import generate_router

__version__: str
try:
    __version__ = _version(__name__)
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"
