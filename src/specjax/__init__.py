import logging

from . import errors
from . import precision
from . import validation
from . import checks
from . import regions
from . import kernels
from . import gamma
from . import erf
from . import incomplete_gamma
from . import beta
from . import bessel_kernels
from . import bessel
from . import orthopoly
from . import hypgeom
from . import airy
from . import elementary

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "errors",
    "precision",
    "validation",
    "checks",
    "regions",
    "kernels",
    "gamma",
    "erf",
    "incomplete_gamma",
    "beta",
    "bessel_kernels",
    "bessel",
    "orthopoly",
    "hypgeom",
    "airy",
    "elementary",
]
