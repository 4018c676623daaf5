"""
Core building blocks shared across the mlcc packages.
"""

from .enums import *
from .exceptions import *

from .enums import __all__ as _enums_all
from .exceptions import __all__ as _exceptions_all

__all__ = list(_enums_all) + list(_exceptions_all)
