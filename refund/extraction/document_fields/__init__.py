"""
Refund Document Field Extraction Module
Contains field extractors, support modules, shared utilities, and data models
"""

from . import models
from . import shared_utils
from . import support_modules
from . import field_extractors

__all__ = [
    'field_extractors',
    'support_modules',
    'shared_utils',
    'models'
]
