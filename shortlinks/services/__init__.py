"""Service layer for the short link registry.

This package contains the registry orchestrating code generation, entry
storage and access logging, plus the service exception taxonomy.
"""

from shortlinks.services.codes import CodeGenerator
from shortlinks.services.registry import Registry

__all__ = ["CodeGenerator", "Registry"]
