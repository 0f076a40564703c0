"""
Triad Runtime - builds a wired engine from YAML configuration.
"""

from triad.runtime.context import RuntimeContext

__all__ = ["RuntimeContext"]
