"""Adapters layer - concrete implementations at the system edge.

- Inbound adapters: Turn statement text into executable plans
"""

from lcplatform.adapters.inbound import SQLParser

__all__ = [
    "SQLParser",
]
