"""Declarative reconciliation of NetBox resources.

Records describing IP ranges and device types are created, read back,
updated, and deleted through schema-driven adapters; VLAN groups are
resolved through a lookup adapter that requires exactly one match.
"""

from .config import NetBoxSettings
from .provider import NetBoxProvider

__all__ = ["NetBoxSettings", "NetBoxProvider"]

__version__ = "0.1.0"
