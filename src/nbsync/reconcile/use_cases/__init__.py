"""Use cases layer - Reconciliation logic for resource kinds."""

from .lookup_adapter import LookupAdapter
from .resource_adapter import ResourceAdapter

__all__ = ["LookupAdapter", "ResourceAdapter"]
