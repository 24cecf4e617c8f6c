"""
Zowekit workflows

Create, run and archive z/OSMF workflows.
"""

from zowekit.workflows.workflows import Workflows

__all__ = ["Workflows"]
