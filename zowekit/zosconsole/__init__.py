"""
Zowekit console

Issue MVS operator commands over z/OSMF.
"""

from zowekit.zosconsole.console import Console, ConsoleResponse

__all__ = ["Console", "ConsoleResponse"]
