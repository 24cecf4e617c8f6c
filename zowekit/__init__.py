"""
Zowekit: z/OSMF SDK and CLI

A Python toolkit for working with z/OS over the z/OSMF REST API:
- z/OS files: data sets, members, USS files and file systems
- Jobs, TSO and console commands
- Provisioning and workflows
- File-backed event channels shared between processes
- Plugin-extensible click CLI

Distribution: Available as both Python library and CLI
"""

__version__ = "0.1.0"
__all__ = [
    "__version__",
]
