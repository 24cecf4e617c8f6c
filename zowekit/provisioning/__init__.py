"""
Zowekit provisioning

Templates and provisioned instances of z/OSMF cloud provisioning.
"""

from zowekit.provisioning.provisioning import Provisioning, parse_properties, read_properties_file

__all__ = ["Provisioning", "parse_properties", "read_properties_file"]
