"""
Zowekit TSO

Start, converse with and stop TSO address spaces over z/OSMF.
"""

from zowekit.zostso.tso import IssueResponse, StartTsoParams, Tso, TsoResponse

__all__ = ["IssueResponse", "StartTsoParams", "Tso", "TsoResponse"]
