"""Routing — ordered route tables and virtual-host selection.

Tables and hosts are registered during setup and frozen before the
server starts accepting requests.
"""

from decoy.routing.bindings import Binding, ExactPath, FileBinding, Mount, PatternPath
from decoy.routing.hosts import HostEntry, HostRegistry
from decoy.routing.table import RouteTable

__all__ = [
    "Binding",
    "ExactPath",
    "FileBinding",
    "HostEntry",
    "HostRegistry",
    "Mount",
    "PatternPath",
    "RouteTable",
]
