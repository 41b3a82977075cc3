"""hostini - INI host inventory model, reader and writer.

Reads line-oriented INI inventories (global hosts, ``[group]``,
``[group:vars]`` and ``[group:children]`` sections) into an in-memory
model and renders the model back to normalized text.

Quick Start:
    from hostini import read_file, write

    inventory = read_file("hosts")
    inventory.hosts.remove("db1")  # also removed from every group
    print("\\n".join(write(inventory)))
"""

__version__ = "0.1.0"

from hostini.exceptions import HostiniError, InvalidHostError
from hostini.ini import read, read_file, read_string, write, write_string
from hostini.inventory import Group, GroupCollection, Inventory
from hostini.types import Host, HostCollection, VarMap

__all__ = [
    "__version__",
    "Group",
    "GroupCollection",
    "Host",
    "HostCollection",
    "HostiniError",
    "InvalidHostError",
    "Inventory",
    "VarMap",
    "read",
    "read_file",
    "read_string",
    "write",
    "write_string",
]
