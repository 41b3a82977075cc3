"""Inventory model for hostini.

An Inventory owns the collection of global (ungrouped) hosts and the
collection of groups. Groups own their direct member hosts and variables;
child groups are referenced by name only and resolved against the
inventory on use.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .logging import get_logger
from .types import Host, HostCollection, VarMap

logger = get_logger(__name__)


@dataclass(eq=False)
class Group:
    """A named group of hosts with group-level variables.

    Attributes:
        name: Group name (e.g., "webservers", "databases")
        hosts: Direct member hosts
        vars: Group-level variables
        children: Names of child groups, in declaration order

    Example:
        >>> group = Group("webservers")
        >>> group.hosts.append(Host("web01"))
        >>> group.add_child("canary")
    """

    name: str
    hosts: HostCollection = field(default_factory=HostCollection)
    vars: VarMap = field(default_factory=VarMap)
    children: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.vars, VarMap):
            self.vars = VarMap(self.vars)

    def add_child(self, name: str) -> None:
        """Append a child group name."""
        self.children.append(name)

    def get_var(self, key: Any, default: str | None = None) -> str | None:
        return self.vars.get(key, default)

    def set_var(self, key: Any, value: Any) -> None:
        self.vars[key] = value

    @property
    def is_empty(self) -> bool:
        """True when the group has no hosts, vars or children."""
        return not (self.hosts or self.vars or self.children)


class GroupCollection:
    """Ordered sequence of groups with name-based lookup.

    Unlike HostCollection.add, ``add`` never checks for an existing group
    of the same name; use ``lookup_or_add`` for that.
    """

    def __init__(self) -> None:
        self._groups: list[Group] = []

    def add(
        self,
        name: str,
        hosts: Iterable[Host] | None = None,
        vars: Mapping[Any, Any] | None = None,
    ) -> Group:
        """Construct a new group and append it."""
        group = Group(name, HostCollection(hosts), VarMap(vars))
        self._groups.append(group)
        return group

    def lookup(self, name: str) -> Group | None:
        """Return the first group with the given name, or None."""
        return next((g for g in self._groups if g.name == name), None)

    def lookup_or_add(self, name: str) -> Group:
        """Return the first group with the given name, creating it if absent."""
        return self.lookup(name) or self.add(name)

    def names(self) -> list[str]:
        return [g.name for g in self._groups]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return self.lookup(item) is not None
        return any(g is item for g in self._groups)

    def __iter__(self) -> Iterator[Group]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __getitem__(self, index: int) -> Group:
        return self._groups[index]

    def __repr__(self) -> str:
        return f"GroupCollection({self.names()!r})"


class InventoryHostCollection(HostCollection):
    """The inventory's global hosts.

    Removing a global host also removes every host of that name from every
    group of the owning inventory.
    """

    def __init__(self, inventory: "Inventory") -> None:
        super().__init__()
        self._inventory = inventory

    def remove(self, host: Host | str) -> Host | None:
        removed = super().remove(host)
        if removed is None:
            return None

        for group in self._inventory.groups:
            if group.hosts.remove(removed.name) is not None:
                logger.info("Removed host from group", host=removed.name, group=group.name)
        return removed


class Inventory:
    """Aggregate root of the inventory model.

    Attributes:
        hosts: Global (ungrouped) hosts
        groups: Groups in declaration order

    Example:
        >>> inventory = Inventory()
        >>> inventory.hosts.add("db1", {"role": "primary"})
        >>> web = inventory.groups.add("web")
        >>> web.hosts.append(Host("web1"))
    """

    def __init__(self) -> None:
        self.hosts = InventoryHostCollection(self)
        self.groups = GroupCollection()

    def child_groups(self, group: Group) -> list[Group]:
        """Resolve a group's child names to groups, skipping unknown names."""
        resolved = (self.groups.lookup(name) for name in group.children)
        return [g for g in resolved if g is not None]

    def group_hosts(self, name: str) -> list[Host]:
        """Get the hosts of a group and, recursively, of its children.

        Hosts are deduplicated by name, first occurrence wins. Groups that
        reference each other as children are visited once.

        Args:
            name: Group name

        Returns:
            Hosts of the group tree, empty if the group is unknown
        """
        result: dict[str, Host] = {}
        seen: set[str] = set()
        pending = [name]
        while pending:
            group_name = pending.pop(0)
            if group_name in seen:
                continue
            seen.add(group_name)
            # Duplicate plain headers may produce several groups of one name
            for group in self.groups:
                if group.name != group_name:
                    continue
                for host in group.hosts:
                    result.setdefault(host.name, host)
                pending.extend(group.children)
        return list(result.values())

    def host_names(self) -> list[str]:
        """Get the unique names of all global and group hosts, in order."""
        names = dict.fromkeys(self.hosts.names())
        for group in self.groups:
            names.update(dict.fromkeys(group.hosts.names()))
        return list(names)

    def write_file(self, path: str | Path) -> None:
        """Write the inventory to a file in INI format.

        Args:
            path: Destination file, overwritten if it exists
        """
        from .ini import write_string

        Path(path).write_text(write_string(self), encoding="utf-8")

    def __repr__(self) -> str:
        return f"Inventory(hosts={self.hosts.names()!r}, groups={self.groups.names()!r})"
