"""Type definitions for hostini inventories.

This module defines the leaf data types of the inventory model: the
variable map shared by hosts and groups, the Host record, and the ordered
host collection used both for global hosts and for group members.
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, overload

from .exceptions import InvalidHostError


def normalize_key(key: Any) -> str:
    """Convert a variable key to its canonical string form.

    Strings map to themselves, enum members to their string value (or their
    name when the value is not a string), and bytes are decoded as UTF-8.

    Args:
        key: Key as supplied by the caller

    Returns:
        Canonical string key

    Raises:
        TypeError: If the key has no string representation
    """
    if isinstance(key, Enum):
        return key.value if isinstance(key.value, str) else key.name
    if isinstance(key, str):
        return str(key)
    if isinstance(key, bytes):
        return key.decode("utf-8")
    raise TypeError(f"Variable keys must be strings, got {type(key).__name__}")


class VarMap(MutableMapping[str, str]):
    """Ordered string-to-string mapping with representation-indifferent keys.

    Every key is normalized on insert and on lookup, so ``"env"``, ``b"env"``
    and an enum member whose value is ``"env"`` all address the same slot.
    Values are kept as strings.

    Example:
        >>> v = VarMap({"env": "prod"})
        >>> v[b"env"]
        'prod'
        >>> v["port"] = 22
        >>> list(v.items())
        [('env', 'prod'), ('port', '22')]
    """

    def __init__(self, data: Mapping[Any, Any] | Iterable[tuple[Any, Any]] | None = None) -> None:
        self._data: dict[str, str] = {}
        if data is not None:
            self.update(data)

    def __getitem__(self, key: Any) -> str:
        return self._data[normalize_key(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[normalize_key(key)] = value if isinstance(value, str) else str(value)

    def __delitem__(self, key: Any) -> None:
        del self._data[normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        try:
            return normalize_key(key) in self._data
        except TypeError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"VarMap({self._data!r})"

    def copy(self) -> "VarMap":
        return VarMap(self._data)

    def to_tokens(self) -> list[str]:
        """Render variables as ``key=value`` tokens in insertion order."""
        return [f"{k}={v}" for k, v in self._data.items()]


@dataclass
class Host:
    """A single inventory host.

    Equality is structural: two hosts are equal when both their names and
    their variables match.

    Attributes:
        name: Host name (e.g., "web01", "db-primary"); must be non-empty
        vars: Host variables

    Raises:
        InvalidHostError: If name is None, empty or blank

    Example:
        >>> host = Host("web01", {"ansible_host": "10.0.0.1"})
        >>> host.to_line()
        'web01 ansible_host=10.0.0.1'
    """

    name: str
    vars: VarMap = field(default_factory=VarMap)

    def __post_init__(self) -> None:
        if self.name is None or not str(self.name).strip():
            raise InvalidHostError(self.name)
        if not isinstance(self.vars, VarMap):
            self.vars = VarMap(self.vars)

    def get_var(self, key: Any, default: str | None = None) -> str | None:
        """Get a host variable by key with optional default."""
        return self.vars.get(key, default)

    def set_var(self, key: Any, value: Any) -> None:
        """Set a host variable."""
        self.vars[key] = value

    def to_line(self) -> str:
        """Render the host as an inventory entry line with inline vars."""
        return " ".join([self.name, *self.vars.to_tokens()])


class HostCollection:
    """Ordered sequence of hosts with name-based lookup.

    ``add`` deduplicates on structural equality, ``append`` does not.
    ``remove`` only touches this collection.
    """

    def __init__(self, hosts: Iterable[Host] | None = None) -> None:
        self._hosts: list[Host] = []
        for host in hosts or ():
            self.add(host)

    @overload
    def add(self, host: Host) -> Host: ...

    @overload
    def add(self, host: str, vars: Mapping[Any, Any] | None = None) -> Host: ...

    def add(self, host: Host | str, vars: Mapping[Any, Any] | None = None) -> Host:
        """Add a host unless a structurally equal one is already present.

        Args:
            host: Host instance, or a host name to build one from
            vars: Variables for the new host when a name is given

        Returns:
            The resident host, which is the existing one for duplicates

        Raises:
            InvalidHostError: If a name is given and it is empty
        """
        if not isinstance(host, Host):
            host = Host(host, VarMap(vars))
        for existing in self._hosts:
            if existing == host:
                return existing
        self._hosts.append(host)
        return host

    def append(self, host: Host) -> Host:
        """Append a host without checking for duplicates."""
        self._hosts.append(host)
        return host

    def lookup(self, name: str) -> Host | None:
        """Return the first host with the given name, or None."""
        return next((h for h in self._hosts if h.name == name), None)

    def remove(self, host: Host | str) -> Host | None:
        """Remove a host by equality or every host with a given name.

        Args:
            host: Host instance or host name

        Returns:
            The first removed host, or None when nothing matched
        """
        if isinstance(host, Host):
            matches = [h for h in self._hosts if h == host]
        else:
            matches = [h for h in self._hosts if h.name == host]
        if not matches:
            return None
        self._hosts = [h for h in self._hosts if h not in matches]
        return matches[0]

    def names(self) -> list[str]:
        return [h.name for h in self._hosts]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return self.lookup(item) is not None
        return any(h == item for h in self._hosts)

    def __iter__(self) -> Iterator[Host]:
        return iter(self._hosts)

    def __len__(self) -> int:
        return len(self._hosts)

    def __getitem__(self, index: int) -> Host:
        return self._hosts[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.names()!r})"
