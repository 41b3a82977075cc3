"""INI inventory format reader and writer.

The reader folds the input lines into an Inventory, one line at a time,
threading an explicit ParseState through the fold. Each line is classified
as a comment, a qualified ``[group:vars]``/``[group:children]`` header, a
plain ``[group]`` header or an entry line; anything else is skipped.

The writer renders a normalized form: global hosts first, then each
group's hosts, vars and children sections. Comments are not preserved.

Example:
    >>> inventory = read_string("db1 role=primary\\n[dbs]\\ndb1\\n")
    >>> write(inventory)
    ['db1 role=primary', '', '[dbs]', 'db1']
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from functools import partial, reduce
from pathlib import Path

from .inventory import Group, Inventory
from .logging import get_logger
from .types import Host, VarMap

logger = get_logger(__name__)

COMMENT_PATTERN = re.compile(r"^\s*#")
QUALIFIED_HEADER_PATTERN = re.compile(r"^\[([^:\s]+)\S*:(vars|children)\]$")
PLAIN_HEADER_PATTERN = re.compile(r"^\[([^:]+)\]$")
ENTRY_PATTERN = re.compile(r"^\s*[^\[\s]\S*(\s+\S+=\S+)*\s*$")


class SectionMode(Enum):
    """How entry lines under the current group are interpreted."""

    NONE = "hosts"
    VARS = "vars"
    CHILDREN = "children"


@dataclass(frozen=True)
class ParseState:
    """Accumulator threaded through the line fold.

    Attributes:
        inventory: Inventory being populated
        group: Most recently opened group, None before the first header
        mode: Section mode of the current group
    """

    inventory: Inventory
    group: Group | None = None
    mode: SectionMode = SectionMode.NONE


def parse_vars(tokens: Iterable[str]) -> VarMap:
    """Parse ``key=value`` tokens, splitting on the first ``=``.

    Tokens without ``=`` are dropped.
    """
    return VarMap(token.split("=", 1) for token in tokens if "=" in token)


def _open_qualified(state: ParseState, name: str, kind: str) -> ParseState:
    group = state.inventory.groups.lookup_or_add(name)
    mode = SectionMode(kind)
    logger.debug("Opened section", group=name, mode=mode.value)
    return replace(state, group=group, mode=mode)


def _open_plain(state: ParseState, name: str, legacy: bool) -> ParseState:
    group = state.inventory.groups.add(name)
    # Legacy inventories keep a vars/children mode across a plain header
    mode = state.mode if legacy else SectionMode.NONE
    logger.debug("Opened group", group=name, mode=mode.value)
    return replace(state, group=group, mode=mode)


def _consume_entry(state: ParseState, line: str) -> ParseState:
    tokens = line.split()
    if not tokens:
        return state
    first, rest = tokens[0], tokens[1:]
    inventory, group = state.inventory, state.group

    if state.mode is SectionMode.CHILDREN and not rest:
        child = inventory.groups.lookup_or_add(first)
        group.add_child(child.name)
    elif state.mode is SectionMode.VARS and not rest and "=" in first:
        key, value = first.split("=", 1)
        group.set_var(key, value)
    elif group is not None:
        host = inventory.hosts.lookup(first) or Host(first, parse_vars(rest))
        group.hosts.append(host)
    else:
        inventory.hosts.add(first, parse_vars(rest))
    return state


def _consume(state: ParseState, line: str, legacy: bool = False) -> ParseState:
    line = line.rstrip("\r\n")

    if COMMENT_PATTERN.match(line):
        return state

    match = QUALIFIED_HEADER_PATTERN.match(line)
    if match:
        return _open_qualified(state, match.group(1), match.group(2))

    match = PLAIN_HEADER_PATTERN.match(line)
    if match:
        return _open_plain(state, match.group(1), legacy)

    if ENTRY_PATTERN.match(line):
        return _consume_entry(state, line)

    if line.strip():
        logger.trace("Skipped line", line=line)
    return state


def read(lines: Iterable[str], legacy: bool = False) -> Inventory:
    """Parse INI inventory lines into an Inventory.

    Args:
        lines: Inventory text lines, with or without line terminators
        legacy: Keep a ``:vars``/``:children`` section mode active across a
            following plain ``[group]`` header, as older inventories expect

    Returns:
        The populated Inventory

    Raises:
        InvalidHostError: If a host entry yields an empty host name
    """
    with logger.performance("Parsed inventory", level=logging.DEBUG) as stats:
        state = reduce(partial(_consume, legacy=legacy), lines, ParseState(Inventory()))
        stats["hosts"] = len(state.inventory.hosts)
        stats["groups"] = len(state.inventory.groups)
    return state.inventory


def read_string(text: str, legacy: bool = False) -> Inventory:
    """Parse INI inventory text."""
    return read(text.splitlines(), legacy=legacy)


def read_file(path: str | Path, legacy: bool = False) -> Inventory:
    """Read and parse an INI inventory file.

    Args:
        path: Inventory file path
        legacy: See ``read``

    Returns:
        The populated Inventory
    """
    logger.debug("Reading inventory", path=path)
    with open(path, encoding="utf-8") as f:
        return read(f, legacy=legacy)


def _group_lines(inventory: Inventory, group: Group) -> list[str]:
    lines: list[str] = []

    if group.hosts:
        lines += ["", f"[{group.name}]"]
        for host in group.hosts:
            # Vars of a host that is also defined globally are implied
            lines.append(host.name if host in inventory.hosts else host.to_line())

    if group.vars:
        lines += ["", f"[{group.name}:vars]"]
        lines += group.vars.to_tokens()

    if group.children:
        lines += ["", f"[{group.name}:children]"]
        lines += group.children

    return lines


def write(inventory: Inventory) -> list[str]:
    """Render an Inventory as INI inventory lines.

    Args:
        inventory: Inventory to render

    Returns:
        Lines without terminators
    """
    lines = [host.to_line() for host in inventory.hosts]
    for group in inventory.groups:
        lines += _group_lines(inventory, group)
    logger.debug("Rendered inventory", lines=len(lines), groups=len(inventory.groups))
    return lines


def write_string(inventory: Inventory) -> str:
    """Render an Inventory as INI inventory text."""
    lines = write(inventory)
    return "\n".join(lines) + "\n" if lines else ""
