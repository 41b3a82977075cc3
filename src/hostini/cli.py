"""Command-line interface for hostini."""

import json
import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from hostini import __version__
from hostini.config import load_config
from hostini.exceptions import HostiniError
from hostini.ini import read_file, write_string
from hostini.inventory import Group, Inventory
from hostini.logging import (
    configure_logging,
    get_level_from_name,
    get_level_from_verbosity,
    get_logger,
)

logger = get_logger("hostini.cli")


def _load_inventory(ctx: click.Context, path: str) -> Inventory:
    """Read an inventory file with the settings stored on the context."""
    try:
        return read_file(path, legacy=ctx.obj["legacy"])
    except HostiniError as e:
        raise click.ClickException(f"{path}: {e}")
    except OSError as e:
        raise click.ClickException(f"Cannot read inventory {path}: {e.strerror or e}")


def _emit(text: str, output: str | None) -> None:
    if output is None:
        click.echo(text, nl=False)
        return
    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot write {output}: {e.strerror or e}")
    logger.info("Wrote inventory", path=output)


def inventory_summary(inv: Inventory) -> dict[str, Any]:
    """Build a JSON-serializable summary of an inventory."""
    return {
        "hosts": {host.name: dict(host.vars) for host in inv.hosts},
        "groups": [
            {
                "name": group.name,
                "hosts": group.hosts.names(),
                "vars": dict(group.vars),
                "children": list(group.children),
            }
            for group in inv.groups
        ],
    }


def format_summary_text(inv: Inventory) -> str:
    """Format an inventory summary as human-readable text."""
    host_count = len(inv.host_names())
    lines = [f"Loaded {host_count} host(s) and {len(inv.groups)} group(s)", ""]

    if inv.hosts:
        lines.append("Ungrouped hosts:")
        lines.extend(f"  - {host.to_line()}" for host in inv.hosts)
        lines.append("")

    for group in inv.groups:
        if group.is_empty:
            lines.append(f"{group.name}: (empty)")
            continue
        lines.append(f"{group.name}:")
        for host in group.hosts:
            lines.append(f"  host: {host.to_line()}")
        for key, value in group.vars.items():
            lines.append(f"  var: {key}={value}")
        for child in group.children:
            lines.append(f"  child: {child}")
    return "\n".join(lines)


def build_graph(inv: Inventory) -> Tree:
    """Build a rich tree of groups, child groups and hosts."""
    tree = Tree(Text("@all"))

    if inv.hosts:
        ungrouped = tree.add(Text("@ungrouped"))
        for host in inv.hosts:
            ungrouped.add(Text(host.name))

    referenced = {child for group in inv.groups for child in group.children}

    def add_group(parent: Tree, group: Group, path: tuple[str, ...]) -> None:
        node = parent.add(Text(f"@{group.name}"))
        if group.name in path:
            return
        for child in inv.child_groups(group):
            add_group(node, child, path + (group.name,))
        for host in group.hosts:
            node.add(Text(host.name))

    for group in inv.groups:
        if group.name not in referenced:
            add_group(tree, group, ())
    return tree


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v, -vv, -vvv)")
@click.option("--log-level", default=None, help="Log level name (overrides -v)")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write logs to this file")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file (default: ~/.hostini/config.yml)")
@click.option("--legacy/--no-legacy", default=None,
              help="Keep vars/children mode across plain [group] headers")
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    verbose: int,
    log_level: str | None,
    log_file: str | None,
    config_path: str | None,
    legacy: bool | None,
) -> None:
    """hostini - read, normalize and inspect INI host inventories."""
    if version:
        click.echo(f"hostini {__version__}")
        ctx.exit(0)

    try:
        config = load_config(config_path)
        if log_level is not None:
            level = get_level_from_name(log_level)
        elif verbose:
            level = get_level_from_verbosity(verbose)
        else:
            level = get_level_from_name(config.log_level)
    except (HostiniError, ValueError) as e:
        raise click.ClickException(str(e))

    configure_logging(level=level, log_file=log_file or config.log_file)
    ctx.obj = {"legacy": config.legacy_headers if legacy is None else legacy}
    logger.debug("Configured", legacy=ctx.obj["legacy"], log_level=logging.getLevelName(level))

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("normalize")
@click.option("--inventory", "-i", required=True, help="Inventory file (INI format)")
@click.option("--output", "-o", default=None, help="Write to this file instead of stdout")
@click.pass_context
def normalize(ctx: click.Context, inventory: str, output: str | None) -> None:
    """Re-emit an inventory in normalized form.

    Comments are dropped, and each group is written as its hosts, vars
    and children sections.

    Examples:
        hostini normalize -i hosts

        hostini normalize -i hosts -o hosts.normalized
    """
    inv = _load_inventory(ctx, inventory)
    _emit(write_string(inv), output)


@cli.command("show")
@click.option("--inventory", "-i", required=True, help="Inventory file (INI format)")
@click.option("--format", "-f", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format")
@click.pass_context
def show(ctx: click.Context, inventory: str, output_format: str) -> None:
    """Show the hosts, groups and variables of an inventory."""
    inv = _load_inventory(ctx, inventory)

    if output_format == "json":
        click.echo(json.dumps(inventory_summary(inv), indent=2))
    else:
        click.echo(format_summary_text(inv))


@cli.command("host")
@click.argument("hostname")
@click.option("--inventory", "-i", required=True, help="Inventory file (INI format)")
@click.option("--format", "-f", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format")
@click.pass_context
def host(ctx: click.Context, hostname: str, inventory: str, output_format: str) -> None:
    """Show the variables and groups of a host.

    The global definition of the host is used when there is one, else its
    first group entry.

    Examples:
        hostini host web01 -i hosts --format json
    """
    inv = _load_inventory(ctx, inventory)

    groups = [g.name for g in inv.groups if hostname in g.hosts]
    found = inv.hosts.lookup(hostname) or next(
        (g.hosts.lookup(hostname) for g in inv.groups if hostname in g.hosts), None
    )
    if found is None:
        available = ", ".join(sorted(inv.host_names())) or "(none)"
        raise click.ClickException(
            f"Host '{hostname}' not found in inventory.\n"
            f"Available hosts: {available}"
        )

    if output_format == "json":
        click.echo(json.dumps({"name": found.name, "vars": dict(found.vars), "groups": groups}, indent=2))
        return

    click.echo(f"Host: {found.name}")
    click.echo(f"Groups: {', '.join(groups) if groups else '(ungrouped)'}")
    for key, value in found.vars.items():
        click.echo(f"  {key}={value}")


@cli.command("graph")
@click.option("--inventory", "-i", required=True, help="Inventory file (INI format)")
@click.pass_context
def graph(ctx: click.Context, inventory: str) -> None:
    """Show the group hierarchy as a tree."""
    inv = _load_inventory(ctx, inventory)
    Console().print(build_graph(inv))


@cli.command("remove-host")
@click.argument("hostname")
@click.option("--inventory", "-i", required=True, help="Inventory file (INI format)")
@click.option("--output", "-o", default=None, help="Write to this file instead of stdout")
@click.option("--in-place", is_flag=True, help="Overwrite the inventory file")
@click.pass_context
def remove_host(
    ctx: click.Context,
    hostname: str,
    inventory: str,
    output: str | None,
    in_place: bool,
) -> None:
    """Remove a global host and its entries in every group.

    Examples:
        hostini remove-host db1 -i hosts --in-place
    """
    if in_place and output:
        raise click.UsageError("--output and --in-place are mutually exclusive")

    inv = _load_inventory(ctx, inventory)
    if inv.hosts.remove(hostname) is None:
        raise click.ClickException(f"Host '{hostname}' is not a global host in {inventory}")

    _emit(write_string(inv), inventory if in_place else output)
