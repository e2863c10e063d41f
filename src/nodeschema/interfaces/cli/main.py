import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

import colorlog
import yaml

from nodeschema import __version__ as _PACKAGE_VERSION
from nodeschema.core.errors import NodeSchemaError
from nodeschema.core.nodes import NodeCollection, load_nodes
from nodeschema.core.site import SiteConfig
from nodeschema.schema.builder import build_node_types_sync
from nodeschema.schema.models import TypeRegistry


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _load_inputs(args: argparse.Namespace) -> Optional[Tuple[NodeCollection, SiteConfig]]:
    """Load nodes and the optional site config; log and return None on failure."""
    try:
        nodes = load_nodes(Path(args.nodes))
    except (FileNotFoundError, ValueError) as e:
        logging.error("Failed to load nodes: %s", e)
        return None

    config = SiteConfig()
    if getattr(args, "config", None):
        try:
            config = SiteConfig.from_yaml(Path(args.config))
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            logging.error("Failed to load site config: %s", e)
            return None
    return nodes, config


def _build(nodes: NodeCollection, config: SiteConfig) -> Optional[TypeRegistry]:
    try:
        return build_node_types_sync(nodes, config=config)
    except (NodeSchemaError, ValueError) as e:
        logging.error("Schema construction failed: %s", e)
        return None


def cmd_describe(args: argparse.Namespace) -> int:
    """Build the node type registry and log one summary line per type.

    With --fields, every field of every type is listed too.
    """
    loaded = _load_inputs(args)
    if loaded is None:
        return 2
    nodes, config = loaded

    registry = _build(nodes, config)
    if registry is None:
        return 3

    if not registry:
        logging.warning("No node types found in %s", args.nodes)
        return 0

    logging.info("Node types (%d):", len(registry))
    for line in registry.summary():
        logging.info("  %s", line)

    if getattr(args, "fields", False):
        for key in sorted(registry):
            descriptor = registry[key]
            logging.info("%s:", descriptor.name)
            for name, field in descriptor.fields.items():
                logging.info("  %s: %s", name, field.type_label())
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve one field of one node through its type's reference resolver.

    Prints the linked node id, or ``null`` when the field links nowhere.
    """
    loaded = _load_inputs(args)
    if loaded is None:
        return 2
    nodes, config = loaded

    node = nodes.get(args.node_id)
    if node is None:
        logging.error("Node not found: %s", args.node_id)
        return 2

    registry = _build(nodes, config)
    if registry is None:
        return 3

    descriptor = registry.by_tag(node.type)
    if descriptor is None:
        logging.error("Node %s has no registered type (%s)", node.id, node.type)
        return 2

    linked = descriptor.field.resolve(node, args.field, registry.context)
    print(linked.id if linked is not None else "null")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nodeschema",
        description=f"Node schema builder (v{_PACKAGE_VERSION})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_describe = sub.add_parser("describe", help="Build node types and summarize them")
    p_describe.add_argument("nodes", help="Path to a JSON or YAML file of nodes")
    p_describe.add_argument(
        "--config",
        default=None,
        help="Path to a site config YAML with a link 'mapping'",
    )
    p_describe.add_argument(
        "--fields",
        action="store_true",
        help="List the merged fields of every type",
    )
    p_describe.set_defaults(func=cmd_describe)

    p_resolve = sub.add_parser("resolve", help="Resolve one field of one node as a reference")
    p_resolve.add_argument("nodes", help="Path to a JSON or YAML file of nodes")
    p_resolve.add_argument("node_id", help="Id of the node owning the field")
    p_resolve.add_argument("field", help="Raw field name (e.g. author___Person)")
    p_resolve.add_argument(
        "--config",
        default=None,
        help="Path to a site config YAML with a link 'mapping'",
    )
    p_resolve.set_defaults(func=cmd_resolve)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
