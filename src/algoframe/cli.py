"""CLI entry point."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

import yaml

from algoframe.errors import AlgoframeError, AlgorithmError, ConfigError
from algoframe.graph import Graph
from algoframe.hydra_utils import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_CONFIG_PATH,
    compose_config,
    format_config,
    resolve_config,
    seed_everything,
)
from algoframe.io_utils import load_graph, write_json_atomic
from algoframe.logging_utils import (
    configure_logging,
    log_exception,
    parse_log_level,
    run_with_error_handling,
)
from algoframe.registry import list_algorithms
from algoframe.results import collect_results
from algoframe.runner import RunOutcome, resolve_algorithm, run_algorithms

_SUBCOMMANDS: Sequence[str] = (
    "help",
    "list",
    "describe",
    "run",
    "cfg",
    "pipeline",
)

logger = logging.getLogger("algoframe.cli")


def _parse_option(item: str) -> tuple[str, Any]:
    if "=" not in item:
        raise ConfigError(
            f"Option {item!r} must look like name=value.",
            user_message=f"Option {item!r} must look like name=value (ex: dampingFactor=0.9).",
        )
    name, raw = item.split("=", 1)
    name = name.strip()
    if not name:
        raise ConfigError(f"Option {item!r} has an empty name.")
    try:
        value = yaml.safe_load(raw) if raw.strip() else None
    except yaml.YAMLError:
        value = raw
    return name, value


def _parse_options(items: Optional[Iterable[str]]) -> dict[str, Any]:
    return dict(_parse_option(item) for item in items or ())


def _jsonable_results(graph: Graph) -> dict[str, Any]:
    results = collect_results(graph)
    results["node"] = {str(node_id): tree for node_id, tree in results["node"].items()}
    return results


def _outcome_summary(outcome: RunOutcome) -> dict[str, Any]:
    summary: dict[str, Any] = {"algorithm": outcome.key, "ok": outcome.ok}
    if outcome.ok and outcome.algorithm is not None:
        summary["options"] = outcome.algorithm.options
    if outcome.error:
        summary["error"] = outcome.error
    return summary


def _write_results(
    path: Optional[str],
    graph: Graph,
    outcomes: Sequence[RunOutcome],
    *,
    include_graph: bool,
) -> None:
    payload: dict[str, Any] = {
        "runs": [_outcome_summary(outcome) for outcome in outcomes],
        "results": _jsonable_results(graph),
    }
    if include_graph:
        payload["graph"] = graph.to_dict()
    if path:
        write_json_atomic(Path(path), payload)
        logger.info("Wrote results to %s.", path)
    else:
        print(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _raise_on_failures(outcomes: Sequence[RunOutcome]) -> None:
    failed = [outcome for outcome in outcomes if not outcome.ok]
    if not failed:
        return
    details = "; ".join(f"{outcome.key}: {outcome.error}" for outcome in failed)
    raise AlgorithmError(
        f"{len(failed)} of {len(outcomes)} algorithms failed: {details}",
        context={"failed": [outcome.key for outcome in failed]},
    )


def _list_handler(args: argparse.Namespace) -> None:
    for key in list_algorithms(args.namespace):
        print(key)


def _describe_handler(args: argparse.Namespace) -> None:
    cls = resolve_algorithm(args.algorithm)
    print(json.dumps(cls.describe(), indent=2, sort_keys=True, default=str))


def _run_handler(args: argparse.Namespace) -> None:
    directed = True if args.directed else None
    graph = load_graph(args.graph, directed=directed)
    options = _parse_options(args.option)
    specs = [{"algorithm": key, "options": options} for key in args.algorithm]
    outcomes = run_algorithms(graph, specs)
    _write_results(args.output, graph, outcomes, include_graph=args.include_graph)
    _raise_on_failures(outcomes)


def _cfg_handler(args: argparse.Namespace) -> None:
    cfg = compose_config(
        config_path=args.config_path,
        config_name=args.config_name,
        overrides=args.overrides,
    )
    output = format_config(cfg)
    print(output, end="")


def _pipeline_handler(args: argparse.Namespace) -> None:
    cfg = compose_config(
        config_path=args.config_path,
        config_name=args.config_name,
        overrides=args.overrides,
    )
    resolved = resolve_config(cfg)
    logging.getLogger("algoframe").setLevel(parse_log_level(resolved.get("log_level")))
    seed_everything(resolved)

    graph_cfg = resolved.get("graph") or {}
    if not isinstance(graph_cfg, Mapping) or not graph_cfg.get("path"):
        raise ConfigError(
            "graph.path must be set.",
            user_message="graph.path must be set (ex: algoframe pipeline graph.path=graph.json).",
        )
    graph = load_graph(graph_cfg["path"], directed=graph_cfg.get("directed"))

    algorithms = resolved.get("algorithms") or []
    if not isinstance(algorithms, list):
        raise ConfigError("algorithms must be a list.")
    outcomes = run_algorithms(graph, algorithms)

    output_cfg = resolved.get("output") or {}
    _write_results(
        output_cfg.get("path"),
        graph,
        outcomes,
        include_graph=bool(output_cfg.get("include_graph", False)),
    )
    _raise_on_failures(outcomes)


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config-path",
        default=DEFAULT_CONFIG_PATH,
        help="Path to the Hydra config directory.",
    )
    parser.add_argument(
        "--config-name",
        default=DEFAULT_CONFIG_NAME,
        help="Hydra config name (without extension).",
    )
    parser.add_argument(
        "overrides",
        nargs=argparse.REMAINDER,
        help="Hydra overrides (ex: graph.path=graph.json common.seed=7).",
    )


def _register_help_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    parser: argparse.ArgumentParser,
) -> None:
    def _handler(_args: argparse.Namespace) -> None:
        parser.print_help()

    help_parser = subparsers.add_parser(
        "help",
        help="Show top-level help.",
        description="Show top-level help.",
    )
    help_parser.set_defaults(handler=_handler)


def _register_list_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    list_parser = subparsers.add_parser(
        "list",
        help="List registered algorithms.",
        description="List registered algorithms as namespace:type keys.",
    )
    list_parser.add_argument(
        "--namespace",
        default=None,
        help="Only list algorithms in this namespace.",
    )
    list_parser.set_defaults(handler=_list_handler)


def _register_describe_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    describe_parser = subparsers.add_parser(
        "describe",
        help="Show an algorithm's options and suggested styles.",
        description="Show an algorithm's options schema and suggested styles as JSON.",
    )
    describe_parser.add_argument(
        "algorithm",
        help="Algorithm key (ex: algoframe:pagerank).",
    )
    describe_parser.set_defaults(handler=_describe_handler)


def _register_run_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    run_parser = subparsers.add_parser(
        "run",
        help="Run algorithms on a graph file.",
        description="Run one or more algorithms on a node-link JSON/YAML graph.",
    )
    run_parser.add_argument(
        "graph",
        help="Path to a node-link graph file (.json, .yaml).",
    )
    run_parser.add_argument(
        "--algorithm",
        "-a",
        action="append",
        required=True,
        help="Algorithm key; repeat to run several (ex: -a algoframe:degree).",
    )
    run_parser.add_argument(
        "--option",
        "-o",
        action="append",
        default=[],
        help="Algorithm option as name=value; applied to every algorithm.",
    )
    run_parser.add_argument(
        "--directed",
        action="store_true",
        help="Treat the graph as directed regardless of the file.",
    )
    run_parser.add_argument(
        "--output",
        default=None,
        help="Write results JSON here instead of stdout.",
    )
    run_parser.add_argument(
        "--include-graph",
        action="store_true",
        help="Include the graph with its result trees in the output.",
    )
    run_parser.set_defaults(handler=_run_handler)


def _register_cfg_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    cfg_parser = subparsers.add_parser(
        "cfg",
        help="Compose and print Hydra config.",
        description="Compose and print Hydra config.",
    )
    _add_config_arguments(cfg_parser)
    cfg_parser.set_defaults(handler=_cfg_handler)


def _register_pipeline_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    pipeline_parser = subparsers.add_parser(
        "pipeline",
        help="Run the algorithms listed in a Hydra config.",
        description="Compose a Hydra config, run its algorithms and write results.",
    )
    _add_config_arguments(pipeline_parser)
    pipeline_parser.set_defaults(handler=_pipeline_handler)


def _build_parser(subcommands: Iterable[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algoframe",
        description="algoframe command line interface.",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        help="Show full traceback on errors.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name in subcommands:
        if name == "help":
            _register_help_subcommand(subparsers, parser)
        elif name == "list":
            _register_list_subcommand(subparsers)
        elif name == "describe":
            _register_describe_subcommand(subparsers)
        elif name == "run":
            _register_run_subcommand(subparsers)
        elif name == "cfg":
            _register_cfg_subcommand(subparsers)
        elif name == "pipeline":
            _register_pipeline_subcommand(subparsers)
    return parser


def _cli_main(
    *,
    cli_logger: logging.Logger,
    argv: Optional[Sequence[str]] = None,
) -> None:
    parser = _build_parser(_SUBCOMMANDS)
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        raise SystemExit(2)
    try:
        args.handler(args)
    except AlgoframeError as exc:
        log_exception(cli_logger, exc, show_traceback=args.traceback)
        raise SystemExit(1) from None


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point with standard logging/error handling."""
    cli_logger = configure_logging()
    run_with_error_handling(_cli_main, logger=cli_logger, cli_logger=cli_logger, argv=argv)


if __name__ == "__main__":
    main()
