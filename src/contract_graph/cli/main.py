"""CLI entry point for contract-graph."""
import argparse
import json
import sys
import traceback
from typing import Any, Callable

from contract_graph.config import Settings, load_settings
from contract_graph.exceptions import (
    ApplyConflictError,
    ConfigurationError,
    GraphModuleNotFoundError,
    SourceUnavailableError,
)
from contract_graph.orchestrator.exceptions import OrchestratorError
from contract_graph.utils.logging import configure_logging

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_SOURCE_UNAVAILABLE = 2
EXIT_CONFLICT = 3
EXIT_NOT_FOUND = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

# Defaults
DEFAULT_TOP_K = 10
DEFAULT_SIMILARITY_THRESHOLD = 0.0


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="contract-graph",
        description="Compare contract definitions with the persisted module graph",
    )
    parser.add_argument(
        "--contracts",
        type=str,
        default=None,
        help="Glob pattern for contract files (default: $CONTRACTS_PATH)",
    )
    parser.add_argument(
        "--graph-store",
        type=str,
        default=None,
        help="Path of the JSON graph store (default: $GRAPH_STORE_PATH)",
    )
    parser.add_argument("--output-json", action="store_true", help="Output results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List contract files")
    sub.add_parser("validate", help="Validate all contract files")
    sub.add_parser("check", help="Show contracts added, modified or removed since the last apply")

    apply_parser = sub.add_parser("apply", help="Validate contracts and apply their changes to the graph")
    apply_parser.add_argument(
        "--dry-run", action="store_true", help="Stop after change detection without committing"
    )

    show_parser = sub.add_parser("show", help="Show a persisted module")
    show_parser.add_argument("module_id", type=str)

    relations_parser = sub.add_parser("relations", help="Show incoming and outgoing dependencies")
    relations_parser.add_argument("module_id", type=str)

    sub.add_parser("categories", help="List distinct contract categories")
    sub.add_parser("types", help="List distinct contract types")
    sub.add_parser("config", help="Print configuration (no secrets)")

    search_parser = sub.add_parser("search", help="Search persisted modules by description")
    search_parser.add_argument("query", type=str)
    search_parser.add_argument(
        "--top-k",
        type=int,
        default=DEFAULT_TOP_K,
        help=f"Number of results (default: {DEFAULT_TOP_K})",
    )
    search_parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_SIMILARITY_THRESHOLD,
        help=f"Minimum similarity 0-1 (default: {DEFAULT_SIMILARITY_THRESHOLD})",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with CLI overrides applied."""
    settings = load_settings()
    if args.contracts:
        settings.contracts_path = args.contracts
    if args.graph_store:
        settings.graph_store_path = args.graph_store
    return settings


def format_result_json(result: Any) -> str:
    """Serialize a result to JSON.

    Pydantic models (also inside lists and dicts) are dumped in JSON mode.
    """

    def _serialize(obj):
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        if isinstance(obj, dict):
            return {k: _serialize(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [_serialize(v) for v in obj]
        return obj

    return json.dumps(_serialize(result), indent=2, default=str)


def _emit(args: argparse.Namespace, payload: Any, human: Callable[[], None]) -> None:
    if args.output_json:
        print(format_result_json(payload))
    else:
        human()


def _registry(settings: Settings):
    from contract_graph.registry.loader import ContractRegistry

    return ContractRegistry(settings.contracts_path)


def _store(settings: Settings):
    from contract_graph.graph.json_store import JsonGraphStore

    return JsonGraphStore(settings.graph_store_path)


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    contracts = _registry(settings).list_contracts()

    def human():
        print(f"Contracts ({len(contracts)}):")
        for c in contracts:
            print(f"  {c.content.id:<30} {c.content.category:<12} {c.content.type:<12} {c.file_path}")

    _emit(args, contracts, human)
    return EXIT_SUCCESS


def cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.reconcile.validation_aggregator import validate_contracts
    from contract_graph.registry.validator import SchemaValidator

    summary = validate_contracts(_registry(settings).scan(), SchemaValidator())

    def human():
        print(f"Validation: {'passed' if summary.valid else 'FAILED'} ({len(summary.files)} file(s))")
        for outcome in summary.files:
            mark = "ok " if outcome.valid else "ERR"
            print(f"  [{mark}] {outcome.file_name}")
            for issue in outcome.errors:
                print(f"        {issue.path}: {issue.message}")

    _emit(args, summary, human)
    return EXIT_SUCCESS if summary.valid else EXIT_INVALID_INPUT


def cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.reconcile.change_detector import ChangeDetector

    contracts = _registry(settings).list_contracts()
    report = ChangeDetector(_store(settings)).detect(contracts)

    def human():
        if not report.has_changes:
            print("No changes: the graph matches the contracts.")
        else:
            print(
                f"Changes ({report.total_changes}): {report.added_count} added, "
                f"{report.modified_count} modified, {report.removed_count} removed"
            )
            for change in report.changes:
                print(f"  {change.status.value:<9} {change.module_id:<30} {change.file_path}")
        for anomaly in report.anomalies:
            print(f"  warning: module id {anomaly.module_id!r} declared in {', '.join(anomaly.file_paths)}")

    _emit(args, report, human)
    return EXIT_SUCCESS


def cmd_apply(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.orchestrator.graph import ABORT_PREFIX, build_graph
    from contract_graph.orchestrator.state import make_initial_state
    from contract_graph.reconcile.apply_coordinator import ApplyCoordinator
    from contract_graph.reconcile.change_detector import ChangeDetector
    from contract_graph.registry.validator import SchemaValidator

    store = _store(settings)
    graph = build_graph(
        registry=_registry(settings),
        validator=SchemaValidator(),
        detector=ChangeDetector(store),
        coordinator=ApplyCoordinator(store),
    )
    result = graph.invoke(make_initial_state(dry_run=args.dry_run))

    payload = {
        "validation": result.get("validation"),
        "change_report": result.get("change_report"),
        "apply_result": result.get("apply_result"),
        "errors": result.get("errors", []),
    }

    def human():
        for err in payload["errors"]:
            print(err)
        validation = payload["validation"]
        if validation is not None and not validation.valid:
            for outcome in validation.files:
                for issue in outcome.errors:
                    print(f"  {outcome.file_name}: {issue.path}: {issue.message}")
        report = payload["change_report"]
        if report is not None and not report.has_changes:
            print("No changes to apply.")
        elif report is not None and args.dry_run:
            print(f"Dry run: {report.total_changes} change(s) would be applied.")
        if payload["apply_result"] is not None:
            print(payload["apply_result"].message)

    _emit(args, payload, human)

    if any(str(err).startswith(ABORT_PREFIX) for err in payload["errors"]):
        return EXIT_INVALID_INPUT
    return EXIT_SUCCESS


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.reconcile.relation_assembler import get_module_detail

    module = get_module_detail(args.module_id, _store(settings))

    def human():
        print(f"{module.id} ({module.category}/{module.type})")
        print(f"  {module.description}")
        print(f"  source: {module.source_path}")
        print(f"  parts ({len(module.parts)}):")
        for part in module.parts:
            print(f"    {part.id}: {part.type}")

    _emit(args, module, human)
    return EXIT_SUCCESS


def cmd_relations(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.reconcile.relation_assembler import get_relations

    view = get_relations(args.module_id, _store(settings))

    def human():
        print(f"Relations of {view.module_id}")
        print(f"  outgoing ({len(view.outgoing)}):")
        for edge in view.outgoing:
            parts = ", ".join(f"{p.part_id}:{p.type}" for p in edge.parts)
            print(f"    -> {edge.module_id} [{parts}]")
        print(f"  incoming ({len(view.incoming)}):")
        for edge in view.incoming:
            parts = ", ".join(f"{p.part_id}:{p.type}" for p in edge.parts)
            print(f"    <- {edge.module_id} [{parts}]")

    _emit(args, view, human)
    return EXIT_SUCCESS


def cmd_categories(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.registry.loader import list_categories

    categories = list_categories(_registry(settings).list_contracts())
    _emit(args, {"categories": categories}, lambda: print("\n".join(categories)))
    return EXIT_SUCCESS


def cmd_types(args: argparse.Namespace, settings: Settings) -> int:
    from contract_graph.registry.loader import list_types

    types = list_types(_registry(settings).list_contracts())
    _emit(args, {"types": types, "count": len(types)}, lambda: print("\n".join(types)))
    return EXIT_SUCCESS


def cmd_config(args: argparse.Namespace, settings: Settings) -> int:
    config = settings.safe_dump()

    def human():
        print("\nConfiguration:")
        print(f"{'='*40}")
        for key, value in config.items():
            print(f"  {key}: {value}")
        print(f"{'='*40}")

    _emit(args, config, human)
    return EXIT_SUCCESS


def cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    # Lazy imports: avoid loading openai/chromadb for the other commands
    from contract_graph.rag.embeddings import EmbeddingService
    from contract_graph.rag.search import ModuleSearch
    from contract_graph.rag.vector_store import VectorStore
    from contract_graph.reconcile.snapshot import read_graph_snapshot

    search = ModuleSearch(
        embedding_service=EmbeddingService(
            api_key=settings.openai_api_key, model=settings.embedding_model
        ),
        vector_store=VectorStore(persist_dir=settings.vector_store_dir),
    )
    search.index_modules(read_graph_snapshot(_store(settings)))
    results = search.search(args.query, top_k=args.top_k, similarity_threshold=args.threshold)
    payload = {"query": args.query, "results_count": len(results), "results": results}

    def human():
        print(f"Results for {args.query!r} ({len(results)}):")
        for r in results:
            print(f"  {r.similarity:.3f}  {r.module_id:<30} {r.description}")

    _emit(args, payload, human)
    return EXIT_SUCCESS


COMMANDS: dict[str, Callable[[argparse.Namespace, Settings], int]] = {
    "list": cmd_list,
    "validate": cmd_validate,
    "check": cmd_check,
    "apply": cmd_apply,
    "show": cmd_show,
    "relations": cmd_relations,
    "categories": cmd_categories,
    "types": cmd_types,
    "config": cmd_config,
    "search": cmd_search,
}


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
        configure_logging("DEBUG" if args.verbose else settings.log_level)
        return COMMANDS[args.command](args, settings)

    except ConfigurationError as exc:
        return _handle_error("Configuration error", exc, args.verbose, EXIT_INVALID_INPUT)

    except SourceUnavailableError as exc:
        return _handle_error("Source unavailable", exc, args.verbose, EXIT_SOURCE_UNAVAILABLE)

    except ApplyConflictError as exc:
        label = "Conflict (re-run check and apply again)"
        if exc.conflicts:
            label = f"{label} [{', '.join(exc.conflicts)}]"
        return _handle_error(label, exc, args.verbose, EXIT_CONFLICT)

    except GraphModuleNotFoundError as exc:
        return _handle_error("Not found", exc, args.verbose, EXIT_NOT_FOUND)

    except ValueError as exc:
        return _handle_error("Invalid input", exc, args.verbose, EXIT_INVALID_INPUT)

    except OrchestratorError as exc:
        return _handle_error("Orchestrator error", exc, args.verbose, EXIT_UNEXPECTED)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
