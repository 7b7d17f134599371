"""Unit tests for the CLI module (contract_graph.cli.main)."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from contract_graph.cli.main import (
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_TOP_K,
    EXIT_CONFLICT,
    EXIT_INVALID_INPUT,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_NOT_FOUND,
    EXIT_SOURCE_UNAVAILABLE,
    EXIT_SUCCESS,
    EXIT_UNEXPECTED,
    build_parser,
    format_result_json,
    main,
)
from contract_graph.exceptions import ApplyConflictError
from contract_graph.models import ModuleSearchResult
from contract_graph.utils.logging import PACKAGE_LOGGER

from conftest import contract_data, write_contract


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's environment and .env file out of CLI runs."""
    for name in ("CONTRACTS_PATH", "GRAPH_STORE_PATH", "OPENAI_API_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # configure_logging() binds the captured stderr of the current test
    logging.getLogger(PACKAGE_LOGGER).handlers.clear()


@pytest.fixture
def cli(contracts_pattern, tmp_path):
    """Run main() against the sample contracts and a temp graph store."""
    store_path = str(tmp_path / "graph.json")

    def run(*argv: str) -> int:
        return main(["--contracts", contracts_pattern, "--graph-store", store_path, *argv])

    return run


# ---------------------------------------------------------------------------
# TestBuildParser
# ---------------------------------------------------------------------------
class TestBuildParser:
    def test_global_flags(self):
        args = build_parser().parse_args([
            "--contracts", "c/*.yml",
            "--graph-store", "/tmp/g.json",
            "--output-json",
            "--verbose",
            "check",
        ])
        assert args.contracts == "c/*.yml"
        assert args.graph_store == "/tmp/g.json"
        assert args.output_json is True
        assert args.verbose is True
        assert args.command == "check"

    def test_search_defaults(self):
        args = build_parser().parse_args(["search", "login"])
        assert args.query == "login"
        assert args.top_k == DEFAULT_TOP_K
        assert args.threshold == DEFAULT_SIMILARITY_THRESHOLD

    def test_apply_dry_run(self):
        assert build_parser().parse_args(["apply", "--dry-run"]).dry_run is True

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_no_api_key_flags(self):
        args = build_parser().parse_args(["list"])
        assert not hasattr(args, "api_key")
        assert not hasattr(args, "openai_api_key")


# ---------------------------------------------------------------------------
# TestOutputFormatting
# ---------------------------------------------------------------------------
class TestOutputFormatting:
    def test_format_models_nested(self):
        result = {
            "results": [ModuleSearchResult(
                module_id="auth", type="service", description="d", category="c", similarity=0.5,
            )],
            "count": 1,
        }
        data = json.loads(format_result_json(result))
        assert data["results"][0]["module_id"] == "auth"
        assert data["count"] == 1

    def test_format_plain_values(self):
        assert json.loads(format_result_json(["a", "b"])) == ["a", "b"]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
class TestCommands:
    def test_list(self, cli, capsys):
        assert cli("list") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Contracts (2)" in out
        assert "orders" in out

    def test_list_json(self, cli, capsys):
        assert cli("--output-json", "list") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert sorted(c["content"]["id"] for c in data) == ["orders", "users"]

    def test_validate_passes(self, cli, capsys):
        assert cli("validate") == EXIT_SUCCESS
        assert "passed" in capsys.readouterr().out

    def test_validate_fails_with_issues(self, cli, contracts_dir, capsys):
        write_contract(contracts_dir, "bad.yml", contract_data(
            "bad", dependencies=[("ghost", [("x", "fn")])],
        ))
        assert cli("validate") == EXIT_INVALID_INPUT
        out = capsys.readouterr().out
        assert "FAILED" in out
        assert 'Referenced module "ghost" does not exist' in out

    def test_check_then_apply_then_check(self, cli, capsys):
        assert cli("--output-json", "check") == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["added_count"] == 2

        assert cli("apply") == EXIT_SUCCESS
        assert "Successfully applied 2 modules and 3 parts" in capsys.readouterr().out

        assert cli("check") == EXIT_SUCCESS
        assert "No changes" in capsys.readouterr().out

    def test_apply_dry_run_leaves_graph_empty(self, cli, tmp_path, capsys):
        assert cli("apply", "--dry-run") == EXIT_SUCCESS
        assert "Dry run: 2 change(s)" in capsys.readouterr().out
        assert not (tmp_path / "graph.json").exists()

    def test_apply_invalid_contract_aborts(self, cli, contracts_dir, capsys):
        write_contract(contracts_dir, "broken.yml", "id: [unclosed\n")
        assert cli("apply") == EXIT_INVALID_INPUT
        assert "ABORT:" in capsys.readouterr().out

    def test_apply_conflict_exit_code(self, cli, capsys):
        graph = MagicMock()
        graph.invoke.side_effect = ApplyConflictError("moved", conflicts=["/x.yml"])
        with patch("contract_graph.orchestrator.graph.build_graph", return_value=graph):
            assert cli("apply") == EXIT_CONFLICT
        assert "/x.yml" in capsys.readouterr().err

    def test_show_and_relations(self, cli, capsys):
        cli("apply")
        capsys.readouterr()

        assert cli("show", "users") == EXIT_SUCCESS
        assert "getUser: function" in capsys.readouterr().out

        assert cli("--output-json", "relations", "users") == EXIT_SUCCESS
        view = json.loads(capsys.readouterr().out)
        assert view["incoming"] == [
            {"module_id": "orders", "parts": [{"part_id": "getUser", "type": "function"}]},
        ]

    def test_show_missing_module(self, cli, capsys):
        assert cli("show", "ghost") == EXIT_NOT_FOUND
        assert 'Module "ghost" not found' in capsys.readouterr().err

    def test_relations_missing_module_is_empty(self, cli, capsys):
        assert cli("--output-json", "relations", "ghost") == EXIT_SUCCESS
        view = json.loads(capsys.readouterr().out)
        assert view["outgoing"] == [] and view["incoming"] == []

    def test_categories_and_types(self, cli, capsys):
        assert cli("categories") == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "domain"

        assert cli("--output-json", "types") == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == {"types": ["service"], "count": 1}

    def test_config_hides_secrets(self, cli, monkeypatch, capsys):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")
        assert cli("--output-json", "config") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "sk-secret" not in out
        assert "openai_api_key" not in json.loads(out)

    def test_search(self, cli, capsys):
        search = MagicMock()
        search.search.return_value = [ModuleSearchResult(
            module_id="users", type="service", description="The users module",
            category="domain", similarity=0.87,
        )]
        with patch("contract_graph.rag.embeddings.EmbeddingService"), \
             patch("contract_graph.rag.vector_store.VectorStore"), \
             patch("contract_graph.rag.search.ModuleSearch", return_value=search):
            assert cli("--output-json", "search", "user accounts", "--top-k", "3") == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["results_count"] == 1
        assert data["results"][0]["module_id"] == "users"
        search.search.assert_called_once_with("user accounts", top_k=3, similarity_threshold=0.0)

    def test_search_invalid_input(self, cli, capsys):
        with patch("contract_graph.rag.embeddings.EmbeddingService"), \
             patch("contract_graph.rag.vector_store.VectorStore"):
            assert cli("search", "login", "--threshold", "2") == EXIT_INVALID_INPUT


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
class TestExitCodes:
    def test_missing_contracts_path(self, tmp_path, capsys):
        assert main(["--graph-store", str(tmp_path / "g.json"), "list"]) == EXIT_INVALID_INPUT
        assert "CONTRACTS_PATH" in capsys.readouterr().err

    def test_corrupt_graph_store(self, contracts_pattern, tmp_path):
        store = tmp_path / "graph.json"
        store.write_text("{not json")
        rc = main(["--contracts", contracts_pattern, "--graph-store", str(store), "check"])
        assert rc == EXIT_SOURCE_UNAVAILABLE

    def test_keyboard_interrupt(self, cli):
        with patch.dict("contract_graph.cli.main.COMMANDS", {"list": MagicMock(side_effect=KeyboardInterrupt)}):
            assert cli("list") == EXIT_KEYBOARD_INTERRUPT

    def test_unexpected_error(self, cli, capsys):
        with patch.dict("contract_graph.cli.main.COMMANDS", {"list": MagicMock(side_effect=RuntimeError("boom"))}):
            assert cli("list") == EXIT_UNEXPECTED
        assert "Unexpected error: boom" in capsys.readouterr().err
