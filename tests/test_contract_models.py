"""Tests for contract, graph and change models."""
import pytest
from pydantic import ValidationError

import contract_graph.models as models
from contract_graph.models import (
    ChangeRecord,
    ChangeReport,
    ChangeStatus,
    ContractContent,
    GraphChange,
    ModuleIdConflict,
)

from conftest import contract_data, make_content, make_module


class TestContractContent:
    def test_valid_content(self):
        content = ContractContent.model_validate(contract_data(
            "users",
            parts=[("getUser", "function")],
            dependencies=[("auth", [("login", "function")])],
        ))

        assert content.id == "users"
        assert content.parts[0].id == "getUser"
        assert content.dependencies[0].parts[0].part_id == "login"

    def test_parts_and_dependencies_default_empty(self):
        content = ContractContent(id="a", type="t", category="c", description="d")

        assert content.parts == []
        assert content.dependencies == []

    @pytest.mark.parametrize("field", ["id", "type", "category", "description"])
    def test_required_fields(self, field):
        data = contract_data("users")
        del data[field]

        with pytest.raises(ValidationError):
            ContractContent.model_validate(data)

    def test_empty_description_rejected(self):
        with pytest.raises(ValidationError):
            ContractContent.model_validate(contract_data("users", description=""))

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            ContractContent.model_validate(contract_data("users", owner="team-a"))

    def test_dependency_needs_at_least_one_part(self):
        data = contract_data("orders")
        data["dependencies"] = [{"module_id": "users", "parts": []}]

        with pytest.raises(ValidationError):
            ContractContent.model_validate(data)

    def test_content_is_frozen(self):
        content = make_content("users")

        with pytest.raises(ValidationError):
            content.id = "other"


class TestChangeReport:
    def test_from_changes_counts(self):
        changes = [
            ChangeRecord(file_path="/a.yml", status=ChangeStatus.ADDED, module_id="a"),
            ChangeRecord(file_path="/b.yml", status=ChangeStatus.MODIFIED, module_id="b"),
            ChangeRecord(file_path="/c.yml", status=ChangeStatus.REMOVED, module_id="c"),
            ChangeRecord(file_path="/d.yml", status=ChangeStatus.ADDED, module_id="d"),
        ]

        report = ChangeReport.from_changes(changes)

        assert report.has_changes is True
        assert report.total_changes == 4
        assert (report.added_count, report.modified_count, report.removed_count) == (2, 1, 1)
        assert report.total_changes == report.added_count + report.modified_count + report.removed_count

    def test_from_no_changes(self):
        report = ChangeReport.from_changes([])

        assert report.has_changes is False
        assert report.total_changes == 0
        assert report.changes == []

    def test_anomalies_are_kept(self):
        anomaly = ModuleIdConflict(module_id="a", file_paths=["/1.yml", "/2.yml"])

        report = ChangeReport.from_changes([], [anomaly])

        assert report.anomalies == [anomaly]

    def test_status_serializes_as_string(self):
        record = ChangeRecord(file_path="/a.yml", status=ChangeStatus.REMOVED, module_id="a")

        assert record.model_dump(mode="json")["status"] == "removed"


class TestGraphModels:
    def test_graph_change_rejects_unknown_action(self):
        with pytest.raises(ValidationError):
            GraphChange(action="rename", file_path="/a.yml")

    def test_module_round_trips_through_json(self):
        module = make_module("orders", dependencies=[("users", [("getUser", "function")])])

        restored = type(module).model_validate_json(module.model_dump_json())

        assert restored == module


def test_all_exports_resolve():
    for name in models.__all__:
        assert hasattr(models, name), name
