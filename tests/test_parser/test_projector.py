"""Tests for sdkmaker.parser.projector."""

from __future__ import annotations

from typing import Any

from sdkmaker.models import HTTPMethod, ParameterDescriptor
from sdkmaker.parser.normalizer import normalize_document
from sdkmaker.parser.projector import DEFAULT_CONTROLLER, project_controllers
from sdkmaker.parser.resolver import resolve_references


def _project(paths: dict[str, Any], **kwargs: Any):
    doc = normalize_document({"openapi": "3.0.0", "info": {"title": "T"}, "paths": paths})
    return project_controllers(resolve_references(doc), **kwargs)


class TestGrouping:
    def test_first_tag_names_controller(self) -> None:
        ir = _project({"/a": {"get": {"operationId": "getA", "tags": ["Alpha", "Beta"]}}})
        assert list(ir.controllers) == ["Alpha"]
        assert ir.controllers["Alpha"][0].operation_id == "getA"

    def test_untagged_goes_to_default_controller(self) -> None:
        ir = _project({
            "/a": {"get": {"operationId": "getA"}},
            "/b": {"get": {"operationId": "getB", "tags": []}},
        })
        assert [op.operation_id for op in ir.controllers[DEFAULT_CONTROLLER]] == ["getA", "getB"]

    def test_custom_default_controller(self) -> None:
        ir = _project({"/a": {"get": {"operationId": "getA"}}}, default_controller="Misc")
        assert list(ir.controllers) == ["Misc"]

    def test_order_follows_document(self) -> None:
        ir = _project({
            "/z": {"post": {"operationId": "second", "tags": ["T"]}, "get": {"operationId": "third", "tags": ["T"]}},
            "/a": {"delete": {"operationId": "fourth", "tags": ["T"]}},
        })
        ops = ir.controllers["T"]
        assert [op.operation_id for op in ops] == ["second", "third", "fourth"]
        assert [op.method for op in ops] == [HTTPMethod.POST, HTTPMethod.GET, HTTPMethod.DELETE]

    def test_non_method_keys_ignored(self) -> None:
        ir = _project({
            "/a": {
                "parameters": [{"in": "path", "name": "id", "schema": {"type": "string"}}],
                "summary": "path level",
                "get": {"operationId": "getA"},
            }
        })
        assert [op.operation_id for op in ir.controllers[DEFAULT_CONTROLLER]] == ["getA"]


class TestFiltering:
    def test_internal_marker_excluded_everywhere(self) -> None:
        ir = _project({
            "/a": {"get": {"operationId": "AppController_health", "tags": ["Ops"]}},
            "/b": {"get": {"operationId": "Controller_x"}},
            "/c": {"get": {"operationId": "listC", "tags": ["Ops"]}},
        })
        all_ids = [op.operation_id for ops in ir.controllers.values() for op in ops]
        assert all_ids == ["listC"]
        # Controllers are created before filtering, so a filtered-only one stays empty.
        assert ir.controllers[DEFAULT_CONTROLLER] == []
        assert DEFAULT_CONTROLLER not in ir.emittable_controllers()

    def test_missing_or_empty_operation_id_dropped(self) -> None:
        ir = _project({"/a": {"get": {"tags": ["T"]}, "post": {"operationId": "", "tags": ["T"]}}})
        assert ir.controllers == {"T": []}

    def test_custom_marker(self) -> None:
        ir = _project(
            {"/a": {"get": {"operationId": "internal_ping"}, "post": {"operationId": "Controller_ok"}}},
            internal_marker="internal_",
        )
        assert [op.operation_id for op in ir.controllers[DEFAULT_CONTROLLER]] == ["Controller_ok"]


class TestOperationFields:
    def test_optional_fields_only_when_present(self) -> None:
        ir = _project({"/a": {"get": {"operationId": "getA"}}})
        op = ir.controllers[DEFAULT_CONTROLLER][0]
        assert op.summary is None
        assert op.parameters is None
        assert op.request_body is None
        assert op.responses is None
        assert op.model_dump(by_alias=True, exclude_none=True) == {
            "method": HTTPMethod.GET,
            "path": "/a",
            "operationId": "getA",
        }

    def test_parameters_mix_descriptors_and_raw(self) -> None:
        ir = _project({"/a/{id}": {"get": {
            "operationId": "getA",
            "parameters": [
                {"in": "path", "name": "id", "required": True, "schema": {"type": "string"}},
                {"in": "query", "name": "tags", "schema": {"type": "array", "items": {"type": "string"}}},
                {"name": "noSchema", "in": "query"},
            ],
        }}})
        params = ir.controllers[DEFAULT_CONTROLLER][0].parameters
        assert isinstance(params[0], ParameterDescriptor)
        assert params[0].name == "id"
        assert params[1] == {"in": "query", "name": "tags", "schema": {"type": "array", "items": {"type": "string"}}}
        assert params[2] == {"name": "noSchema", "in": "query"}

    def test_integer_status_codes_stringified(self) -> None:
        ir = _project({"/a": {"get": {"operationId": "getA", "responses": {200: {"description": "OK"}}}}})
        assert ir.controllers[DEFAULT_CONTROLLER][0].responses == {"200": {"description": "OK"}}


class TestMetadata:
    def test_base_url_and_info(self, petstore_30_raw: dict[str, Any]) -> None:
        ir = project_controllers(resolve_references(normalize_document(petstore_30_raw)))
        assert ir.base_url == "https://petstore.example.com/v1"
        assert ir.name == "Petstore API"
        assert ir.description == "A sample pet store."
        assert ir.version == "1.0.0"
        assert "Pet" in ir.components["schemas"]

    def test_no_servers_no_info(self) -> None:
        ir = project_controllers(normalize_document({"paths": {}}))
        assert ir.base_url == ""
        assert ir.name == ""
        assert ir.version == ""

    def test_alias_dump(self) -> None:
        ir = _project({"/a": {"get": {"operationId": "getA"}}})
        dumped = ir.model_dump(by_alias=True)
        assert set(dumped) == {"controllers", "components", "baseUrl", "name", "description", "version"}
