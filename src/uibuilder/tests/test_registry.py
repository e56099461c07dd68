"""Tests for component and function registries."""

import pytest

from uibuilder.exceptions import RegistryLoadError
from uibuilder.models import VariableReference
from uibuilder.registry import (
    FunctionSchema,
    ParamSchema,
    RegistryEntry,
    are_signatures_compatible,
    get_compatible_functions,
    load_component_registry,
    load_function_registry,
)


class TestRegistryEntry:
    def test_default_props(self, registry):
        """Declared defaults and first enum options; children never included."""
        assert registry["Button"].default_props() == {"variant": "default", "size": "sm"}
        assert registry["Card"].default_props() == {"className": "p-4"}

    def test_shorthand_props(self, registry):
        spec = registry["Flexbox"].prop_spec("direction")
        assert spec.type == "string"
        assert spec.default == "row"

    def test_explicit_null_default_counts(self):
        entry = RegistryEntry(props={"value": {"type": "string", "default": None}})
        assert entry.default_props() == {"value": None}

    def test_missing_required(self, registry):
        assert registry["Badge"].missing_required_props() == ["label"]

    def test_text_children(self, registry):
        assert registry["Card"].accepts_text_children
        assert registry["Card"].text_children_default() == "Default card content"
        assert not registry["div"].accepts_text_children
        assert registry["Badge"].text_children_default() is None

    def test_template_children(self, registry):
        children = registry["Flexbox"].default_children
        assert [child.id for child in children] == ["tmpl-a", "tmpl-b"]

    def test_reference_children(self):
        entry = RegistryEntry.model_validate({"defaultChildren": {"__variableRef": "v1"}})
        assert entry.default_children == VariableReference(ref_id="v1")

    def test_immutable_binding(self, registry):
        assert registry["Badge"].immutable_binding("label") == "var-brand"
        assert registry["Badge"].immutable_binding("title") is None


class TestFunctionSchemas:
    def test_param_shorthand(self):
        assert ParamSchema.parse("string").type == "string"
        optional = ParamSchema.parse("number?")
        assert optional.type == "optional"
        assert optional.inner.type == "number"

    def test_tuple_compatibility(self):
        """Handlers may take fewer arguments than the caller passes."""
        two = FunctionSchema(items=["string", "number"])
        one = FunctionSchema(items=["string"])
        assert are_signatures_compatible(two, one)
        assert not are_signatures_compatible(one, two)

    def test_object_compatibility(self):
        caller = FunctionSchema(kind="object", shape={"a": "string", "b": "number"})
        assert are_signatures_compatible(caller, FunctionSchema(kind="object", shape={"a": "string"}))
        assert not are_signatures_compatible(
            caller, FunctionSchema(kind="object", shape={"c": "string"})
        )

    def test_compatible_functions(self, function_registry):
        target = FunctionSchema(items=[])
        assert get_compatible_functions(function_registry, target) == ["handleSubmit", "noop"]
        assert get_compatible_functions(None, target) == []


class TestLoading:
    def test_load_component_registry(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text(
            "Button:\n"
            "  from: '@/components/ui/button'\n"
            "  props:\n"
            "    variant: {type: enum, options: [default, ghost]}\n"
            "  defaultChildren: Go\n"
        )
        registry = load_component_registry(path)
        assert registry["Button"].from_ == "@/components/ui/button"
        assert registry["Button"].default_props() == {"variant": "default"}

    def test_load_function_registry(self, tmp_path):
        path = tmp_path / "functions.yaml"
        path.write_text("submit:\n  typeSignature: '() => void'\n")
        assert load_function_registry(path)["submit"].type_signature == "() => void"

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryLoadError, match="file not found"):
            load_component_registry(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("- Button\n")
        with pytest.raises(RegistryLoadError):
            load_component_registry(path)
