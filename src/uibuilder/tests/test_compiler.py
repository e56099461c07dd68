"""Tests for the TSX compiler."""

from uibuilder.compiler import (
    compile_document,
    compile_page,
    function_type,
    generate_layer_code,
    generate_props_string,
    generate_variable_identifiers,
    to_valid_identifier,
)
from uibuilder.models import ComponentLayer, Document, PageLayer, Variable, VariableReference, VariableType
from uibuilder.registry import FunctionDefinition


def ref(variable_id):
    return VariableReference(ref_id=variable_id)


def test_compile_page(registry, pages):
    """Full module: imports, root attributes without theme keys, nested layers."""
    code = compile_page(pages[0], registry)
    assert code == (
        'import React from "react";\n'
        'import { Button } from "@/components/ui/button";\n'
        'import { Card } from "@/components/ui/card";\n'
        "\n"
        "const Page = () => {\n"
        "  return (\n"
        '    <div className="p-4">\n'
        '      <div className="flex">\n'
        '        <Button variant="default" size="sm">\n'
        '          {"Press"}\n'
        "        </Button>\n"
        '        <Card className="p-4">\n'
        '          {"Body"}\n'
        "        </Card>\n"
        "      </div>\n"
        "    </div>\n"
        "  );\n"
        "};\n"
        "\n"
        "export default Page;\n"
    )


def test_empty_page(registry):
    """An empty page renders the root element with nothing inside."""
    code = compile_page(PageLayer(id="p"), registry)
    assert "    <div>\n    </div>\n" in code
    assert "interface PageProps" not in code


def test_sibling_types_imported_once(registry):
    page = PageLayer(
        id="p",
        children=[
            ComponentLayer(id="a", type="Button"),
            ComponentLayer(id="b", type="Button"),
        ],
    )
    code = compile_page(page, registry)
    assert code.count('import { Button } from "@/components/ui/button";') == 1


def test_nested_and_default_imports(registry):
    """Imports are collected from every depth; default exports use the bare form."""
    page = PageLayer(
        id="p",
        children=[
            ComponentLayer(
                id="f",
                type="Flexbox",
                children=[
                    ComponentLayer(
                        id="d", type="div", children=[ComponentLayer(id="c", type="Card")]
                    )
                ],
            )
        ],
    )
    code = compile_page(page, registry)
    assert 'import Flexbox from "@/components/ui/flexbox";' in code
    assert 'import { Card } from "@/components/ui/card";' in code
    assert "import { div }" not in code


def test_variables_interface(registry, variables):
    page = PageLayer(
        id="p",
        children=[
            ComponentLayer(
                id="b",
                type="Button",
                props={"title": ref("var-brand"), "count": ref("var-count")},
                children=ref("var-brand"),
            )
        ],
    )
    code = compile_page(page, registry, variables)
    assert (
        "interface PageProps {\n"
        "  variables: {\n"
        "    brandName: string;\n"
        "    count: number;\n"
        "  };\n"
        "}\n"
        "\n"
        "const Page = ({ variables }: PageProps) => {\n"
    ) in code
    assert "<Button title={variables.brandName} count={variables.count}>" in code
    assert "  {variables.brandName}\n" in code


def test_function_bindings(registry, function_registry):
    """Function variables and __function_ metadata both land in ``functions``."""
    variables = [
        Variable(id="v-save", name="on save", type=VariableType.FUNCTION, default_value="handleClick"),
    ]
    page = PageLayer(
        id="p",
        children=[
            ComponentLayer(
                id="b",
                type="Button",
                props={
                    "onClick": ref("v-save"),
                    "onSubmit": "literal",
                    "__function_onSubmit": "handleSubmit",
                },
            )
        ],
    )
    code = compile_page(page, registry, variables, function_registry)
    assert "<Button onClick={functions.onSave} onSubmit={functions.handleSubmit} />" in code
    assert "    onSave: (arg0: Record<string, unknown>) => void;\n" in code
    assert "    handleSubmit: (event: FormEvent) => void;\n" in code
    assert "const Page = ({ functions }: PageProps) => {" in code
    assert "literal" not in code


def test_variables_and_functions_params(registry, variables):
    page = PageLayer(
        id="p",
        children=[ComponentLayer(id="b", type="Button", props={"__function_onClick": "unknownFn"})],
    )
    code = compile_page(page, registry, variables)
    assert "const Page = ({ variables, functions }: PageProps) => {" in code
    assert "    unknownFn: (...args: unknown[]) => unknown;\n" in code


def test_compile_document(registry, pages):
    document = Document(pages=pages)
    compiled = compile_document(document, registry)
    assert list(compiled) == ["page-1", "page-2"]
    assert "<Card" in compiled["page-1"]


class TestLayerCode:
    def test_self_closing(self):
        assert generate_layer_code(ComponentLayer(id="x", type="Input")) == "<Input />"

    def test_indentation(self):
        layer = ComponentLayer(id="x", type="div", children=[ComponentLayer(id="y", type="span")])
        assert generate_layer_code(layer, 1) == "  <div>\n    <span />\n  </div>"

    def test_text_is_escaped(self):
        layer = ComponentLayer(id="x", type="p", children='Say "hi"\n')
        assert generate_layer_code(layer) == '<p>\n  {"Say \\"hi\\"\\n"}\n</p>'

    def test_unknown_children_reference(self):
        layer = ComponentLayer(id="x", type="p", children=ref("missing"))
        assert generate_layer_code(layer) == "<p>\n  {undefined}\n</p>"


class TestPropsString:
    def test_value_kinds(self):
        props = {"a": "x", "n": 3, "f": 1.5, "b": True, "o": {"k": [1, "two"]}}
        assert generate_props_string(props) == ' a="x" n={3} f={1.5} b={true} o={{"k":[1,"two"]}}'

    def test_null_is_kept(self):
        assert generate_props_string({"value": None, "a": 1}) == " value={null} a={1}"

    def test_empty(self):
        assert generate_props_string({}) == ""

    def test_quotes_in_string(self):
        assert generate_props_string({"title": 'a "b"'}) == ' title={"a \\"b\\""}'

    def test_unknown_reference(self, variables):
        assert generate_props_string({"title": ref("missing")}, variables) == " title={undefined}"

    def test_function_metadata_emitted_once(self):
        props = {"__function_onClick": "go", "onClick": "x"}
        assert generate_props_string(props) == " onClick={functions.go}"


class TestIdentifiers:
    def test_valid_names_kept(self):
        assert to_valid_identifier("userName") == "userName"
        assert to_valid_identifier("  $el ") == "$el"

    def test_camel_case(self):
        assert to_valid_identifier("Brand Name") == "brandName"
        assert to_valid_identifier("user-name") == "userName"
        assert to_valid_identifier("My VARIABLE name") == "myVariableName"

    def test_leading_digit(self):
        assert to_valid_identifier("2 fast") == "_2Fast"

    def test_fallback(self):
        assert to_valid_identifier("") == "variable"
        assert to_valid_identifier("!!!") == "variable"

    def test_collisions(self):
        variables = [
            Variable(id=str(i), name=name, type=VariableType.STRING)
            for i, name in enumerate(["count", "count", "Count!", "count"])
        ]
        assert generate_variable_identifiers(variables) == {
            "0": "count",
            "1": "count1",
            "2": "count2",
            "3": "count3",
        }


class TestFunctionTypes:
    def test_explicit_signature_wins(self):
        definition = FunctionDefinition.model_validate(
            {"typeSignature": "(e: Event) => void", "schema": {"items": ["string"]}}
        )
        assert function_type(definition) == "(e: Event) => void"

    def test_tuple(self):
        definition = FunctionDefinition.model_validate(
            {"schema": {"items": ["string", "number?", {"type": "nullable", "inner": {"type": "array"}}]}}
        )
        assert function_type(definition) == (
            "(arg0: string, arg1?: number, arg2: unknown[] | null) => void"
        )

    def test_no_args(self):
        assert function_type(FunctionDefinition.model_validate({"schema": {"items": []}})) == "() => void"

    def test_object(self):
        definition = FunctionDefinition.model_validate({"schema": {"kind": "object"}})
        assert function_type(definition) == "(params: Record<string, unknown>) => void"

    def test_unknown_tokens(self):
        definition = FunctionDefinition.model_validate({"schema": {"items": ["date", "any"]}})
        assert function_type(definition) == "(arg0: unknown, arg1: unknown) => void"

    def test_generic(self):
        assert function_type(None) == "(...args: unknown[]) => unknown"
        assert function_type(FunctionDefinition()) == "(...args: unknown[]) => unknown"
