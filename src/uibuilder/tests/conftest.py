"""Shared fixtures for uibuilder tests."""

import pytest

from uibuilder.models import ComponentLayer, PageLayer, Variable, VariableType
from uibuilder.registry import parse_component_registry, parse_function_registry
from uibuilder.store import LayerStore

REGISTRY = {
    "Button": {
        "from": "@/components/ui/button",
        "props": {
            "variant": {"type": "enum", "options": ["default", "destructive", "outline"]},
            "size": {"type": "enum", "options": ["default", "sm", "lg"], "default": "sm"},
            "className": {"type": "string"},
            "children": {"type": "string"},
        },
        "defaultChildren": "Click me",
    },
    "Card": {
        "from": "@/components/ui/card",
        "props": {
            "className": {"type": "string", "default": "p-4"},
            "children": {"type": "string"},
        },
        "defaultChildren": "Default card content",
    },
    "Badge": {
        "from": "@/components/ui/badge",
        "props": {
            "label": {"type": "string", "required": True},
            "title": {"type": "string", "default": "Badge"},
            "children": {"type": "string"},
        },
        "defaultVariableBindings": [
            {"propName": "label", "variableId": "var-brand", "immutable": True},
            {"propName": "title", "variableId": "var-brand", "immutable": False},
            {"propName": "children", "variableId": "var-brand", "immutable": True},
        ],
    },
    "Flexbox": {
        "from": "@/components/ui/flexbox",
        "isFromDefaultExport": True,
        "props": {"direction": "row"},
        "defaultChildren": [
            {"id": "tmpl-a", "type": "Button", "name": "Button", "children": "One"},
            {"id": "tmpl-b", "type": "Button", "name": "Button", "children": "Two"},
        ],
    },
    "div": {
        "props": {"className": {"type": "string"}},
    },
}

FUNCTIONS = {
    "handleClick": {
        "schema": {"kind": "tuple", "items": ["object"]},
        "description": "Click handler",
    },
    "handleSubmit": {
        "typeSignature": "(event: FormEvent) => void",
    },
    "noop": {"schema": {"kind": "tuple", "items": []}},
}


@pytest.fixture
def registry():
    return parse_component_registry(REGISTRY)


@pytest.fixture
def function_registry():
    return parse_function_registry(FUNCTIONS)


@pytest.fixture
def pages():
    """Two pages; the first holds a div with a Button and a Card."""
    return [
        PageLayer(
            id="page-1",
            name="Page 1",
            props={"className": "p-4", "mode": "dark"},
            children=[
                ComponentLayer(
                    id="div-1",
                    type="div",
                    name="Container",
                    props={"className": "flex"},
                    children=[
                        ComponentLayer(
                            id="button-1",
                            type="Button",
                            name="Button",
                            props={"variant": "default", "size": "sm"},
                            children="Press",
                        ),
                        ComponentLayer(
                            id="card-1",
                            type="Card",
                            name="Card",
                            props={"className": "p-4"},
                            children="Body",
                        ),
                    ],
                ),
            ],
        ),
        PageLayer(id="page-2", name="Page 2"),
    ]


@pytest.fixture
def variables():
    return [
        Variable(id="var-brand", name="Brand Name", type=VariableType.STRING, default_value="Acme"),
        Variable(id="var-count", name="count", type=VariableType.NUMBER, default_value=3),
    ]


@pytest.fixture
def store(registry, function_registry, pages, variables):
    store = LayerStore(registry, function_registry)
    store.initialize(pages, variables=variables)
    return store
