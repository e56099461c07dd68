"""Layer Store

Owned editor state plus the editing API. Every operation reads the latest
committed document, computes a complete new one with the tree primitives and
commits it. Invalid input never raises: it is logged and ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from pydantic import BaseModel, ValidationError

from uibuilder.config import EditorConfig
from uibuilder.exceptions import InvariantError
from uibuilder.models import (
    ComponentLayer,
    Document,
    PageLayer,
    Variable,
    VariableReference,
    VariableType,
    create_id,
)
from uibuilder.registry import (
    CHILDREN_PROP,
    ComponentRegistry,
    FunctionRegistry,
    RegistryEntry,
)
from uibuilder.resolver import reference_id
from uibuilder import tree

log = logging.getLogger(__name__)

# Called with (previous, current) after each commit
Listener = Callable[[Document, Document], None]


def create_component_layer(
    layer_type: str, entry: RegistryEntry | None
) -> ComponentLayer:
    """Build a new layer of ``layer_type`` from its registry entry.

    Unknown types (``entry`` is None) get empty props and children.
    """
    if entry is None:
        return ComponentLayer(id=create_id(), type=layer_type, name=layer_type)

    for name in entry.missing_required_props():
        log.warning("No default value set for required prop %r of %s", name, layer_type)

    props: dict[str, Any] = entry.default_props()

    children: Any
    default_children = entry.default_children
    if isinstance(default_children, str):
        children = default_children
    elif isinstance(default_children, VariableReference):
        children = default_children
    elif default_children:
        children = [tree.clone_subtree(child) for child in default_children]
    else:
        children = []

    # Mutable and immutable bindings are applied the same way on creation
    for binding in entry.default_variable_bindings:
        ref = VariableReference(ref_id=binding.variable_id)
        if binding.prop_name == CHILDREN_PROP:
            children = ref
        else:
            props[binding.prop_name] = ref

    return ComponentLayer(
        id=create_id(),
        type=layer_type,
        name=layer_type,
        props=props,
        children=children,
    )


def _normalize_keys(model_cls: type[BaseModel], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases in ``patch`` to field names."""
    aliases = {
        field.alias: name
        for name, field in model_cls.model_fields.items()
        if field.alias
    }
    return {aliases.get(key, key): value for key, value in patch.items()}


def _merge_model(model: BaseModel, patch: Mapping[str, Any]) -> Any:
    """Validated copy of ``model`` with ``patch`` applied (extra keys kept)."""
    data = dict(model)
    data.update(_normalize_keys(type(model), patch))
    return type(model).model_validate(data)


class LayerStore:
    """Editable document with registry-aware layer and variable operations.

    Observers subscribe with ``subscribe()`` and are called after every
    commit. ``TemporalHistory`` is one such observer.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        function_registry: FunctionRegistry | None = None,
        config: EditorConfig | None = None,
        document: Document | None = None,
    ):
        self.registry: ComponentRegistry = dict(registry or {})
        self.function_registry: FunctionRegistry = dict(function_registry or {})
        self.config = config or EditorConfig()
        self._document = document or self._default_document()
        self._listeners: list[Listener] = []

    def _default_document(self) -> Document:
        page = PageLayer(
            id=create_id(),
            type=self.config.page_type,
            name="Page 1",
            props=dict(self.config.default_page_props),
        )
        return Document(pages=[page], selected_page_id=page.id)

    # --- State ---

    @property
    def document(self) -> Document:
        return self._document

    @property
    def pages(self) -> list[PageLayer]:
        return list(self._document.pages)

    @property
    def variables(self) -> list[Variable]:
        return list(self._document.variables)

    @property
    def selected_page_id(self) -> str:
        return self._document.selected_page_id  # type: ignore[return-value]

    @property
    def selected_layer_id(self) -> str | None:
        return self._document.selected_layer_id

    @property
    def selected_page(self) -> PageLayer | None:
        return self._document.selected_page

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, **changes: Any) -> None:
        previous = self._document
        self._document = previous.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(previous, self._document)

    def restore(self, document: Document) -> None:
        """Replace the document without notifying subscribers.

        Used by the history for undo/redo.
        """
        self._document = document

    # --- Queries ---

    def find_layers_for_page_id(self, page_id: str) -> list[ComponentLayer]:
        page = self._document.page(page_id)
        if page is not None and tree.has_layer_children(page):
            return list(page.children)
        return []

    def find_layer_by_id(self, layer_id: str | None) -> ComponentLayer | None:
        """Find a layer in the selected page (or the selected page itself)."""
        if not layer_id:
            return None
        if layer_id == self.selected_page_id:
            return self.selected_page
        return tree.find_by_id(self.find_layers_for_page_id(self.selected_page_id), layer_id)

    def is_layer_a_page(self, layer_id: str) -> bool:
        return any(page.id == layer_id for page in self._document.pages)

    # --- Document ---

    def initialize(
        self,
        pages: Sequence[ComponentLayer | dict],
        selected_page_id: str | None = None,
        selected_layer_id: str | None = None,
        variables: Sequence[Variable | dict] | None = None,
    ) -> None:
        """Replace the whole document. Defaults: first page, no layer, no variables.

        Plain component layers are accepted as pages and keep their type.
        """
        if not pages:
            log.warning("Cannot initialize with no pages; document unchanged")
            return
        try:
            document = Document(
                pages=[
                    PageLayer.model_validate(dict(page))
                    if isinstance(page, ComponentLayer) and not isinstance(page, PageLayer)
                    else page
                    for page in pages
                ],
                selected_page_id=selected_page_id,
                selected_layer_id=selected_layer_id,
                variables=list(variables or []),
            )
        except (ValidationError, InvariantError) as e:
            log.warning("Cannot initialize document: %s", e)
            return
        self._commit(**dict(document))

    # --- Layers ---

    def _may_nest(self, layer_type: str, parent: ComponentLayer) -> bool:
        """Whether ``layer_type`` may sit under ``parent`` per its ``child_of`` list."""
        entry = self.registry.get(layer_type)
        if entry is None or entry.child_of is None:
            return True
        if parent.type in entry.child_of:
            return True
        log.warning(
            "Layer type %s cannot be placed under %s (%s): allowed parents are %s",
            layer_type,
            parent.id,
            parent.type,
            ", ".join(entry.child_of),
        )
        return False

    def add_component_layer(
        self, layer_type: str, parent_id: str, position: int | None = None
    ) -> str | None:
        """Create a ``layer_type`` layer under ``parent_id`` and select it.

        Returns:
            The new layer id, or None if the parent cannot take children.
        """
        parent = tree.find_by_id(self._document.pages, parent_id)
        if parent is None or not tree.has_layer_children(parent):
            log.warning("Parent layer %s not found or cannot hold children", parent_id)
            return None

        entry = self.registry.get(layer_type)
        if entry is None:
            log.warning("Layer type %r is not registered; using empty defaults", layer_type)
        elif not self._may_nest(layer_type, parent):
            return None

        layer = create_component_layer(layer_type, entry)
        pages = tree.insert_into(self._document.pages, parent_id, layer, position)
        self._commit(pages=pages, selected_layer_id=layer.id)
        return layer.id

    def add_page_layer(self, name: str) -> str:
        """Append an empty page and select it."""
        page = PageLayer(
            id=create_id(),
            type=self.config.page_type,
            name=name,
            props=dict(self.config.default_page_props),
        )
        self._commit(
            pages=[*self._document.pages, page],
            selected_page_id=page.id,
            selected_layer_id=page.id,
        )
        return page.id

    def duplicate_layer(self, layer_id: str) -> str | None:
        """Clone a page or a layer of the selected page.

        A cloned page is appended and selected; a cloned layer is inserted
        right after the original. Returns the clone's id.
        """
        suffix = self.config.copy_suffix

        page = self._document.page(layer_id)
        if page is not None:
            clone = tree.clone_subtree(page, suffix)
            self._commit(pages=[*self._document.pages, clone], selected_page_id=clone.id)
            return clone.id

        selected_page = self.selected_page
        layer = self.find_layer_by_id(layer_id)
        if layer is None or selected_page is None:
            log.warning("Layer with ID %s not found.", layer_id)
            return None

        parent = tree.find_parent_of([selected_page], layer_id)
        if parent is None:
            log.warning("Parent of layer %s not found.", layer_id)
            return None
        position = [child.id for child in parent.children].index(layer_id) + 1  # type: ignore[union-attr]

        clone = tree.clone_subtree(layer, suffix)
        pages = tree.insert_into(self._document.pages, parent.id, clone, position)
        self._commit(pages=pages)
        return clone.id

    def remove_layer(self, layer_id: str) -> None:
        """Remove a page or layer, keeping at least one page."""
        document = self._document

        page = document.page(layer_id)
        if page is not None:
            if len(document.pages) == 1:
                log.warning("Cannot remove page %s: a document needs at least one page", layer_id)
                return
            pages = [p for p in document.pages if p.id != layer_id]
            selected_page_id = document.selected_page_id
            if selected_page_id == layer_id:
                selected_page_id = pages[0].id
            selected_layer_id = document.selected_layer_id
            if selected_layer_id in tree.collect_ids(page):
                selected_layer_id = None
            self._commit(
                pages=pages,
                selected_page_id=selected_page_id,
                selected_layer_id=selected_layer_id,
            )
            return

        layer = tree.find_by_id(document.pages, layer_id)
        if layer is None:
            log.warning("Layer with ID %s not found.", layer_id)
            return

        selected_layer_id = document.selected_layer_id
        if selected_layer_id in tree.collect_ids(layer):
            selected_layer_id = None
        self._commit(
            pages=tree.remove_by_id(document.pages, layer_id),
            selected_layer_id=selected_layer_id,
        )

    def update_layer(
        self,
        layer_id: str,
        props_patch: Mapping[str, Any] | None = None,
        layer_patch: Mapping[str, Any] | None = None,
    ) -> None:
        """Patch a layer of the selected page (or the page itself).

        ``props_patch`` is merged shallowly into ``props``; keys it does not
        mention are kept. ``layer_patch`` overrides layer attributes and may
        carry keys the model does not know. ``id`` cannot be patched.
        """
        page = self.selected_page
        if page is None:
            log.warning("No layers found for page ID: %s", self.selected_page_id)
            return

        target = page if layer_id == page.id else tree.find_by_id(page.children, layer_id)
        if target is None:
            log.warning("Layer with ID %s was not found.", layer_id)
            return

        attributes = dict(layer_patch or {})
        if "id" in attributes:
            log.warning("Ignoring id in layer patch for %s", layer_id)
            attributes.pop("id")
        attributes.pop("props", None)
        attributes["props"] = {**target.props, **(props_patch or {})}

        try:
            updated = _merge_model(target, attributes)
        except ValidationError as e:
            log.warning("Invalid update for layer %s: %s", layer_id, e)
            return

        self._commit(pages=tree.replace_by_id(self._document.pages, layer_id, updated))

    def move_layer(
        self, layer_id: str, parent_id: str, position: int | None = None
    ) -> None:
        """Move a layer under another parent (or within its own)."""
        if self.is_layer_a_page(layer_id):
            log.warning("Pages cannot be moved: %s", layer_id)
            return
        layer = tree.find_by_id(self._document.pages, layer_id)
        parent = tree.find_by_id(self._document.pages, parent_id)
        if layer is not None and parent is not None and not self._may_nest(layer.type, parent):
            return
        pages = tree.move_layer(self._document.pages, layer_id, parent_id, position)
        # refused moves hand back the very same page objects
        if all(new is old for new, old in zip(pages, self._document.pages)):
            log.warning("Cannot move layer %s into %s", layer_id, parent_id)
            return
        self._commit(pages=pages)

    def select_layer(self, layer_id: str) -> None:
        if self.find_layer_by_id(layer_id) is None:
            log.warning("Cannot select layer %s: not in the selected page", layer_id)
            return
        self._commit(selected_layer_id=layer_id)

    def select_page(self, page_id: str) -> None:
        if self._document.page(page_id) is None:
            log.warning("Cannot select page %s: not found", page_id)
            return
        self._commit(selected_page_id=page_id)

    # --- Variables ---

    def add_variable(
        self, name: str, type: VariableType | str, default_value: Any
    ) -> str | None:
        try:
            variable = Variable(id=create_id(), name=name, type=type, default_value=default_value)
        except ValidationError as e:
            log.warning("Invalid variable %r: %s", name, e)
            return None
        self._commit(variables=[*self._document.variables, variable])
        return variable.id

    def update_variable(self, variable_id: str, patch: Mapping[str, Any]) -> None:
        variable = self._document.variable(variable_id)
        if variable is None:
            log.warning("Variable with ID %s not found.", variable_id)
            return
        changes = {key: value for key, value in patch.items() if key != "id"}
        try:
            updated = _merge_model(variable, changes)
        except ValidationError as e:
            log.warning("Invalid update for variable %s: %s", variable_id, e)
            return
        self._commit(
            variables=[updated if v.id == variable_id else v for v in self._document.variables]
        )

    def remove_variable(self, variable_id: str) -> None:
        """Delete a variable and every binding to it, on every page.

        Bound props get their schema default back; props without one are
        deleted. Bound children fall back to the default text, else "".
        """
        if self._document.variable(variable_id) is None:
            log.warning("Variable with ID %s not found.", variable_id)
            return

        def clean(layer: ComponentLayer, _parent: ComponentLayer | None) -> ComponentLayer:
            entry = self.registry.get(layer.type)
            defaults = entry.default_props() if entry else {}
            changes: dict[str, Any] = {}

            bound = [k for k, v in layer.props.items() if reference_id(v) == variable_id]
            if bound:
                props = dict(layer.props)
                for key in bound:
                    if key in defaults:
                        props[key] = defaults[key]
                    else:
                        del props[key]
                changes["props"] = props

            if reference_id(layer.children) == variable_id:
                text = entry.text_children_default() if entry else None
                changes["children"] = text or ""

            return layer.model_copy(update=changes) if changes else layer

        pages = [tree.visit_layer(page, None, clean) for page in self._document.pages]
        self._commit(
            pages=pages,
            variables=[v for v in self._document.variables if v.id != variable_id],
        )

    # --- Bindings ---

    def bind_prop_to_variable(self, layer_id: str, prop_name: str, variable_id: str) -> None:
        self.update_layer(layer_id, {prop_name: VariableReference(ref_id=variable_id)})

    def unbind_prop_from_variable(self, layer_id: str, prop_name: str) -> None:
        """Replace a binding with the schema default, or "" if there is none."""
        if self.is_binding_immutable(layer_id, prop_name):
            log.warning(
                "Cannot unbind immutable variable binding for %s on layer %s",
                prop_name,
                layer_id,
            )
            return

        layer = self.find_layer_by_id(layer_id)
        if layer is None:
            log.warning("Layer with ID %s not found.", layer_id)
            return
        if reference_id(layer.props.get(prop_name)) is None:
            log.debug("Prop %s of layer %s is not bound", prop_name, layer_id)
            return

        entry = self.registry.get(layer.type)
        defaults = entry.default_props() if entry else {}
        self.update_layer(layer_id, {prop_name: defaults.get(prop_name, "")})

    def is_binding_immutable(self, layer_id: str, prop_name: str) -> bool:
        """True while ``prop_name`` still points at its immutable default variable."""
        layer = self.find_layer_by_id(layer_id)
        if layer is None:
            return False
        return self._is_pinned(layer, prop_name, layer.props.get(prop_name))

    def bind_children_to_variable(self, layer_id: str, variable_id: str) -> None:
        layer = self.find_layer_by_id(layer_id)
        if layer is None:
            log.warning("Layer with ID %s not found.", layer_id)
            return
        entry = self.registry.get(layer.type)
        if entry is None or not entry.accepts_text_children:
            log.warning("Layer type %r does not accept bound text children", layer.type)
            return
        self.update_layer(
            layer_id, layer_patch={"children": VariableReference(ref_id=variable_id)}
        )

    def unbind_children_from_variable(self, layer_id: str) -> None:
        """Replace bound children with the default text, or "" if there is none."""
        if self.is_children_binding_immutable(layer_id):
            log.warning("Cannot unbind immutable children binding on layer %s", layer_id)
            return

        layer = self.find_layer_by_id(layer_id)
        if layer is None:
            log.warning("Layer with ID %s not found.", layer_id)
            return
        if reference_id(layer.children) is None:
            return

        entry = self.registry.get(layer.type)
        text = entry.text_children_default() if entry else None
        self.update_layer(layer_id, layer_patch={"children": text or ""})

    def is_children_binding_immutable(self, layer_id: str) -> bool:
        layer = self.find_layer_by_id(layer_id)
        if layer is None:
            return False
        return self._is_pinned(layer, CHILDREN_PROP, layer.children)

    def _is_pinned(self, layer: ComponentLayer, slot: str, value: Any) -> bool:
        entry = self.registry.get(layer.type)
        if entry is None:
            return False
        ref = reference_id(value)
        return ref is not None and ref == entry.immutable_binding(slot)
