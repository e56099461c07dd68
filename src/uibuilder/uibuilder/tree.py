"""Tree primitives over the layer forest.

Every function is pure and copy-on-write: the input forest and its layers are
never modified, and untouched subtrees are shared between the old and the new
forest. No business rules live here.
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional, Sequence, TypeVar

from uibuilder.models import ComponentLayer, create_id

L = TypeVar("L", bound=ComponentLayer)

Visitor = Callable[[ComponentLayer, Optional[ComponentLayer]], ComponentLayer]


def has_layer_children(layer: ComponentLayer) -> bool:
    """True when the layer's children slot holds a list of layers."""
    return isinstance(layer.children, list)


def iter_layers(forest: Sequence[ComponentLayer]) -> Iterator[ComponentLayer]:
    """Depth-first, pre-order walk over every layer of the forest."""
    for layer in forest:
        yield layer
        if has_layer_children(layer):
            yield from iter_layers(layer.children)  # type: ignore[arg-type]


def visit_layer(
    layer: L, parent: ComponentLayer | None, visitor: Visitor
) -> L:
    """Apply ``visitor`` to ``layer`` and then to its descendants.

    The visitor returns the (possibly new) layer. A layer is only copied when
    the visitor or one of its descendants changed something.
    """
    updated = visitor(layer, parent)
    if has_layer_children(updated):
        old_children = updated.children
        new_children = [visit_layer(child, updated, visitor) for child in old_children]  # type: ignore[union-attr]
        if any(new is not old for new, old in zip(new_children, old_children)):  # type: ignore[arg-type]
            return updated.model_copy(update={"children": new_children})  # type: ignore[return-value]
    return updated  # type: ignore[return-value]


def count_layers(forest: Sequence[ComponentLayer]) -> int:
    return sum(1 for _ in iter_layers(forest))


def collect_ids(layer: ComponentLayer) -> set[str]:
    """Ids of ``layer`` and all of its descendants."""
    return {node.id for node in iter_layers([layer])}


def find_by_id(
    forest: Sequence[ComponentLayer], layer_id: str
) -> ComponentLayer | None:
    for layer in iter_layers(forest):
        if layer.id == layer_id:
            return layer
    return None


def find_parent_of(
    forest: Sequence[ComponentLayer], layer_id: str
) -> ComponentLayer | None:
    """Layer whose children list contains ``layer_id``.

    Returns None for roots of the forest and for unknown ids.
    """
    for layer in iter_layers(forest):
        if has_layer_children(layer) and any(
            child.id == layer_id for child in layer.children  # type: ignore[union-attr]
        ):
            return layer
    return None


def find_all_parents(
    forest: Sequence[ComponentLayer], layer_id: str
) -> list[ComponentLayer]:
    """Ancestors of ``layer_id``, outermost first. Empty if not found."""

    def walk(layers: Sequence[ComponentLayer], path: list[ComponentLayer]) -> list[ComponentLayer] | None:
        for layer in layers:
            if layer.id == layer_id:
                return path
            if has_layer_children(layer):
                found = walk(layer.children, path + [layer])  # type: ignore[arg-type]
                if found is not None:
                    return found
        return None

    return walk(forest, []) or []


def remove_by_id(forest: Sequence[L], layer_id: str) -> list[L]:
    """New forest without ``layer_id`` (and its subtree), at any depth."""

    def remove_child(layer: ComponentLayer, _parent: ComponentLayer | None) -> ComponentLayer:
        if has_layer_children(layer) and any(
            child.id == layer_id for child in layer.children  # type: ignore[union-attr]
        ):
            children = [c for c in layer.children if c.id != layer_id]  # type: ignore[union-attr]
            return layer.model_copy(update={"children": children})
        return layer

    return [
        visit_layer(layer, None, remove_child)
        for layer in forest
        if layer.id != layer_id
    ]


def _insert_at(
    children: list[ComponentLayer], layer: ComponentLayer, position: int | None
) -> list[ComponentLayer]:
    if position is None or position >= len(children):
        return [*children, layer]
    if position < 0:
        return [layer, *children]
    return [*children[:position], layer, *children[position:]]


def insert_into(
    forest: Sequence[L],
    parent_id: str,
    layer: ComponentLayer,
    position: int | None = None,
) -> list[L]:
    """New forest with ``layer`` inserted into ``parent_id``'s children.

    ``position`` omitted or past the end appends; negative prepends. A parent
    that is missing or whose children are not a list leaves the forest as is.
    """

    def insert(node: ComponentLayer, _parent: ComponentLayer | None) -> ComponentLayer:
        if node.id == parent_id and has_layer_children(node):
            children = _insert_at(list(node.children), layer, position)  # type: ignore[arg-type]
            return node.model_copy(update={"children": children})
        return node

    return [visit_layer(node, None, insert) for node in forest]


def replace_by_id(
    forest: Sequence[L], layer_id: str, replacement: ComponentLayer
) -> list[L]:
    """New forest with the layer ``layer_id`` swapped for ``replacement``."""

    def replace(node: ComponentLayer, _parent: ComponentLayer | None) -> ComponentLayer:
        return replacement if node.id == layer_id else node

    return [visit_layer(node, None, replace) for node in forest]


def clone_subtree(layer: L, name_suffix: str | None = None) -> L:
    """Deep copy of ``layer`` with a fresh id on every node.

    ``name_suffix`` is appended to the root's name only.
    """
    update: dict = {"id": create_id()}
    if name_suffix and layer.name:
        update["name"] = f"{layer.name}{name_suffix}"
    if has_layer_children(layer):
        update["children"] = [clone_subtree(child) for child in layer.children]  # type: ignore[union-attr]
    return layer.model_copy(update=update, deep=True)


def move_layer(
    forest: Sequence[L],
    layer_id: str,
    parent_id: str,
    position: int | None = None,
) -> list[L]:
    """New forest with ``layer_id`` moved under ``parent_id`` at ``position``.

    Moving a layer into itself or one of its descendants, or to a parent that
    cannot hold children, returns the forest unchanged (as a new list).
    """
    layer = find_by_id(forest, layer_id)
    target = find_by_id(forest, parent_id)
    if layer is None or target is None or not has_layer_children(target):
        return list(forest)
    if parent_id in collect_ids(layer):
        return list(forest)

    current_parent = find_parent_of(forest, layer_id)
    if (
        current_parent is not None
        and current_parent.id == parent_id
        and position is not None
    ):
        # position counts slots of the list before the layer is taken out
        index = [c.id for c in current_parent.children].index(layer_id)  # type: ignore[union-attr]
        if index < position:
            position -= 1

    return insert_into(remove_by_id(forest, layer_id), parent_id, layer, position)
