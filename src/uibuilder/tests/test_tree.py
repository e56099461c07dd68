"""Tests for the tree primitives."""

from uibuilder import tree
from uibuilder.models import ComponentLayer


def layer(layer_id, children=None, **kwargs):
    """Helper to create a plain div layer."""
    return ComponentLayer(id=layer_id, type="div", children=children or [], **kwargs)


def forest():
    return [
        layer("a", [layer("a1"), layer("a2", [layer("a2x")]), layer("a3")]),
        layer("b", "text"),
    ]


def ids(layers):
    return [node.id for node in layers]


class TestFind:
    def test_find_nested(self):
        """Layers are found at any depth."""
        found = tree.find_by_id(forest(), "a2x")
        assert found is not None
        assert found.id == "a2x"

    def test_find_missing(self):
        assert tree.find_by_id(forest(), "nope") is None

    def test_find_parent(self):
        assert tree.find_parent_of(forest(), "a2x").id == "a2"
        assert tree.find_parent_of(forest(), "a1").id == "a"

    def test_roots_have_no_parent(self):
        assert tree.find_parent_of(forest(), "a") is None

    def test_find_all_parents_outermost_first(self):
        assert ids(tree.find_all_parents(forest(), "a2x")) == ["a", "a2"]
        assert tree.find_all_parents(forest(), "nope") == []

    def test_iter_and_count(self):
        """Text children are not walked into."""
        assert ids(tree.iter_layers(forest())) == ["a", "a1", "a2", "a2x", "a3", "b"]
        assert tree.count_layers(forest()) == 6


class TestRemove:
    def test_remove_then_find(self):
        """Removed layers (and their subtrees) are gone."""
        result = tree.remove_by_id(forest(), "a2")
        assert tree.find_by_id(result, "a2") is None
        assert tree.find_by_id(result, "a2x") is None
        assert ids(result[0].children) == ["a1", "a3"]

    def test_remove_root(self):
        assert ids(tree.remove_by_id(forest(), "b")) == ["a"]

    def test_input_untouched(self):
        original = forest()
        tree.remove_by_id(original, "a1")
        assert ids(original[0].children) == ["a1", "a2", "a3"]

    def test_untouched_subtrees_are_shared(self):
        original = forest()
        result = tree.remove_by_id(original, "a1")
        assert result[1] is original[1]
        assert result[0].children[0] is original[0].children[1]


class TestInsert:
    def test_append_by_default(self):
        result = tree.insert_into(forest(), "a", layer("new"))
        assert ids(result[0].children) == ["a1", "a2", "a3", "new"]

    def test_insert_at_position(self):
        result = tree.insert_into(forest(), "a", layer("new"), 1)
        assert ids(result[0].children) == ["a1", "new", "a2", "a3"]

    def test_out_of_range_appends(self):
        result = tree.insert_into(forest(), "a", layer("new"), 99)
        assert ids(result[0].children)[-1] == "new"

    def test_negative_prepends(self):
        result = tree.insert_into(forest(), "a", layer("new"), -1)
        assert ids(result[0].children)[0] == "new"

    def test_nested_parent(self):
        result = tree.insert_into(forest(), "a2", layer("new"))
        assert ids(tree.find_by_id(result, "a2").children) == ["a2x", "new"]

    def test_text_parent_is_ignored(self):
        """A layer with text children cannot take child layers."""
        result = tree.insert_into(forest(), "b", layer("new"))
        assert result[1].children == "text"
        assert tree.find_by_id(result, "new") is None


class TestClone:
    def test_structure_kept_ids_fresh(self):
        """Clones have the same shape and no id in common."""
        original = forest()[0]
        clone = tree.clone_subtree(original)
        assert tree.count_layers([clone]) == tree.count_layers([original])
        assert tree.collect_ids(clone).isdisjoint(tree.collect_ids(original))
        assert [n.type for n in tree.iter_layers([clone])] == [
            n.type for n in tree.iter_layers([original])
        ]

    def test_suffix_on_root_only(self):
        original = layer("x", [layer("y", name="Inner")], name="Outer")
        clone = tree.clone_subtree(original, " (Copy)")
        assert clone.name == "Outer (Copy)"
        assert clone.children[0].name == "Inner"

    def test_props_are_not_shared(self):
        original = layer("x", props={"style": {"color": "red"}})
        clone = tree.clone_subtree(original)
        assert clone.props == original.props
        assert clone.props["style"] is not original.props["style"]


class TestMove:
    def test_move_to_other_parent(self):
        result = tree.move_layer(forest(), "a1", "a2", 0)
        assert ids(tree.find_by_id(result, "a2").children) == ["a1", "a2x"]
        assert ids(result[0].children) == ["a2", "a3"]

    def test_move_within_parent(self):
        """Positions count slots before the moved layer is taken out."""
        result = tree.move_layer(forest(), "a1", "a", 3)
        assert ids(result[0].children) == ["a2", "a3", "a1"]

    def test_move_into_descendant_refused(self):
        original = forest()
        result = tree.move_layer(original, "a", "a2x")
        assert all(new is old for new, old in zip(result, original))

    def test_move_into_text_layer_refused(self):
        original = forest()
        result = tree.move_layer(original, "a1", "b")
        assert tree.find_parent_of(result, "a1").id == "a"
