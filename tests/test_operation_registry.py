"""Tests for the command tree, flattened index and visibility filter."""

import pytest

from azmcp.registry.arguments import ArgumentDefinition
from azmcp.registry.operation_registry import (
    DuplicateNameError,
    DuplicatePathError,
    InvalidRegistration,
    Operation,
    OperationIndex,
    OperationNotFound,
    OperationRegistry,
    add_operation,
    add_sub_group,
    build_index,
    command_words,
    create_group,
    get_operation_registry,
    iter_operations,
    list_visible,
    reset_operation_registry,
    validate_tree,
)
from azmcp.registry.operations import build_command_tree


async def noop_handler(context, args):
    return None


def op(description="Does something", **kwargs):
    return Operation(description=description, handler=noop_handler, **kwargs)


@pytest.fixture
def tree():
    """svc -> widget -> {list, delete(hidden)}, svc -> gadget -> part -> show."""
    root = create_group("svc", "Test service")
    widget = add_sub_group(root, create_group("widget", "Widgets"))
    add_operation(widget, "list", op("List widgets"))
    add_operation(widget, "delete", op("Delete a widget", discoverable=False, destructive=True))

    gadget = add_sub_group(root, create_group("gadget", "Gadgets"))
    part = add_sub_group(gadget, create_group("part", "Gadget parts"))
    add_operation(part, "show", op("Show a part"))
    return root


# ============================================================================
# Tree Building
# ============================================================================

class TestTreeBuilding:

    @pytest.mark.parametrize("name", ["", "two words", "tab\tname"])
    def test_invalid_group_names_rejected(self, name):
        with pytest.raises(InvalidRegistration):
            create_group(name, "Bad")

    def test_invalid_operation_name_rejected(self):
        group = create_group("g", "Group")
        with pytest.raises(InvalidRegistration):
            group.add_operation("", op())

    def test_operation_requires_description(self):
        group = create_group("g", "Group")
        with pytest.raises(InvalidRegistration) as exc_info:
            group.add_operation("list", op(description=""))
        assert "description" in str(exc_info.value)

    def test_duplicate_operation_name_rejected(self):
        group = create_group("g", "Group")
        group.add_operation("list", op())
        with pytest.raises(DuplicateNameError) as exc_info:
            group.add_operation("list", op())
        assert "'list'" in str(exc_info.value)

    def test_duplicate_group_name_rejected(self):
        root = create_group("root", "Root")
        root.add_sub_group(create_group("pg", "First"))
        with pytest.raises(DuplicateNameError):
            root.add_sub_group(create_group("pg", "Second"))

    def test_group_and_operation_cannot_share_name(self):
        root = create_group("root", "Root")
        root.add_operation("list", op())
        with pytest.raises(DuplicateNameError):
            root.add_sub_group(create_group("list", "Group"))

        other = create_group("other", "Other")
        other.add_sub_group(create_group("list", "Group"))
        with pytest.raises(DuplicateNameError):
            other.add_operation("list", op())

    def test_group_cannot_have_two_parents(self):
        first = create_group("first", "First")
        second = create_group("second", "Second")
        child = first.add_sub_group(create_group("child", "Child"))

        with pytest.raises(InvalidRegistration) as exc_info:
            second.add_sub_group(child)
        assert "already attached" in str(exc_info.value)

    def test_cycles_rejected(self):
        root = create_group("root", "Root")
        child = root.add_sub_group(create_group("child", "Child"))

        with pytest.raises(InvalidRegistration):
            root.add_sub_group(root)
        with pytest.raises(InvalidRegistration):
            child.add_sub_group(root)

    def test_registered_operation_is_named_copy(self):
        group = create_group("g", "Group")
        declared = op()
        registered = group.add_operation("list", declared)

        assert registered is not declared
        assert registered.name == "list"
        assert declared.name == ""
        assert group.operations["list"] is registered

    def test_group_fragments_merged_at_registration(self):
        subscription = ArgumentDefinition("subscription", "Subscription", required=True)
        user = ArgumentDefinition("user", "User", required=True)
        server = ArgumentDefinition("server", "Server")

        root = create_group("root", "Root")
        pg = root.add_sub_group(create_group("pg", "Postgres", arguments=(subscription, server)))
        database = pg.add_sub_group(create_group("database", "Databases", arguments=(user,)))
        registered = database.add_operation("list", op(arguments=(server.as_required(),)))

        assert [d.name for d in registered.arguments] == ["subscription", "server", "user"]
        assert registered.arguments[1].required is True

    def test_attaching_populated_group_under_fragment_rejected(self):
        subscription = ArgumentDefinition("subscription", "Subscription", required=True)
        parent = create_group("pg", "Postgres", arguments=(subscription,))
        child = create_group("database", "Databases")
        child.add_operation("list", op())

        with pytest.raises(InvalidRegistration):
            parent.add_sub_group(child)

    def test_operations_view_is_read_only(self, tree):
        widget = tree.sub_groups[0]
        with pytest.raises(TypeError):
            widget.operations["new"] = op()


# ============================================================================
# Path Flattening
# ============================================================================

class TestFlattening:

    def test_root_contributes_no_segment(self, tree):
        paths = [path for path, _ in iter_operations(tree)]
        assert paths == ["widget-list", "widget-delete", "gadget-part-show"]

    def test_every_path_resolves_to_its_operation(self, tree):
        index = build_index(tree)
        walked = list(iter_operations(tree))

        assert len(index) == len(walked)
        for path, operation in walked:
            assert index.resolve(path) is operation
            others = [p for p, o in index.items() if o is operation]
            assert others == [path]

    def test_alias_across_levels_fails_build(self):
        root = create_group("svc", "Service")
        a = root.add_sub_group(create_group("a", "A"))
        a.add_operation("b-c", op())
        a_b = root.add_sub_group(create_group("a-b", "A-B"))
        a_b.add_operation("c", op())

        with pytest.raises(DuplicatePathError) as exc_info:
            build_index(root)
        assert exc_info.value.paths == ["a-b-c"]

    def test_validate_tree_names_every_duplicate(self):
        root = create_group("svc", "Service")
        root.add_sub_group(create_group("x", "X")).add_operation("y-z", op())
        root.add_sub_group(create_group("x-y", "XY")).add_operation("z", op())
        root.add_sub_group(create_group("p", "P")).add_operation("q-r", op())
        root.add_sub_group(create_group("p-q", "PQ")).add_operation("r", op())

        with pytest.raises(DuplicatePathError) as exc_info:
            validate_tree(root)
        assert exc_info.value.paths == ["x-y-z", "p-q-r"]

    def test_resolve_unknown_path(self, tree):
        index = build_index(tree)

        assert index.get("widget-update") is None
        assert "widget-update" not in index
        with pytest.raises(OperationNotFound) as exc_info:
            index.resolve("widget-update")
        assert exc_info.value.path == "widget-update"

    def test_index_is_independent_of_later_tree_changes(self, tree):
        index = build_index(tree)
        tree.sub_groups[0].add_operation("update", op())

        assert "widget-update" not in index

    def test_index_from_mapping(self):
        operation = op()
        index = OperationIndex({"a-b": operation})

        assert index.paths() == ["a-b"]
        assert list(index) == ["a-b"]


# ============================================================================
# Visibility
# ============================================================================

def test_list_visible_excludes_hidden_and_sorts(tree):
    index = build_index(tree)
    visible = list_visible(index)

    assert [path for path, _ in visible] == ["gadget-part-show", "widget-list"]
    assert all(operation.discoverable for _, operation in visible)
    assert index.resolve("widget-delete").discoverable is False


def test_command_words_follow_registered_names():
    root = build_command_tree()

    assert command_words("pg-table-get-schema", root) == ["pg", "table", "get-schema"]
    assert command_words("tools-list", root) == ["tools", "list"]
    with pytest.raises(OperationNotFound):
        command_words("pg-table-drop", root)


def test_command_words_backtracks_over_shared_prefixes():
    root = create_group("svc", "Service")
    root.add_sub_group(create_group("b", "B")).add_operation("list", op())
    root.add_sub_group(create_group("b-x", "BX")).add_operation("y", op())

    assert command_words("b-x-y", root) == ["b-x", "y"]
    assert command_words("b-list", root) == ["b", "list"]


# ============================================================================
# Registry
# ============================================================================

class TestOperationRegistry:

    def test_production_tree_paths(self, registry):
        assert sorted(registry.index.paths()) == [
            "pg-database-list",
            "pg-database-query",
            "pg-server-get-config",
            "pg-server-get-param",
            "pg-server-list",
            "pg-table-get-schema",
            "pg-table-list",
            "server-start",
            "tools-list",
        ]

    def test_server_start_hidden_but_registered(self, registry):
        listed = [path for path, _ in registry.list()]

        assert "server-start" not in listed
        assert registry.exists("server-start")
        assert "server-start" in [path for path, _ in registry.list(include_hidden=True)]

    def test_postgres_operations_share_scope_arguments(self, registry):
        for path, operation in registry.list():
            if not path.startswith("pg-"):
                continue
            names = [d.name for d in operation.arguments]
            assert names[:5] == ["subscription", "tenant", "auth-method", "resource-group", "user"]
            assert operation.read_only is True
            assert operation.destructive is False

    def test_get_operation_docs(self, registry):
        docs = registry.get_operation_docs("pg-server-get-param")

        assert docs["name"] == "pg-server-get-param"
        assert docs["command"] == "pg server get-param"
        assert docs["description"] == "Retrieves a specific parameter of a PostgreSQL server."
        required = [a["name"] for a in docs["arguments"] if a["required"]]
        assert required == ["subscription", "resource-group", "user", "server", "param"]
        assert docs["metadata"] == {"discoverable": True, "read_only": True, "destructive": False}

    def test_get_unknown_operation(self, registry):
        with pytest.raises(OperationNotFound):
            registry.get("pg-server-restart")

    def test_registry_rejects_duplicate_tree(self):
        root = create_group("svc", "Service")
        root.add_sub_group(create_group("a", "A")).add_operation("b-c", op())
        root.add_sub_group(create_group("a-b", "AB")).add_operation("c", op())

        with pytest.raises(DuplicatePathError):
            OperationRegistry(root)


def test_singleton_built_once():
    reset_operation_registry()
    try:
        first = get_operation_registry()
        assert get_operation_registry() is first
        assert first.root.name == "azmcp"

        reset_operation_registry()
        assert get_operation_registry() is not first
    finally:
        reset_operation_registry()
