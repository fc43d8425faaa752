"""Tests for the declaration tree: naming, attachment, ordering and cloning."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tsdgen import (
    ClassDeclaration,
    ConstructorDeclaration,
    EventDeclaration,
    ExternalModuleDeclaration,
    FunctionDeclaration,
    InterfaceDeclaration,
    ModuleDeclaration,
    NamespaceDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    StructuralError,
    TypeDeclaration,
)
from tsdgen._declarations import (
    extract_type_names,
    namespaces,
    simplify_name,
    simplify_type,
    sort_types,
)
from utils import identifiers


def test_full_name_follows_parent() -> None:
    """Full names are derived from the current parent chain."""
    namespace = ModuleDeclaration("Highcharts")
    options = InterfaceDeclaration("Highcharts.Options")
    chart = PropertyDeclaration("chart")

    assert options.name == "Options"
    namespace.add_children(options)
    options.add_children(chart)
    assert chart.full_name == "Highcharts.Options.chart"

    other = NamespaceDeclaration("Other")
    other.add_children(*options.remove_child("chart"))
    assert chart.parent is other
    assert chart.full_name == "Other.chart"


def test_add_children_rejects_cycles_and_second_parents() -> None:
    """Attaching a node to itself, below itself, or to a second parent fails."""
    root = NamespaceDeclaration("A")
    middle = InterfaceDeclaration("B")
    leaf = PropertyDeclaration("c")
    root.add_children(middle)
    middle.add_children(leaf)

    with pytest.raises(StructuralError):
        leaf.add_children(leaf)
    with pytest.raises(StructuralError):
        leaf.add_children(root)
    with pytest.raises(StructuralError):
        InterfaceDeclaration("D").add_children(leaf)

    assert root.parent is None
    assert middle.get_children() == [leaf]
    assert leaf.parent is middle


def test_children_ordering() -> None:
    """Children are ordered by kind, then case-insensitive name, then by the
    number of parameters."""
    parent = NamespaceDeclaration("N")

    static_property = PropertyDeclaration("x")
    static_property.is_static = True
    static_function = FunctionDeclaration("x")
    static_function.is_static = True
    short_function = FunctionDeclaration("X")
    long_function = FunctionDeclaration("x")
    long_function.set_parameters(
        ParameterDeclaration("a", "string"), ParameterDeclaration("b", "number")
    )

    children = [
        NamespaceDeclaration("x"),
        ExternalModuleDeclaration("x", "./x"),
        long_function,
        short_function,
        EventDeclaration("x"),
        PropertyDeclaration("X"),
        ConstructorDeclaration(),
        static_function,
        static_property,
        ClassDeclaration("x"),
        InterfaceDeclaration("X"),
        TypeDeclaration("x"),
    ]
    parent.add_children(*children)

    assert [child.kind for child in parent.get_children()] == [
        "type",
        "interface",
        "class",
        "static property",
        "static function",
        "constructor",
        "property",
        "event",
        "function",
        "function",
        "module",
        "namespace",
    ]
    functions = [child for child in parent.get_children() if child.kind == "function"]
    assert functions == [short_function, long_function]


def test_get_children_by_name_keeps_attachment_order() -> None:
    parent = ClassDeclaration("Chart")
    first = ConstructorDeclaration()
    first.set_parameters(ParameterDeclaration("a"), ParameterDeclaration("b"))
    second = ConstructorDeclaration()
    parent.add_children(first, second)

    assert parent.get_children("constructor") == [first, second]
    assert parent.get_children() == [second, first]


def test_remove_child_detaches_all_overloads() -> None:
    """All same-named children are detached, and missing names are ignored."""
    parent = ClassDeclaration("Chart")
    parent.add_children(ConstructorDeclaration(), ConstructorDeclaration())

    removed = parent.remove_child("constructor")

    assert len(removed) == 2
    assert all(child.parent is None for child in removed)
    assert not parent.has_children
    assert parent.remove_child("missing") == []


def test_remove_children_without_names_detaches_everything() -> None:
    parent = NamespaceDeclaration("N")
    parent.add_children(TypeDeclaration("A"), TypeDeclaration("B"))

    removed = parent.remove_children()

    assert [child.name for child in removed] == ["A", "B"]
    assert parent.get_children_names() == []


def test_clone_is_deep_and_detached() -> None:
    """Clones copy attributes and children without sharing lists."""
    parent = InterfaceDeclaration("Options")
    original = PropertyDeclaration("chart", "Highcharts.ChartOptions")
    original.see.append("https://api.highcharts.com/highcharts/chart")
    original.is_optional = True
    original.unique_id = 7
    original.add_children(PropertyDeclaration("type", "string"))
    parent.add_children(original)

    clone = original.clone()
    clone.types.append("undefined")
    clone.see.clear()

    assert clone.parent is None
    assert clone.is_optional and clone.unique_id == 7
    assert original.types == ["Highcharts.ChartOptions"]
    assert original.see == ["https://api.highcharts.com/highcharts/chart"]
    assert clone.get_children_names() == ["type"]
    assert clone.get_children()[0] is not original.get_children()[0]


def test_clone_copies_parameters() -> None:
    function = FunctionDeclaration("redraw", "void")
    function.set_parameters(ParameterDeclaration("animation", "boolean"))

    clone = function.clone()

    assert clone.get_parameter_names() == ["animation"]
    assert clone.get_parameters()[0] is not function.get_parameters()[0]
    assert clone.get_parameters()[0].parameter_parent is clone


def test_set_parameters_rejects_duplicates_and_owned_parameters() -> None:
    function = FunctionDeclaration("redraw")
    parameter = ParameterDeclaration("animation", "boolean")
    function.set_parameters(parameter)

    with pytest.raises(StructuralError):
        function.set_parameters(ParameterDeclaration("animation", "object"))
    with pytest.raises(StructuralError):
        FunctionDeclaration("update").set_parameters(parameter)

    function.remove_parameters()
    assert parameter.parameter_parent is None
    assert not function.has_parameters


def test_parameter_lives_beside_its_owner() -> None:
    namespace = NamespaceDeclaration("Highcharts")
    function = FunctionDeclaration("chart")
    namespace.add_children(function)
    parameter = ParameterDeclaration("options", "Highcharts.Options")
    function.set_parameters(parameter)

    assert parameter.parent is namespace
    assert function.get_parameter("options") is parameter
    assert function.get_parameter("missing") is None


def test_referenced_types_include_children_and_parameters() -> None:
    interface = InterfaceDeclaration("Options")
    callback = FunctionDeclaration("formatter", "string")
    callback.set_parameters(ParameterDeclaration("point", "Highcharts.Point"))
    interface.add_children(
        PropertyDeclaration("chart", "Highcharts.ChartOptions|undefined"), callback
    )

    assert interface.get_referenced_types() == []
    assert interface.get_referenced_types(True) == [
        "Highcharts.ChartOptions",
        "undefined",
        "Highcharts.Point",
        "string",
    ]


@given(st.lists(identifiers, min_size=1, max_size=6))
def test_namespaces_split_dotted_names(segments: list) -> None:
    name = ".".join(segments)

    assert namespaces(name) == segments
    assert namespaces(name, True)[-1] == name
    assert simplify_name(name) == segments[-1]


def test_namespaces_keep_suffixes_and_keywords() -> None:
    assert namespaces("Highcharts.Dictionary<T>") == ["Highcharts", "Dictionary<T>"]
    assert namespaces("external:SVGElement") == ["external:", "SVGElement"]
    assert namespaces("Highcharts.[key:string]") == ["Highcharts", "[key:string]"]
    assert namespaces("Highcharts.[key:Keys]") == ["Highcharts", "[key in Keys]"]
    assert namespaces("") == []


def test_simplify_type_strips_root_prefix() -> None:
    assert simplify_type(
        "Highcharts", "Highcharts.Options|Array<Highcharts.Point>", "Other.Type"
    ) == ["Options|Array<Point>", "Other.Type"]


def test_extract_type_names() -> None:
    assert extract_type_names("Array<Highcharts.Point>|string", '"a"') == [
        "Array",
        "Highcharts.Point",
        "string",
        '"a"',
    ]


def test_sort_types_puts_null_and_any_last() -> None:
    assert sort_types(["any", "null", "string"]) == ["string", "null", "any"]
    assert sort_types(["undefined", "any", "null"]) == ["null", "undefined", "any"]
    assert sort_types(["Highcharts.Point", "string", '"a"']) == [
        '"a"',
        "string",
        "Highcharts.Point",
    ]
    assert sort_types(["Array<string>", "(string|number)", "number"]) == [
        "(string|number)",
        "number",
        "Array<string>",
    ]
