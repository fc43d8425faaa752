"""Tests for moving referenced declarations into the main namespace."""

from tsdgen import (
    ExternalModuleDeclaration,
    GenerationSession,
    InterfaceDeclaration,
    ModuleDeclaration,
    PropertyDeclaration,
    TypeDeclaration,
    relocate_references,
)
from tsdgen._relocator import ReferenceRelocator


def _augmentation(
    session: GenerationSession, *declarations
) -> ExternalModuleDeclaration:
    """Augmentation of the main namespace inside a wrapper module."""
    wrapper = ModuleDeclaration()
    augmentation = ExternalModuleDeclaration("Highcharts", "../highcharts")
    wrapper.add_children(augmentation)
    augmentation.add_children(*declarations)
    for declaration in declarations:
        session.register(declaration)
    return augmentation


def _interface(name: str, *property_types: str) -> InterfaceDeclaration:
    interface = InterfaceDeclaration(name)
    for index, type_ in enumerate(property_types):
        interface.add_children(PropertyDeclaration(f"p{index}", type_))
    return interface


def test_references_are_relocated_transitively() -> None:
    session = GenerationSession()
    main = ModuleDeclaration("Highcharts")
    main.add_children(_interface("Options", "Highcharts.ExportingOptions"))
    augmentation = _augmentation(
        session,
        _interface("ExportingOptions", "Highcharts.ExportingMimeTypeValue"),
        TypeDeclaration("ExportingMimeTypeValue", '"image/png"'),
        TypeDeclaration("ExportingUnusedValue", '"unused"'),
    )

    relocated = relocate_references(
        {"code/highcharts": main}, "code/highcharts", session
    )

    assert [declaration.name for declaration in relocated] == [
        "ExportingOptions",
        "ExportingMimeTypeValue",
    ]
    assert all(declaration.parent is main for declaration in relocated)
    assert augmentation.get_children_names() == ["ExportingUnusedValue"]


def test_declarations_of_main_namespace_stay() -> None:
    """Augmentations of declarations that already exist in the main namespace
    are not moved."""
    session = GenerationSession()
    main = ModuleDeclaration("Highcharts")
    chart = _interface("Chart")
    main.add_children(_interface("Options", "Highcharts.Chart"), chart)
    session.register(chart)
    augmentation = _augmentation(session, _interface("Chart", "boolean"))

    relocated = relocate_references(
        {"code/highcharts": main}, "code/highcharts", session
    )

    assert relocated == []
    assert augmentation.get_children_names() == ["Chart"]


def test_references_of_option_modules_are_followed() -> None:
    session = GenerationSession()
    main = ModuleDeclaration("Highcharts")
    line = ModuleDeclaration()
    line_augmentation = ExternalModuleDeclaration("code/highcharts", "../highcharts")
    line.add_children(line_augmentation)
    line_augmentation.add_children(
        _interface("SeriesLineOptions", "Highcharts.MarkerOptions")
    )
    _augmentation(session, _interface("MarkerOptions", "number"))
    modules = {"code/highcharts": main, "code/options/line": line}

    relocated = relocate_references(modules, "code/highcharts", session)

    assert [declaration.name for declaration in relocated] == ["MarkerOptions"]
    assert main.get_children_names() == ["MarkerOptions"]


def test_each_declaration_is_visited_once() -> None:
    """Cyclic references terminate."""
    session = GenerationSession()
    main = ModuleDeclaration("Highcharts")
    main.add_children(_interface("Options", "Highcharts.A"))
    _augmentation(
        session, _interface("A", "Highcharts.B"), _interface("B", "Highcharts.A")
    )
    relocator = ReferenceRelocator(main, session)

    relocator.relocate(main.get_children())
    relocator.relocate(main.get_children())

    assert [declaration.name for declaration in relocator.relocated] == ["A", "B"]
    assert sorted(main.get_children_names()) == ["A", "B", "Options"]


def test_declarations_of_option_modules_stay() -> None:
    """Option modules augment the main module under its module path, which
    does not make them copies of the main namespace."""
    session = GenerationSession()
    main = ModuleDeclaration("Highcharts")
    main.add_children(
        _interface("SeriesOptionsRegistry", "Highcharts.SeriesLineOptions")
    )
    line = ModuleDeclaration()
    line_augmentation = ExternalModuleDeclaration("code/highcharts", "../highcharts")
    line.add_children(line_augmentation)
    series_line = _interface("SeriesLineOptions")
    line_augmentation.add_children(series_line)
    session.register(series_line)
    modules = {"code/highcharts": main, "code/options/line": line}

    relocated = relocate_references(modules, "code/highcharts", session)

    assert relocated == []
    assert line_augmentation.get_children_names() == ["SeriesLineOptions"]
