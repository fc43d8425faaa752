"""Generation of the option interfaces of the main namespace."""

from __future__ import annotations

import copy
import posixpath
import re
import warnings
from typing import Any

from ._config import Config
from ._declarations import (
    Declaration,
    ExternalModuleDeclaration,
    InterfaceDeclaration,
    ModuleDeclaration,
    PropertyDeclaration,
    TypeDeclaration,
    extract_type_names,
    namespaces,
)
from ._errors import MissingReferenceError
from ._options_parser import OptionNode
from ._session import GenerationSession
from ._utilities import (
    capitalize,
    is_deep_equal,
    parent,
    parse_json,
    relative,
    remove_examples,
    remove_links,
    transform_lists,
    unique_array,
    urls,
)

NAMESPACE_NAME = "Highcharts"

_ANY_TYPE = re.compile(r"(^|[\<\(\|])any([\|\)\>]|$)", re.MULTILINE)
_SERIES_NAME = re.compile(
    r"^Highcharts\.(?:Plot|Series)(([A-Z][a-z]+)(?:[A-Z][a-z]+)?)\w*Options$"
)
_NON_WORD = re.compile(r"\W+")


def _custom_properties_hint(name: str) -> str:
    return (
        "\n\nYou have to extend the `"
        + name
        + "` via an interface to allow custom properties:\n```\ndeclare interface "
        + name
        + " {\n    customProperty: string;\n}\n"
    )


def get_camel_case_name(name: str) -> str:
    """Interface name of an option path, e.g. `plotOptions.series` becomes
    `PlotSeriesOptions`."""
    camel_case = "".join(
        "".join(capitalize(word) for word in _NON_WORD.split(space))
        for space in namespaces(name)
    )
    return camel_case.replace("Options", "") + "Options"


class OptionsGenerator:
    """Builds the main namespace from a completed options tree."""

    def __init__(self, config: Config, session: GenerationSession) -> None:
        self.namespace = ModuleDeclaration(NAMESPACE_NAME)
        self._config = config
        self._session = session

    def generate(self, root: OptionNode) -> ModuleDeclaration:
        self.generate_interface_declaration(root)
        self.generate_series_declaration()
        self.generate_literal_type_declarations()
        return self.namespace

    def _add_to_namespace(self, declaration: Declaration) -> None:
        self.namespace.add_children(declaration)
        self._session.register(declaration)

    def get_normalized_doclet(self, node: OptionNode) -> dict[str, Any]:
        """Copy of the doclet of a node with documentation links removed,
        types mapped and `see` links to the online documentation."""
        doclet = copy.deepcopy(node["doclet"])
        meta = node.get("meta", {})
        name = meta.get("fullname") or meta.get("name") or ""
        removed_links: list[str] = []

        description = (doclet.get("description") or "").strip()
        description = remove_examples(description)
        description = remove_links(description, removed_links)
        description = transform_lists(description)

        see = doclet.pop("see", None)
        if see:
            removed_links.extend([see] if isinstance(see, str) else see)

        type_names = (doclet.get("type") or {}).get("names")
        if type_names:
            doclet["type"] = {
                "names": unique_array(
                    self._config.map_type(type_name) for type_name in type_names
                )
            }
        else:
            doclet["type"] = {"names": ["any"]}

        products = doclet.get("products")
        if products:
            removed_links = [
                self._config.see_link(name, "option", product) for product in products
            ]
            if description and not description.startswith("("):
                description = (
                    "("
                    + ", ".join(capitalize(product) for product in products)
                    + ") "
                    + description
                )

        if not self._config.without_links and removed_links:
            doclet["see"] = [
                found[0] for found in (urls(link) for link in removed_links) if found
            ]

        doclet["description"] = description
        return doclet

    def generate_interface_declaration(
        self, node: OptionNode
    ) -> InterfaceDeclaration | None:
        if node["doclet"].get("access") == "private":
            return None

        doclet = self.get_normalized_doclet(node)
        meta = node.get("meta", {})
        name = get_camel_case_name(meta.get("fullname") or meta.get("name") or "")
        children = list(node.get("children", {}).values())

        declaration = InterfaceDeclaration(node["doclet"].get("declare") or name)
        existing = self.namespace.get_children(declaration.name)
        if existing and isinstance(existing[0], InterfaceDeclaration):
            declaration = existing[0]

        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        if isinstance(doclet.get("deprecated"), str):
            declaration.deprecated = doclet["deprecated"]
        if declaration.parent is None:
            self._add_to_namespace(declaration)

        if name != "SeriesOptions":
            for child in children:
                self.generate_property_declaration(child, declaration)
            return declaration

        declaration.description += _custom_properties_hint("SeriesOptions")
        for child in children:
            extends = child["doclet"].get("_extends") or []
            if child.get("children") and any(
                extended.startswith("plotOptions") for extended in extends
            ):
                continue
            self.generate_property_declaration(child, declaration)
        for child in children:
            extends = child["doclet"].get("_extends") or []
            if child.get("children") and any(
                extended.startswith("plotOptions") for extended in extends
            ):
                series = self.generate_series_type_declaration(child, self.namespace)
                if series is not None:
                    self._session.series.append(series.full_name)
        return declaration

    def generate_property_declaration(
        self, node: OptionNode, target: Declaration
    ) -> PropertyDeclaration | None:
        if node["doclet"].get("access") == "private":
            return None

        doclet = self.get_normalized_doclet(node)
        type_names: list[str] = list(doclet["type"]["names"])
        meta = node.get("meta", {})

        if node.get("children"):
            interface = self.generate_interface_declaration(node)
            if interface is None:
                return None

            replaced_any = False
            mapped: list[str] = []
            for type_name in type_names:
                if _ANY_TYPE.search(type_name):
                    replaced_any = True
                    type_name = _ANY_TYPE.sub(
                        r"\g<1>" + interface.full_name + r"\g<2>", type_name
                    )
                mapped.append(type_name)
            if not replaced_any:
                mapped.append(interface.full_name)
            type_names = unique_array(mapped)

        declaration = PropertyDeclaration(meta.get("name") or "")
        existing = target.get_children(declaration.name)
        if existing and isinstance(existing[0], PropertyDeclaration):
            declaration = existing[0]

        if doclet.get("declare"):
            declaration.declare_name = doclet["declare"]
        if doclet["description"]:
            declaration.description = doclet["description"]
        if meta.get("fullname") != "series.type":
            declaration.is_optional = True
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        if doclet.get("deprecated"):
            declaration.deprecated = doclet["deprecated"]

        values = None
        if doclet.get("values"):
            try:
                values = parse_json(doclet["values"], True)
            except ValueError:
                warnings.warn(
                    f"Could not parse the values of {meta.get('fullname')}: "
                    f"{doclet['values']}",
                    stacklevel=2,
                )
        if isinstance(values, list):
            declaration.types = unique_array(
                declaration.types, (self._config.map_value(value) for value in values)
            )
        else:
            declaration.types = unique_array(declaration.types, type_names)

        if declaration.parent is None:
            target.add_children(declaration)
        return declaration

    def generate_series_declaration(self) -> None:
        """Generate the registry of series options and retype `Options.series`.

        Raises:
            MissingReferenceError: if `Options` or `Options.series` was not
                generated.
        """
        options = self.namespace.get_children("Options")
        if not options:
            raise MissingReferenceError(f"{NAMESPACE_NAME}.Options not declared!")
        series_properties = options[0].get_children("series")
        if not series_properties:
            raise MissingReferenceError(
                f"{NAMESPACE_NAME}.Options#series not declared!"
            )

        registry = InterfaceDeclaration("SeriesOptionsRegistry")
        registry.description = "The registry for all types of series options."
        for series in self._session.series:
            registry.add_children(PropertyDeclaration(series, series))
        self._add_to_namespace(registry)

        series_type = TypeDeclaration(
            "SeriesOptionsType", "SeriesOptionsRegistry[keyof SeriesOptionsRegistry]"
        )
        series_type.description = "The possible types of series options."
        self._add_to_namespace(series_type)

        unknown_type = TypeDeclaration(
            "UnknownSeriesOptionsType", *self._session.series
        )
        unknown_type.description = "Explicit options collection of all series types."
        self._add_to_namespace(unknown_type)

        unknown_series = TypeDeclaration(
            "UnknownSeriesOptions",
            f'Omit<{NAMESPACE_NAME}.UnknownSeriesOptionsType,"type">'
            "&{data:Array<unknown>}",
        )
        unknown_series.description = "Unknown series type with all potential options."
        self._add_to_namespace(unknown_series)

        series_properties[0].types = [
            f"Array<{NAMESPACE_NAME}.SeriesOptionsType"
            f"|{NAMESPACE_NAME}.UnknownSeriesOptions>"
        ]

    def generate_series_type_declaration(
        self, node: OptionNode, target: Declaration
    ) -> InterfaceDeclaration | None:
        """Generate the options interface of one series type, like
        `SeriesLineOptions`."""
        meta = node.get("meta", {})
        if not meta.get("name") or node["doclet"].get("access") == "private":
            return None

        doclet = self.get_normalized_doclet(node)
        declaration = InterfaceDeclaration(
            get_camel_case_name(meta.get("fullname") or meta["name"])
        )

        extended_children = ["type"]
        for extended in node["doclet"].get("_extends") or []:
            found = self.namespace.get_children(get_camel_case_name(extended))
            if found:
                extended_children.extend(found[0].get_children_names())
        extended_children = unique_array(extended_children)

        if doclet["description"]:
            declaration.description = doclet["description"] + _custom_properties_hint(
                declaration.name
            )
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        declaration.types.extend(
            (
                f"{NAMESPACE_NAME}.Plot{capitalize(meta['name'])}Options",
                f"{NAMESPACE_NAME}.SeriesOptions",
            )
        )

        type_property = PropertyDeclaration("type", '"' + meta["name"] + '"')
        type_property.description = (
            "("
            + ", ".join(capitalize(product) for product in self._config.products)
            + ") This property is only in TypeScript non-optional and might be "
            "`undefined` in series objects from unknown sources."
        )
        if doclet.get("deprecated"):
            declaration.deprecated = doclet["deprecated"]

        declaration.add_children(type_property)
        target.add_children(declaration)
        self._session.register(declaration)

        for child_name, child in node.get("children", {}).items():
            if child_name not in extended_children:
                self.generate_property_declaration(child, declaration)

        for child_name in unique_array(node["doclet"].get("exclude") or []):
            if child_name in extended_children or declaration.get_children(child_name):
                continue
            excluded = PropertyDeclaration(child_name, "undefined")
            excluded.description = "Not available"
            excluded.is_optional = True
            declaration.add_children(excluded)

        return declaration

    def generate_literal_type_declarations(
        self, declaration: Declaration | None = None
    ) -> None:
        """Replace unions of string literals with named type aliases."""
        if declaration is None:
            declaration = self.namespace

        types = declaration.types
        if (
            isinstance(declaration, PropertyDeclaration)
            and len(types) > 1
            and all(type_.startswith('"') for type_ in types)
        ):
            name = declaration.declare_name or (
                "Options" + capitalize(declaration.name) + "Value"
            )
            alias = self.generate_type_declaration(name, types)
            declaration.types = [alias.full_name]

        for child in declaration.get_children():
            self.generate_literal_type_declarations(child)

    def generate_type_declaration(
        self, name: str, types: list[str], description: str = ""
    ) -> TypeDeclaration:
        """Get or create a type alias in the namespace. An existing alias with
        other types gets the union of both."""
        existing = self.namespace.get_children(name)
        if existing and isinstance(existing[0], TypeDeclaration):
            alias = existing[0]
            if is_deep_equal(alias.types, types):
                return alias
            warnings.warn(
                f"{name} already exists with different types, merging "
                f"{alias.types} and {types}",
                stacklevel=2,
            )
            alias.types = unique_array(alias.types, types)
            return alias

        alias = TypeDeclaration(name, *types)
        if description:
            alias.description = description
        self._add_to_namespace(alias)
        return alias


def split_series_modules(
    namespace: ModuleDeclaration, config: Config
) -> dict[str, ModuleDeclaration]:
    """Move the series option interfaces into their own `options/<type>`
    modules. Returns the new modules by module path."""
    main_module = config.main_module
    options_path = posixpath.join(parent(main_module), "options")

    plot_options = namespace.get_children("PlotOptions")
    if not plot_options:
        return {}
    series_types = plot_options[0].get_children_names()

    modules: dict[str, ModuleDeclaration] = {}
    for child in namespace.get_children():
        if child.parent is not namespace:
            continue
        name = extract_type_names(child.full_name)[0]
        match = _SERIES_NAME.match(name)
        if match is None:
            continue

        series_type = match.group(1).lower()
        if series_type not in series_types:
            series_type = match.group(2).lower()
            if series_type not in series_types:
                continue

        module_path = posixpath.join(options_path, series_type)
        if module_path not in modules:
            main_import = relative(module_path, main_module, True)
            module = ModuleDeclaration()
            module.imports.append(
                "import * as " + NAMESPACE_NAME + ' from "' + main_import + '";'
            )
            # Named by module path, unlike the namespace copies of other modules.
            module.add_children(
                ExternalModuleDeclaration(main_module, main_import)
            )
            modules[module_path] = module

        modules[module_path].get_children()[0].add_children(
            *namespace.remove_child(child.name)
        )

        module_import = 'import "' + relative(main_module, module_path, True) + '";'
        if module_import not in namespace.imports:
            namespace.imports.append(module_import)

    return modules


def generate_options(
    root: OptionNode,
    config: Config | None = None,
    session: GenerationSession | None = None,
) -> dict[str, ModuleDeclaration]:
    """Generate the option declarations of a completed options tree.

    Returns the main namespace under the main module path, and one module per
    series type under `options/<type>`."""
    config = config or Config()
    namespace = OptionsGenerator(config, session or GenerationSession()).generate(root)
    modules = {config.main_module: namespace}
    modules.update(split_series_modules(namespace, config))
    return modules
