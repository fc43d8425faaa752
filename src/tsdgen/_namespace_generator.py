"""Generation of the class, function and type declarations of the namespace
modules."""

from __future__ import annotations

import copy
import posixpath
import warnings
from typing import Any, TypeVar

from ._config import Config
from ._declarations import (
    ClassDeclaration,
    ConstructorDeclaration,
    Declaration,
    EventDeclaration,
    ExtendedDeclaration,
    ExternalModuleDeclaration,
    FunctionDeclaration,
    FunctionTypeDeclaration,
    InterfaceDeclaration,
    ModuleDeclaration,
    NamespaceDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    TypeDeclaration,
    namespaces,
)
from ._namespace_parser import UNIQUE_ID_KEY, NamespaceNode
from ._options_generator import NAMESPACE_NAME
from ._session import GenerationSession
from ._utilities import (
    capitalize,
    parent,
    parse_json,
    relative,
    remove_examples,
    remove_links,
    transform_lists,
    unique_array,
    urls,
)

TDeclaration = TypeVar("TDeclaration", bound=Declaration)
TExtended = TypeVar("TExtended", bound=ExtendedDeclaration)


def _class_like_types(types: list[str]) -> list[str]:
    return [type_ for type_ in types if type_ != type_.lower()]


def _same_signature(a: ExtendedDeclaration, b: ExtendedDeclaration) -> bool:
    return (
        a.kind == b.kind
        and a.is_static == b.is_static
        and [(p.name, p.types) for p in a.get_parameters()]
        == [(p.name, p.types) for p in b.get_parameters()]
    )


class NamespaceGenerator:
    """Generates the declarations of namespace nodes into one namespace.

    Args:
        config: Run configuration.
        session: Session of the run.
        namespace: Namespace to generate into.
        globals_module: Module receiving global declarations. Without it,
            global declarations are skipped.
        product: Only nodes of this product are generated, if set.
        register: Whether declarations are recorded in the reference
            dictionary of the session, and duplicates of recorded
            declarations are suppressed.
    """

    def __init__(
        self,
        config: Config,
        session: GenerationSession,
        namespace: Declaration,
        globals_module: ModuleDeclaration | None = None,
        product: str = "",
        register: bool = False,
    ) -> None:
        self.namespace = namespace
        self.globals = globals_module
        self.product = product
        self._config = config
        self._session = session
        self._register = register

    def get_normalized_doclet(self, node: NamespaceNode) -> dict[str, Any]:
        """Copy of the doclet of a node with documentation links removed and
        types mapped."""
        doclet: dict[str, Any] = copy.deepcopy(
            node.get("doclet") or {"description": "", "kind": "global", "name": ""}
        )
        config = self._config
        spaces = namespaces(doclet.get("name") or "")
        removed_links: list[str] = []

        description = (doclet.get("description") or "").strip()
        description = remove_examples(description)
        description = remove_links(description, removed_links)
        description = transform_lists(description)

        doclet["description"] = description
        doclet["name"] = spaces[-1] if spaces else ""

        for parameter in (doclet.get("parameters") or {}).values():
            if parameter.get("description"):
                parameter["description"] = transform_lists(
                    remove_links(parameter["description"], removed_links)
                )
            parameter["types"] = [
                config.map_type(type_) for type_ in parameter.get("types") or ["any"]
            ]

        if doclet.get("products"):
            doclet["description"] = (
                "("
                + ", ".join(capitalize(product) for product in doclet["products"])
                + ") "
                + description
            )

        returns = doclet.get("return")
        if returns:
            if returns.get("description"):
                returns["description"] = transform_lists(
                    remove_links(returns["description"], removed_links)
                )
            returns["types"] = [
                config.map_type(type_) for type_ in returns.get("types") or ["any"]
            ]

        see = doclet.pop("see", None)
        if see:
            removed_links.extend([see] if isinstance(see, str) else see)

        values = None
        if doclet.get("values"):
            try:
                values = parse_json(doclet["values"], True)
            except ValueError:
                warnings.warn(
                    f"Could not parse the values of {'.'.join(spaces)}: "
                    f"{doclet['values']}",
                    stacklevel=2,
                )

        if isinstance(values, list):
            doclet["types"] = [config.map_value(value) for value in values]
        elif doclet.get("types"):
            doclet["types"] = [
                config.map_type(type_, False) for type_ in doclet["types"]
            ]
            if (
                not doclet["name"].startswith("[")
                and len(doclet["types"]) > 1
                and "undefined" in doclet["types"]
            ):
                doclet["isOptional"] = True
                doclet["types"] = [
                    type_ for type_ in doclet["types"] if type_ != "undefined"
                ]
        else:
            doclet["types"] = ["any"]

        if any(urls(link) for link in removed_links) and not config.without_links:
            doclet["see"] = [
                config.see_link(".".join(spaces), doclet.get("kind") or "")
            ]

        return doclet

    # Helpers.

    def _resolve_target(
        self, doclet: dict[str, Any], target: Declaration, redirect: bool = True
    ) -> Declaration | None:
        """Target of a declaration. Global declarations go to the globals
        module, and with `redirect` only namespaces take type declarations."""
        if doclet.get("isGlobal"):
            return self.globals
        if redirect and target.kind != self.namespace.kind:
            return self.namespace
        return target

    def _merge_into(
        self, declaration: TDeclaration, target: Declaration
    ) -> TDeclaration:
        """Existing same-named child of the same class, or the declaration
        itself."""
        for existing in target.get_children(declaration.name):
            if type(existing) is type(declaration):
                return existing  # type: ignore
        if self._register and isinstance(
            declaration,
            (ClassDeclaration, FunctionTypeDeclaration, TypeDeclaration),
        ):
            full_name = (
                target.full_name + "." + declaration.name
                if target.full_name
                else declaration.name
            )
            elsewhere = self._session.declared_elsewhere(full_name, target)
            if elsewhere is not None and type(elsewhere) is type(declaration):
                return elsewhere  # type: ignore
        return declaration

    def _add_signature(
        self, declaration: TExtended, target: Declaration
    ) -> TExtended:
        """Attach a function or constructor unless a sibling with the same
        signature exists, and return the attached one."""
        for existing in target.get_children(declaration.name):
            if isinstance(existing, type(declaration)) and _same_signature(
                existing, declaration
            ):
                return existing
        target.add_children(declaration)
        return declaration

    def _attach(self, declaration: Declaration, target: Declaration) -> None:
        if declaration.parent is None:
            target.add_children(declaration)
            if self._register:
                self._session.register(declaration)

    @staticmethod
    def _set_identity(declaration: Declaration, doclet: dict[str, Any]) -> None:
        if not declaration.unique_id and doclet.get(UNIQUE_ID_KEY):
            declaration.unique_id = doclet[UNIQUE_ID_KEY]

    def generate_children(self, node: NamespaceNode, target: Declaration) -> None:
        for child in node.get("children") or []:
            self.generate(child, target)

    # Dispatch.

    def generate(self, node: NamespaceNode, target: Declaration | None = None) -> None:
        """Generate the declaration of a node and its descendants."""
        if target is None:
            target = self.namespace

        doclet = node.get("doclet") or {}
        products = doclet.get("products")
        if self.product and products and self.product not in products:
            return

        kind = doclet.get("kind") or ""
        has_children = bool(node.get("children"))

        if kind == "class":
            self.generate_class(node, target)
        elif kind == "constructor":
            self.generate_constructor(node, target)
        elif kind == "external":
            self.generate_external(node)
        elif kind == "function":
            self.generate_function(node, target)
        elif kind == "global":
            self.generate_module_global(node, target)
        elif kind == "interface":
            self.generate_interface(node, target)
        elif kind == "namespace":
            self.generate_namespace(node, target)
        elif kind == "member":
            self.generate_property(node, target)
        elif kind == "typedef":
            if doclet.get("parameters") or doclet.get("return"):
                if has_children:
                    self.generate_function_interface(node, target)
                else:
                    self.generate_function_type(node, target)
            elif has_children and doclet.get("types") and doclet["types"][0] != "*":
                self.generate_interface(node, target)
            else:
                self.generate_type(node, target)
        else:
            warnings.warn(
                f"Unknown kind: {kind} ({doclet.get('name')})", stacklevel=2
            )

    # Generators per kind.

    def generate_class(
        self, node: NamespaceNode, target: Declaration
    ) -> ClassDeclaration | None:
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target)
        if resolved is None:
            return None

        declaration = self._merge_into(ClassDeclaration(doclet["name"]), resolved)
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        declaration.types = unique_array(
            declaration.types, _class_like_types(doclet["types"])
        )
        self._attach(declaration, resolved)

        self.generate_children(node, declaration)
        return declaration

    def _inherit_description(
        self,
        declaration: ExtendedDeclaration,
        target: Declaration,
        is_static: bool | None = None,
    ) -> None:
        for existing in target.get_children(declaration.name):
            if not existing.description or type(existing) is not type(declaration):
                continue
            if is_static is not None and existing.is_static != is_static:
                continue
            declaration.description = existing.description
            return

    def _set_overloaded_parameters(
        self,
        declaration: ExtendedDeclaration,
        parameters: list[ParameterDeclaration],
        target: Declaration,
    ) -> None:
        """Set the parameters. A leading optional parameter followed by a
        required one results in an additional overload without it."""
        if (
            len(parameters) > 1
            and parameters[0].is_optional
            and not parameters[1].is_optional
        ):
            overload = declaration.clone()
            overload.set_parameters(
                *(parameter.clone() for parameter in parameters[1:])
            )
            self._add_signature(overload, target)
            parameters[0].is_optional = False
        declaration.set_parameters(*parameters)

    def generate_constructor(
        self, node: NamespaceNode, target: Declaration
    ) -> ConstructorDeclaration:
        doclet = self.get_normalized_doclet(node)
        declaration = ConstructorDeclaration()
        self._set_identity(declaration, doclet)

        if doclet["description"]:
            declaration.description = doclet["description"]
        else:
            self._inherit_description(declaration, target)

        if doclet.get("events"):
            declaration.add_children(*self.generate_events(doclet["events"]))
        declaration.events.extend(doclet.get("fires") or [])
        if doclet.get("isPrivate"):
            declaration.is_private = True
        declaration.see = unique_array(declaration.see, doclet.get("see", []))

        if doclet.get("parameters"):
            self._set_overloaded_parameters(
                declaration, self.generate_parameters(doclet["parameters"]), target
            )

        return self._add_signature(declaration, target)

    def generate_events(self, events: dict[str, Any]) -> list[EventDeclaration]:
        declarations = []
        for name, event in events.items():
            declaration = EventDeclaration(
                name,
                *(self._config.map_type(type_) for type_ in event.get("types") or []),
            )
            declaration.description = event.get("description") or ""
            declarations.append(declaration)
        return declarations

    def generate_external(self, node: NamespaceNode) -> InterfaceDeclaration:
        """Generate an interface in the global scope augmentation."""
        doclet = self.get_normalized_doclet(node)

        global_scopes = self.namespace.get_children("external:")
        if global_scopes:
            global_scope = global_scopes[0]
        else:
            global_scope = NamespaceDeclaration("external:")
            self.namespace.add_children(global_scope)

        declaration = self._merge_into(
            InterfaceDeclaration(doclet["name"]), global_scope
        )
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        self._attach(declaration, global_scope)

        self.generate_children(node, declaration)
        return declaration

    def generate_function(
        self, node: NamespaceNode, target: Declaration
    ) -> FunctionDeclaration | None:
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target, redirect=False)
        if resolved is None:
            return None

        declaration = FunctionDeclaration(doclet["name"])
        self._set_identity(declaration, doclet)

        if doclet["description"]:
            declaration.description = doclet["description"]
        else:
            self._inherit_description(
                declaration, resolved, bool(doclet.get("isStatic"))
            )

        if doclet.get("events"):
            declaration.add_children(*self.generate_events(doclet["events"]))
        declaration.events.extend(doclet.get("fires") or [])
        if doclet.get("isPrivate"):
            declaration.is_private = True
        if doclet.get("isStatic"):
            declaration.is_static = True

        returns = doclet.get("return")
        if returns:
            if returns.get("description"):
                declaration.types_description = returns["description"]
            declaration.types = unique_array(declaration.types, returns["types"])

        declaration.see = unique_array(declaration.see, doclet.get("see", []))

        if doclet.get("parameters"):
            self._set_overloaded_parameters(
                declaration, self.generate_parameters(doclet["parameters"]), resolved
            )

        return self._add_signature(declaration, resolved)

    def generate_function_interface(
        self, node: NamespaceNode, target: Declaration
    ) -> InterfaceDeclaration | None:
        """Generate a callable interface: an interface with an unnamed call
        signature and further members."""
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target)
        if resolved is None:
            return None

        declaration = self._merge_into(InterfaceDeclaration(doclet["name"]), resolved)
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        self._attach(declaration, resolved)

        signature = self._merge_into(FunctionDeclaration(""), declaration)
        if doclet["description"]:
            signature.description = doclet["description"]
        if doclet.get("parameters") and not signature.has_parameters:
            signature.set_parameters(*self.generate_parameters(doclet["parameters"]))
        returns = doclet.get("return")
        if returns:
            if returns.get("description"):
                signature.types_description = returns["description"]
            signature.types = unique_array(signature.types, returns["types"])
        if signature.parent is None:
            declaration.add_children(signature)

        self.generate_children(node, declaration)
        return declaration

    def generate_function_type(
        self, node: NamespaceNode, target: Declaration
    ) -> FunctionTypeDeclaration | None:
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target)
        if resolved is None:
            return None

        declaration = self._merge_into(
            FunctionTypeDeclaration(doclet["name"]), resolved
        )
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        if doclet.get("parameters") and not declaration.has_parameters:
            declaration.set_parameters(*self.generate_parameters(doclet["parameters"]))
        returns = doclet.get("return")
        if returns:
            if returns.get("description"):
                declaration.types_description = returns["description"]
            declaration.types = unique_array(declaration.types, returns["types"])
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        self._attach(declaration, resolved)
        return declaration

    def generate_interface(
        self, node: NamespaceNode, target: Declaration
    ) -> InterfaceDeclaration | None:
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target)
        if resolved is None:
            return None

        declaration = self._merge_into(InterfaceDeclaration(doclet["name"]), resolved)
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        declaration.types = unique_array(
            declaration.types, _class_like_types(doclet["types"])
        )
        self._attach(declaration, resolved)

        self.generate_children(node, declaration)
        return declaration

    def generate_module_global(
        self, node: NamespaceNode, target: Declaration
    ) -> Declaration:
        """Merge a file-level node into the namespace."""
        doclet = self.get_normalized_doclet(node)
        declaration = self.namespace

        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        if target is not declaration and target.has_children:
            declaration.add_children(*target.remove_children())

        self.generate_children(node, declaration)
        return declaration

    def generate_namespace(
        self, node: NamespaceNode, target: Declaration
    ) -> Declaration | None:
        """Generate a keyword namespace like `external:`. Other namespaces
        are merged into the namespace of this generator."""
        doclet = self.get_normalized_doclet(node)

        if not doclet["name"].endswith(":"):
            self.generate_children(node, self.namespace)
            return self.namespace

        resolved = self._resolve_target(doclet, target, redirect=False)
        if resolved is None:
            return None

        declaration = self._merge_into(NamespaceDeclaration(doclet["name"]), resolved)
        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        self._attach(declaration, resolved)

        self.generate_children(node, declaration)
        return declaration

    def generate_parameters(
        self, parameters: dict[str, Any]
    ) -> list[ParameterDeclaration]:
        declarations = []
        for name, parameter in parameters.items():
            declaration = ParameterDeclaration(name, *(parameter.get("types") or []))
            if parameter.get("defaultValue"):
                declaration.default_value = parameter["defaultValue"]
            if parameter.get("description"):
                declaration.description = parameter["description"]
            if parameter.get("isVariable"):
                declaration.is_variable = True
            elif parameter.get("isOptional"):
                declaration.is_optional = True
            declarations.append(declaration)
        return declarations

    def generate_property(
        self, node: NamespaceNode, target: Declaration
    ) -> PropertyDeclaration | None:
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target, redirect=False)
        if resolved is None:
            return None

        declaration = self._merge_into(PropertyDeclaration(doclet["name"]), resolved)
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        if doclet.get("isOptional"):
            declaration.is_optional = True
        if doclet.get("isPrivate"):
            declaration.is_private = True
        if doclet.get("isStatic"):
            declaration.is_static = True
        if doclet.get("isReadOnly"):
            declaration.is_read_only = True
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        declaration.types = unique_array(declaration.types, doclet["types"])
        if declaration.parent is None:
            resolved.add_children(declaration)
        return declaration

    def generate_type(
        self, node: NamespaceNode, target: Declaration
    ) -> TypeDeclaration | None:
        doclet = self.get_normalized_doclet(node)
        resolved = self._resolve_target(doclet, target)
        if resolved is None:
            return None

        declaration = self._merge_into(TypeDeclaration(doclet["name"]), resolved)
        self._set_identity(declaration, doclet)
        if doclet["description"]:
            declaration.description = doclet["description"]
        declaration.see = unique_array(declaration.see, doclet.get("see", []))
        types = doclet["types"]
        if node.get("children"):
            types = _class_like_types(types)
        declaration.types = unique_array(declaration.types, types)
        self._attach(declaration, resolved)

        self.generate_children(node, declaration)
        return declaration


def generate_module(path: str, config: Config) -> ModuleDeclaration:
    """Wrapper module of a secondary source file, exporting a factory that
    adds the module to an imported namespace."""
    module = ModuleDeclaration()
    module.imports.append(
        "import * as "
        + NAMESPACE_NAME
        + ' from "'
        + relative(path, config.main_module, True)
        + '";'
    )
    module.exports.append("export default factory;")

    factory = FunctionDeclaration("factory")
    factory.description = (
        f"Adds the module to the imported {NAMESPACE_NAME} namespace."
    )
    parameter = ParameterDeclaration("highcharts", f"typeof {NAMESPACE_NAME}")
    parameter.description = f"The imported {NAMESPACE_NAME} namespace to extend."
    factory.set_parameters(parameter)
    module.add_children(factory)

    return module


def _product_namespace(path: str, config: Config) -> ModuleDeclaration:
    namespace = ModuleDeclaration(NAMESPACE_NAME)
    globals_import = relative(
        path, posixpath.join(parent(config.main_module), "globals"), True
    )
    namespace.imports.append('import * as globals from "' + globals_import + '";')
    namespace.exports.append(f"export as namespace {NAMESPACE_NAME};")
    return namespace


def generate_namespace(
    modules: dict[str, NamespaceNode],
    main_namespace: ModuleDeclaration | None = None,
    config: Config | None = None,
    session: GenerationSession | None = None,
) -> dict[str, ModuleDeclaration]:
    """Generate the declarations of all module trees.

    The main module extends `main_namespace` (usually the option namespace).
    Secondary source files become wrapper modules that augment the main
    module, while other product bundles receive all declarations directly.

    Returns the declaration modules by module path."""
    config = config or Config()
    session = session or GenerationSession()
    main_module = config.main_module
    globals_path = posixpath.join(parent(main_module), "globals")

    globals_module = ModuleDeclaration("globals")
    # Imported by every product namespace, so it is written even when empty.
    globals_module.exports.append("export {};")
    declarations: dict[str, ModuleDeclaration] = {globals_path: globals_module}

    if main_namespace is None:
        main_namespace = ModuleDeclaration(NAMESPACE_NAME)
    reference = _product_namespace(main_module, config)
    main_namespace.imports[:0] = [
        statement
        for statement in reference.imports
        if statement not in main_namespace.imports
    ]
    main_namespace.exports.extend(
        statement
        for statement in reference.exports
        if statement not in main_namespace.exports
    )

    main_product = next(
        (product for product, path in config.products.items() if path == main_module),
        "",
    )
    main_generator = NamespaceGenerator(
        config,
        session,
        main_namespace,
        globals_module,
        product=main_product,
        register=True,
    )

    bundles: dict[str, NamespaceGenerator] = {}
    for product, path in config.products.items():
        if path == main_module or path in bundles:
            continue
        namespace = _product_namespace(path, config)
        namespace.add_children(
            *(child.clone() for child in main_namespace.get_children())
        )
        bundles[path] = NamespaceGenerator(config, session, namespace, product=product)

    main_tree = modules.get(main_module)
    if main_tree is not None:
        main_generator.generate(main_tree)
        for generator in bundles.values():
            generator.generate(main_tree)

    for path, tree in modules.items():
        if path == main_module or path in bundles or path in declarations:
            continue

        wrapper = generate_module(path, config)
        augmentation = ExternalModuleDeclaration(
            NAMESPACE_NAME, relative(path, main_module, True)
        )
        main_generator.namespace = augmentation
        try:
            main_generator.generate(tree)
        finally:
            main_generator.namespace = main_namespace
        if augmentation.has_children:
            wrapper.add_children(augmentation)

        for generator in bundles.values():
            generator.generate(tree)

        declarations[path] = wrapper

    declarations[main_module] = main_namespace
    for path, generator in bundles.items():
        declarations[path] = generator.namespace  # type: ignore

    return declarations
