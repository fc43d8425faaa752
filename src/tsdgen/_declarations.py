"""Declaration model: a tree of TypeScript declarations that can render itself
as `.d.ts` source.

Every declaration has a simplified `name`, an optional parent and an ordered
list of children. Full names are derived by walking the parent chain, so a
declaration can be moved between trees without renaming it."""

from __future__ import annotations

import abc
import functools
import re
from typing import Any, ClassVar, Iterable, Literal, Union

from typing_extensions import Self, override

from ._errors import StructuralError

DeclarationKind = Literal[
    "global",
    "type",
    "interface",
    "constant",
    "enum",
    "class",
    "static property",
    "static function",
    "constructor",
    "property",
    "event",
    "function",
    "parameter",
    "module",
    "namespace",
]

DefaultValue = Union[bool, int, float, str, None]

# Sort precedence of children, lowest first.
KIND_ORDER: tuple[DeclarationKind, ...] = (
    "global",
    "type",
    "interface",
    "constant",
    "enum",
    "class",
    "static property",
    "static function",
    "constructor",
    "property",
    "event",
    "function",
    "parameter",
    "module",
    "namespace",
)

_EXTRACT_TYPE_NAMES = re.compile(
    r'(?:[\w\.]+?|"(?:[^"]|\\")*?")(?=[\|\,\(\)\[\]\<\>]|$)', re.MULTILINE
)
_NAMESPACE_KEYWORDS = re.compile(r"\w+\:", re.MULTILINE)
_NAMESPACES_SUBSPACE = re.compile(r"(?:<.+>|\[.+\])$", re.MULTILINE)
_NORMALIZE_ESCAPE = re.compile(r"\n\s*\n")
_NORMALIZE_LIST = re.compile(r"\n(?:[\-\+\*]|\d+\.) ")
_NORMALIZE_SPACE = re.compile(r"\s+")
_NORMALIZE_UNESCAPE = re.compile(r"<br>")
_PAD_SPACE = re.compile(r"\s")
TYPE_NAME = re.compile(
    r'([\w\.]+?|"(?:\\\\|\\"|[^"])*?")([\|\,\(\)\[\]\<\>]|$)', re.MULTILINE
)
TYPE_SEPARATOR = re.compile(r"[\|\,\(\)\[\]\<\>]")
_NON_WORD = re.compile(r"\W")

_SPACE_KINDS = ("global", "module", "namespace")


# Name and text helpers.


def namespaces(name: str, with_full_names: bool = False) -> list[str]:
    """Split a dotted name into its namespace segments.

    Generic and index suffixes (`<...>`, `[...]`) stay attached to the last
    segment, and `external:` style prefixes become their own segment. With
    `with_full_names`, each segment is prefixed with all previous ones."""
    if not name:
        return []

    match = _NAMESPACES_SUBSPACE.search(name)
    subspace = match.group(0) if match else ""

    if subspace:
        name = name[: -len(subspace)]

    segments = _NAMESPACE_KEYWORDS.sub(r"\g<0>.", name).split(".")

    if subspace:
        if (
            subspace.find(":") > 0
            and ":number" not in subspace
            and ":string" not in subspace
        ):
            subspace = subspace.replace(":", " in ", 1)
        segments[-1] += subspace

    segments = [segment for segment in segments if segment]

    if with_full_names:
        full_names: list[str] = []
        for segment in segments:
            full_names.append(
                full_names[-1] + "." + segment if full_names else segment
            )
        return full_names

    return segments


def simplify_name(name: str) -> str:
    """Return the last namespace segment of a name."""
    segments = namespaces(name)
    return segments[-1] if segments else ""


def simplify_type(root: str, *types: str) -> list[str]:
    """Strip the `root.` prefix from every type name in the given types."""
    prefix = root + "."

    def _replace(match: re.Match[str]) -> str:
        name, suffix = match.group(1), match.group(2)
        if name.startswith(prefix):
            return simplify_name(name) + suffix
        return match.group(0)

    return [TYPE_NAME.sub(_replace, type_) for type_ in types]


def extract_type_names(*types: str) -> list[str]:
    """Extract the identifier-like names (and string literals) mentioned in
    type expressions."""
    names: list[str] = []
    for type_ in types:
        names.extend(name for name in _EXTRACT_TYPE_NAMES.findall(type_) if name)
    return names


def break_long_lines(code: str, max_length: int = 200) -> str:
    """Break lines longer than `max_length` after the last comma (or pipe)
    that still fits."""
    lines: list[str] = []
    for line in code.split("\n"):
        extra_lines: list[str] = []
        while len(line) > max_length:
            current = line[:max_length]
            position = current.rfind(",") + 1
            if position <= 0:
                position = current.rfind("|") + 1
            if position <= 0:
                break
            extra_lines.append(current[:position] + "\n")
            line = line[position:].strip()
        lines.append("".join(extra_lines) + line)
    return "\n".join(lines)


def indent(text: str, line_prefix: str = "", wrap: int = 80) -> str:
    """Word-wrap text and prefix every produced line."""
    padded = ""
    line = ""
    new_line = True
    for word in _PAD_SPACE.split(text):
        if not word:
            if not new_line:
                padded += line.rstrip() + "\n" + line_prefix.rstrip() + "\n"
                new_line = True
            continue
        if not new_line and len(line) + len(word) + 1 > wrap:
            padded += line.rstrip() + "\n"
            new_line = True
        if new_line:
            line = line_prefix + word
            new_line = False
        else:
            line += " " + word
    if new_line:
        return padded
    return padded + line.rstrip() + "\n"


_indent = indent


def normalize(text: str, preserve_paragraphs: bool = False) -> str:
    """Collapse whitespace. With `preserve_paragraphs`, paragraph breaks and
    list items are kept as double line breaks."""
    if preserve_paragraphs:
        text = _NORMALIZE_ESCAPE.sub("<br>", text)
        text = _NORMALIZE_LIST.sub("<br>- ", text)
        text = _NORMALIZE_SPACE.sub(" ", text)
        return _NORMALIZE_UNESCAPE.sub("\n\n", text)
    return _NORMALIZE_SPACE.sub(" ", text)


def _compare_declarations(a: Declaration, b: Declaration) -> int:
    kind_a = KIND_ORDER.index(a.kind)
    kind_b = KIND_ORDER.index(b.kind)
    if kind_a != kind_b:
        return kind_a - kind_b

    name_a = a.name.lower()
    name_b = b.name.lower()
    if name_a != name_b:
        return -1 if name_a < name_b else 1

    if isinstance(a, (ConstructorDeclaration, FunctionDeclaration)) and isinstance(
        b, (ConstructorDeclaration, FunctionDeclaration)
    ):
        return len(a.get_parameters()) - len(b.get_parameters())

    return 0


def _compare_types(a: str, b: str) -> int:
    if a == "any":
        return 1
    if a == "null":
        return -1 if b in ("any", "undefined") else 1
    if a == "undefined":
        return -1 if b == "any" else 1
    if b in ("any", "null", "undefined"):
        return -1

    if (a.startswith("(") and not b.startswith("(")) or (
        a.startswith("{") and not b.startswith("{")
    ):
        return -1
    if (b.startswith("(") and not a.startswith("(")) or (
        b.startswith("{") and not a.startswith("{")
    ):
        return 1

    if "<" in a and "<" not in b:
        return 1
    if "<" in b and "<" not in a:
        return -1

    if a.startswith('"') and not b.startswith('"'):
        return -1
    if b.startswith('"') and not a.startswith('"'):
        return 1

    if a != a.lower() and b == b.lower():
        return 1
    if a == a.lower() and b != b.lower():
        return -1

    lower_a, lower_b = a.lower(), b.lower()
    if lower_a < lower_b:
        return -1
    if lower_a > lower_b:
        return 1
    return 0


def sort_types(types: Iterable[str]) -> list[str]:
    """Order type strings for rendering a union."""
    return sorted(types, key=functools.cmp_to_key(_compare_types))


# Base declarations.


class Declaration(abc.ABC):
    """Base class of all TypeScript declarations."""

    _kind: ClassVar[DeclarationKind]

    def __init__(self, name: str, *types: str) -> None:
        self._name = simplify_name(name)
        self._children: list[Declaration] = []
        self._parent: Declaration | None = None

        self.default_value: DefaultValue = None
        self.deprecated: bool | str = False
        self.description = ""
        self.is_optional = False
        self.is_private = False
        self.is_static = False
        self.see: list[str] = []
        self.types: list[str] = list(types)
        self.unique_id = 0
        """Identifies a declaration and all of its clones."""

    @property
    def name(self) -> str:
        """Read-only simplified name."""
        return self._name

    @property
    def kind(self) -> DeclarationKind:
        return self._kind

    @property
    def parent(self) -> Declaration | None:
        return self._parent

    @property
    def full_name(self) -> str:
        parent = self.parent
        if parent is not None and parent.full_name:
            return parent.full_name + "." + self.name
        return self.name

    @property
    def root(self) -> Declaration | None:
        """Outermost named ancestor, used to shorten rendered type names."""
        root = self.parent
        while root is not None and root.parent is not None and root.parent.name:
            root = root.parent
        return root

    @property
    def child_of_space(self) -> bool:
        parent = self.parent
        return parent is not None and parent.kind in _SPACE_KINDS

    def kind_of(self, *kinds: DeclarationKind) -> bool:
        return self.kind in kinds

    # Tree manipulation.

    def _ancestors(self) -> Iterable[Declaration]:
        ancestor = self.parent
        while ancestor is not None:
            yield ancestor
            ancestor = ancestor.parent

    def add_children(self, *declarations: Declaration) -> None:
        """Attach declarations as children of this one.

        Raises:
            StructuralError: if a declaration is this one or one of its
                ancestors, or if it is still attached to another parent.
        """
        for declaration in declarations:
            if declaration is self or any(
                declaration is ancestor for ancestor in self._ancestors()
            ):
                raise StructuralError(
                    "Declaration is already part of this namespace. "
                    f"({declaration.name}<=>{self.name})"
                )
            if declaration.parent is not None:
                raise StructuralError(
                    "Declaration has already a parent. "
                    f"({declaration.parent.name}.{declaration.name})"
                )
            declaration._parent = self
            self._children.append(declaration)

    def get_children(self, name: str | None = None) -> list[Declaration]:
        """Return children sorted by kind and name, or the children with the
        given name in their attachment order."""
        if name is None:
            return sorted(
                self._children, key=functools.cmp_to_key(_compare_declarations)
            )
        return [child for child in self._children if child.name == name]

    def get_children_names(self, with_full_name: bool = False) -> list[str]:
        if with_full_name:
            return [child.full_name for child in self._children]
        return [child.name for child in self._children]

    @property
    def has_children(self) -> bool:
        return len(self._children) > 0

    def remove_child(self, name: str) -> list[Declaration]:
        """Detach and return all children with the given name."""
        removed = [child for child in self._children if child.name == name]
        self._children = [child for child in self._children if child.name != name]
        for child in removed:
            child._parent = None
        return removed

    def remove_children(self, *names: str) -> list[Declaration]:
        """Detach and return the named children, or all children when no name
        is given."""
        if names:
            removed: list[Declaration] = []
            for name in names:
                removed.extend(self.remove_child(name))
            return removed

        removed = self._children
        self._children = []
        for child in removed:
            child._parent = None
        return removed

    def get_referenced_types(self, include_children: bool = False) -> list[str]:
        referenced: list[str] = []
        for type_name in extract_type_names(*self._referencable_types()):
            if type_name not in referenced:
                referenced.append(type_name)
        if include_children:
            for child in self._children:
                for type_name in child.get_referenced_types(True):
                    if type_name not in referenced:
                        referenced.append(type_name)
        return referenced

    def _referencable_types(self) -> list[str]:
        return self.types

    # Cloning.

    def _copy_into(self, clone: Self) -> Self:
        clone.default_value = self.default_value
        clone.deprecated = self.deprecated
        clone.description = self.description
        clone.is_optional = self.is_optional
        clone.is_private = self.is_private
        clone.is_static = self.is_static
        clone.see.extend(self.see)
        clone.unique_id = self.unique_id
        clone.add_children(*(child.clone() for child in self._children))
        return clone

    def clone(self) -> Self:
        """Create a detached deep copy of this declaration."""
        return self._copy_into(type(self)(self.name, *self.types))

    # Rendering.

    @abc.abstractmethod
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        """Render this declaration as TypeScript source."""

    def __str__(self) -> str:
        return self.render()

    def render_children(
        self, indent: str = "", infix: str = "", without_doclet: bool = False
    ) -> str:
        return infix.join(
            child.render(indent, without_doclet) for child in self.get_children()
        )

    def render_default_value(self, indent: str = "") -> str:
        if self.default_value is None:
            return ""
        return indent + " * (Default value: " + str(self.default_value) + ")\n"

    def render_deprecated(self, indent: str = "") -> str:
        if not self.deprecated:
            return ""
        if isinstance(self.deprecated, str):
            return indent + " * @deprecated " + normalize(self.deprecated) + "\n"
        return indent + " * @deprecated\n"

    def render_description(self, indent: str = "", include_meta: bool = False) -> str:
        if not self.description:
            return ""

        rendered = _indent(normalize(self.description, True), indent + " * ")

        if include_meta:
            rendered += self.render_default_value(indent)
            rendered += self.render_deprecated(indent)
            if self.see:
                rendered += indent + " *\n" + self.render_see(indent)

        return indent + "/**\n" + rendered + indent + " */\n"

    def render_scope_prefix(self) -> str:
        parent = self.parent
        if parent is None:
            return ""

        if parent.kind == "class":
            prefix = "private " if self.is_private else ""
            if self.is_static:
                prefix += "static "
            return prefix

        if parent.kind == "namespace":
            if parent.name == "external:":
                return ""
            if self.kind_of(
                "function", "property", "static function", "static property"
            ):
                return "export "
            return "declare "

        if parent.kind == "global":
            if self.kind_of("module", "namespace"):
                return "declare "
            return "export "

        return ""

    def render_see(self, indent: str = "") -> str:
        if not self.see:
            return ""
        return "\n".join(indent + " * @see " + link for link in self.see) + "\n"

    def render_types(
        self,
        use_parentheses: bool = False,
        filter_undefined: bool = False,
        filter_functions: bool = False,
        separator: str = "|",
    ) -> str:
        types = list(self.types)

        root = self.root
        if root is not None and root.name:
            types = simplify_type(root.name, *types)

        if filter_undefined and self.is_optional:
            types = [type_ for type_ in types if type_ != "undefined"]

        if filter_functions:

            def _replace(match: re.Match[str]) -> str:
                if match.group(1) in ("function", "Function"):
                    return "() => void" + match.group(2)
                return match.group(0)

            types = [TYPE_NAME.sub(_replace, type_) for type_ in types]

        if not types:
            return ""

        rendered = separator.join(sort_types(types))
        if use_parentheses and len(types) > 1:
            return "(" + rendered + ")"
        return rendered

    def to_json(self) -> dict[str, Any]:
        """Debug representation of this declaration and its subtree."""
        json: dict[str, Any] = {"name": self.name, "kind": self.kind}
        if self.types:
            json["types"] = list(self.types)
        if self._children:
            json["children"] = [child.to_json() for child in self._children]
        return json


class ExtendedDeclaration(Declaration):
    """Declaration with parameters, a return description and fired events."""

    def __init__(self, name: str, *types: str) -> None:
        super().__init__(name, *types)
        self._parameters: list[ParameterDeclaration] = []
        self.events: list[str] = []
        self.types_description = ""

    @property
    def has_parameters(self) -> bool:
        return len(self._parameters) > 0

    def get_parameter(self, name: str) -> ParameterDeclaration | None:
        for parameter in self._parameters:
            if parameter.name == name:
                return parameter
        return None

    def get_parameters(self) -> list[ParameterDeclaration]:
        return list(self._parameters)

    def get_parameter_names(self) -> list[str]:
        return [parameter.name for parameter in self._parameters]

    def set_parameters(self, *parameters: ParameterDeclaration) -> None:
        """Attach parameters in order.

        Raises:
            StructuralError: if a parameter is still owned by a declaration, or
                if its name is already taken.
        """
        names = self.get_parameter_names()
        for parameter in parameters:
            if parameter.parameter_parent is not None:
                raise StructuralError(
                    "Parameter has already a parent. "
                    f"({parameter.parameter_parent.name}.{parameter.name})"
                )
            if parameter.name in names:
                raise StructuralError(
                    f"Parameter name is already in use. ({self.name}.{parameter.name})"
                )
            parameter.parameter_parent = self
            self._parameters.append(parameter)
            names.append(parameter.name)

    def remove_parameters(self) -> list[ParameterDeclaration]:
        removed = self._parameters
        self._parameters = []
        for parameter in removed:
            parameter.parameter_parent = None
        return removed

    @override
    def _referencable_types(self) -> list[str]:
        types: list[str] = []
        for parameter in self._parameters:
            types.extend(parameter.types)
        types.extend(self.types)
        return types

    @override
    def _copy_into(self, clone: Self) -> Self:
        super()._copy_into(clone)
        clone.events.extend(self.events)
        clone.types_description = self.types_description
        clone.set_parameters(*(parameter.clone() for parameter in self._parameters))
        return clone

    def render_events(self, indent: str = "") -> str:
        lines = ""
        for event in self.events:
            if "#event:" in event and self.parent is not None:
                name = event[event.index("#event:") + 7 :]
                lines += indent + " * @fires " + name + "\n"
        return lines

    def render_parameter_brackets(self) -> str:
        if not self._parameters:
            return "()"
        return "(" + ", ".join(str(parameter) for parameter in self._parameters) + ")"

    def render_extended_description(self, indent: str = "") -> str:
        separator = indent + " *\n"
        rendered = separator.join(
            parameter.render_parameter_description(indent)
            for parameter in self._parameters
            if parameter.description
        )

        for section in (
            self.render_return(indent),
            self.render_events(indent),
            self.render_deprecated(indent),
            self.render_see(indent),
        ):
            if section:
                rendered += (separator if rendered else "") + section

        if self.description:
            description = _indent(normalize(self.description, True), indent + " * ")
            rendered = description + (separator + rendered if rendered else "")

        if not rendered:
            return ""

        return indent + "/**\n" + rendered + indent + " */\n"

    def render_return(self, indent: str = "") -> str:
        if not self.types_description:
            return ""
        return (
            indent
            + " * @return "
            + _indent(
                normalize(self.types_description, True), indent + " *         "
            )[len(indent) + 11 :]
        )

    @override
    def to_json(self) -> dict[str, Any]:
        json = super().to_json()
        if self._parameters:
            json["parameters"] = [parameter.to_json() for parameter in self._parameters]
        return json


# Concrete declarations.


class ClassDeclaration(ExtendedDeclaration):
    """`class X extends A implements B {...}`"""

    _kind = "class"

    def __init__(self, name: str, *types: str) -> None:
        super().__init__(name, *types)
        self.implements: list[str] = []

    @override
    def _copy_into(self, clone: Self) -> Self:
        super()._copy_into(clone)
        clone.implements.extend(self.implements)
        return clone

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        # Classes documented with parameters get their constructor from them.
        if self.has_parameters and not self.get_children("constructor"):
            constructor = ConstructorDeclaration()
            constructor.description = self.description
            constructor.set_parameters(
                *(parameter.clone() for parameter in self._parameters)
            )
            self.add_children(constructor)

        description = "" if without_doclet else self.render_description(indent, True)

        header = "class " + self.name
        types = self.render_types(separator=", ")
        if types:
            header += " extends " + types
        if self.implements:
            header += " implements " + ", ".join(self.implements)
        header = self.render_scope_prefix() + header

        if self.has_children:
            body = (
                "{\n"
                + self.render_children(indent + "    ", "\n", without_doclet)
                + indent
                + "}"
            )
        else:
            body = "{}"

        return description + break_long_lines(indent + header + " " + body + "\n")


class ConstructorDeclaration(ExtendedDeclaration):
    _kind = "constructor"

    def __init__(self) -> None:
        super().__init__("constructor")

    @override
    def clone(self) -> Self:
        return self._copy_into(type(self)())

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_extended_description(indent)
        return (
            description
            + indent
            + self.render_scope_prefix()
            + "constructor"
            + self.render_parameter_brackets()
            + ";\n"
        )


class EventDeclaration(Declaration):
    """Event documentation. Events have no TypeScript syntax of their own and
    render as doc-comment lines only."""

    _kind = "event"

    @override
    def clone(self) -> Self:
        clone = type(self)(self.name, *self.types)
        clone.description = self.description
        return clone

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        if without_doclet:
            return ""
        rendered = ""
        if self.description:
            rendered = _indent(normalize(self.description, True), indent + " * ")
            rendered += indent + " *\n"
        return (
            rendered
            + indent
            + " * @event "
            + self.full_name
            + "\n"
            + indent
            + " * @type {"
            + self.render_types()
            + "}\n"
        )


class ExternalModuleDeclaration(Declaration):
    """`module "path" {...}`, used for augmenting another module."""

    _kind = "module"

    def __init__(self, name: str, path: str, *types: str) -> None:
        super().__init__(name, *types)
        self.path = path

    @override
    def clone(self) -> Self:
        return self._copy_into(type(self)(self.name, self.path, *self.types))

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_description(indent)
        if self.has_children:
            body = (
                "{\n"
                + self.render_children(indent + "    ", "\n", without_doclet)
                + indent
                + "}"
            )
        else:
            body = "{}"
        return (
            description
            + indent
            + self.render_scope_prefix()
            + 'module "'
            + self.path
            + '" '
            + body
            + "\n"
        )


class FunctionDeclaration(ExtendedDeclaration):
    @property
    @override
    def kind(self) -> DeclarationKind:
        return "static function" if self.is_static else "function"

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_extended_description(indent)
        signature = (
            self.name
            + self.render_parameter_brackets()
            + ": "
            + (self.render_types(True, True) or "void")
        )
        if self.child_of_space:
            signature = self.render_scope_prefix() + "function " + signature
        else:
            signature = (self.render_scope_prefix() + signature).strip()
        return description + break_long_lines(indent + signature + ";\n")


class FunctionTypeDeclaration(ExtendedDeclaration):
    """`type X = (params) => returns;`"""

    _kind = "type"

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_extended_description(indent)
        return (
            description
            + indent
            + self.render_scope_prefix()
            + "type "
            + self.name
            + " = "
            + self.render_parameter_brackets()
            + " => "
            + (self.render_types(False, True) or "void")
            + ";\n"
        )


class InterfaceDeclaration(Declaration):
    _kind = "interface"

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_description(indent, True)

        if self.child_of_space:
            header = "interface " + self.name
            types = self.render_types(separator=", ")
            if types:
                header += " extends " + types
            header += " "
        else:
            header = self.name + ": "

        if self.has_children:
            body = (
                "{\n"
                + self.render_children(indent + "    ", "\n", without_doclet)
                + indent
                + "}"
            )
        else:
            body = "{}"

        return description + break_long_lines(
            indent + self.render_scope_prefix() + header + body + "\n"
        )


class ModuleDeclaration(Declaration):
    """Root of one output file."""

    _kind = "global"

    def __init__(self, name: str = "", *types: str) -> None:
        super().__init__(name, *types)
        self.copyright = ""
        self.exports: list[str] = []
        self.imports: list[str] = []

    @override
    def _copy_into(self, clone: Self) -> Self:
        super()._copy_into(clone)
        clone.copyright = self.copyright
        clone.exports.extend(self.exports)
        clone.imports.extend(self.imports)
        return clone

    def render_copyright(self) -> str:
        if not self.copyright:
            return ""
        return (
            "/*!*\n *\n"
            + _indent(normalize(self.copyright, True), " *  ")
            + " *\n *!*/\n"
        )

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        rendered = self.render_copyright()

        if not without_doclet:
            description = self.render_description(indent)
            if description:
                rendered += description.replace("/**", "/*", 1) + "\n"

        if self.imports:
            rendered += "\n".join(self.imports) + "\n"

        if self.has_children:
            rendered += self.render_children(indent, "\n", without_doclet)

        if self.exports:
            rendered += "\n".join(self.exports) + "\n"

        return rendered


class NamespaceDeclaration(Declaration):
    """`namespace X {...}`, or `global {...}` for the `external:` namespace."""

    _kind = "namespace"

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_description(indent)

        if self.name == "external:":
            header = "global"
        else:
            header = "namespace " + self.name.replace(":", "", 1)

        if self.has_children:
            body = (
                "{\n"
                + self.render_children(indent + "    ", "\n", without_doclet)
                + indent
                + "}"
            )
        else:
            body = "{}"

        return (
            description
            + indent
            + self.render_scope_prefix()
            + header
            + " "
            + body
            + "\n"
        )


class ParameterDeclaration(Declaration):
    _kind = "parameter"

    def __init__(self, name: str, *types: str) -> None:
        super().__init__(name, *types)
        self.is_variable = False
        self.parameter_parent: ExtendedDeclaration | None = None

    @property
    @override
    def parent(self) -> Declaration | None:
        # Parameters live beside their owner, not inside it.
        if self.parameter_parent is None:
            return None
        return self.parameter_parent.parent

    @override
    def _copy_into(self, clone: Self) -> Self:
        super()._copy_into(clone)
        clone.is_variable = self.is_variable
        return clone

    def render_parameter_description(self, indent: str = "") -> str:
        if not self.description:
            return ""
        description = self.description
        if self.default_value is not None:
            description += " (Default value: " + str(self.default_value) + ")"
        return indent + " * @param " + self.name + "\n" + _indent(
            normalize(description, True), indent + " *        "
        )

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        rendered = self.name
        if self.is_optional:
            rendered += "?"
        types = self.render_types(True, True)
        if self.is_variable:
            rendered = "..." + rendered
            if "Array<" not in types:
                types = "Array<" + types + ">"
        return rendered + ": " + types

    @override
    def __str__(self) -> str:
        return self.render()


class PropertyDeclaration(Declaration):
    def __init__(self, name: str, *types: str) -> None:
        super().__init__(name, *types)
        self.declare_name = ""
        self.is_read_only = False

    @property
    @override
    def kind(self) -> DeclarationKind:
        return "static property" if self.is_static else "property"

    @property
    def is_indexer(self) -> bool:
        return self.name.startswith("[")

    @override
    def _copy_into(self, clone: Self) -> Self:
        super()._copy_into(clone)
        clone.declare_name = self.declare_name
        clone.is_read_only = self.is_read_only
        return clone

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_description(indent, True)

        is_indexer = self.is_indexer
        member = self.name.replace(":", ": ", 1)
        root = self.root

        if member.startswith("[") and " " in member and root is not None and root.name:
            position = member.rfind(" ") + 1
            member = member[:position] + simplify_type(root.name, member[position:])[0]
            is_indexer = True
        elif _NON_WORD.search(member):
            member = '"' + member + '"'
            is_indexer = False

        if not is_indexer:
            parent = self.parent
            if self.child_of_space:
                member = ("const " if self.is_read_only else "let ") + member
            elif self.is_read_only and (parent is None or parent.kind != "interface"):
                member = "readonly " + member
            if self.is_optional:
                if not self.child_of_space:
                    member += "?"
                elif "undefined" not in self.types:
                    self.types.append("undefined")

        if self.has_children:
            member += (
                ": {\n"
                + self.render_children(indent + "    ", "\n", without_doclet)
                + indent
                + "};"
            )
        elif self.types:
            member += ": " + self.render_types(False, is_indexer) + ";"
        else:
            member += ": any;"

        return description + break_long_lines(
            indent + self.render_scope_prefix() + member + "\n"
        )


class TypeDeclaration(Declaration):
    """Type alias, `type X = A|B;` or `type X = {...};`."""

    _kind = "type"

    @override
    def render(self, indent: str = "", without_doclet: bool = False) -> str:
        description = "" if without_doclet else self.render_description(indent, True)

        if self.has_children:
            body = (
                "{\n"
                + self.render_children(indent + "    ", "\n", without_doclet)
                + indent
                + "}"
            )
        else:
            body = self.render_types() or "any"

        return (
            description
            + indent
            + self.render_scope_prefix()
            + "type "
            + self.name
            + " = "
            + body
            + ";\n"
        )
