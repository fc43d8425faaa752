"""Split the namespace documentation tree into one tree per source module."""

from __future__ import annotations

from typing import Any, Dict

from ._config import Config
from ._declarations import namespaces
from ._session import GenerationSession
from ._utilities import base, is_deep_equal

NamespaceNode = Dict[str, Any]

UNIQUE_ID_KEY = "uniqueID"
"""Doclet key holding the identity of a documented entity."""


def is_equal_doclet(a: dict[str, Any], b: dict[str, Any]) -> bool:
    """Check whether two doclets describe the same entity.

    Placeholder doclets, which only carry a name, are equal to any doclet of
    the same name."""
    if ".".join(namespaces(a.get("name", ""))) != ".".join(
        namespaces(b.get("name", ""))
    ):
        return False
    a = {key: value for key, value in a.items() if key != UNIQUE_ID_KEY}
    b = {key: value for key, value in b.items() if key != UNIQUE_ID_KEY}
    return len(a) == 1 or len(b) == 1 or is_deep_equal(a, b)


class NamespaceParser:
    def __init__(self, config: Config, session: GenerationSession) -> None:
        self.modules: dict[str, NamespaceNode] = {}
        self._config = config
        self._session = session

    def find_node(
        self, root: NamespaceNode, name: str, overload: bool = False
    ) -> NamespaceNode:
        """Find the node with the given full name, creating missing nodes on
        the way. With `overload`, a new sibling is always created for the last
        segment."""
        node = root
        space_names = namespaces(name, True)
        index_end = len(space_names) - 1

        for index, space_name in enumerate(space_names):
            children: list[NamespaceNode] = node.setdefault("children", [])

            found = None
            if not (overload and index == index_end):
                found = next(
                    (
                        child
                        for child in children
                        if child["doclet"].get("name") == space_name
                    ),
                    None,
                )

            if found is None:
                found = {"doclet": {"name": space_name}}
                parent_name: str = node["doclet"].get("name", "")
                if space_name.endswith(":"):
                    found["doclet"]["kind"] = "namespace"
                elif parent_name.endswith(":"):
                    found["doclet"]["kind"] = parent_name[:-1]
                elif index != index_end:
                    reference = self.find_node_in_main_module(space_name)
                    # Entities of the main module are augmented through
                    # interfaces, whatever their kind.
                    if reference is not None and reference["doclet"].get("kind"):
                        found["doclet"]["kind"] = "interface"
                children.append(found)

            node = found

        return node

    def find_node_in_main_module(self, name: str) -> NamespaceNode | None:
        """Find a documented (not placeholder) node of the main module."""
        main_module = self.modules.get(self._config.main_module)
        node = main_module
        space_names = namespaces(name, True)

        for space_name in space_names:
            if node is None or not node.get("children"):
                return None
            node = next(
                (
                    child
                    for child in node["children"]
                    if child["doclet"].get("name") == space_name
                ),
                None,
            )
            if node is None or node is main_module or len(node["doclet"]) <= 1:
                return None

        return node if space_names else None

    def prepare_module(self, path: str) -> NamespaceNode:
        if path not in self.modules:
            self.modules[path] = {
                "children": [],
                "doclet": {"description": "", "kind": "global", "name": ""},
            }
        return self.modules[path]

    def transfer_nodes(self, source: NamespaceNode) -> None:
        """Copy a node and its descendants into the trees of all modules that
        document it."""
        doclet = source.get("doclet")
        meta = source.get("meta")

        if doclet and meta:
            doclet.setdefault(UNIQUE_ID_KEY, self._session.next_unique_id())
            name = doclet.get("name") or ""

            for file in meta.get("files") or []:
                module = self.prepare_module(base(file["path"]))
                target = self.find_node(module, name)
                if not is_equal_doclet(target["doclet"], doclet):
                    target = self.find_node(module, name, True)
                target["doclet"].update(doclet)

        for child in source.get("children") or []:
            self.transfer_nodes(child)


def parse_namespace(
    tree: NamespaceNode,
    config: Config | None = None,
    session: GenerationSession | None = None,
) -> dict[str, NamespaceNode]:
    """Split a namespace tree into module trees keyed by module path."""
    parser = NamespaceParser(config or Config(), session or GenerationSession())
    parser.transfer_nodes(tree)
    return parser.modules
