"""Completion of the options tree: inherited children, names, products and
types are resolved before declarations are generated.

Option nodes are plain dictionaries with `children`, `doclet` and `meta`
entries, as found in the documentation dump."""

from __future__ import annotations

import copy
import json
import re
from pathlib import Path
from typing import Any, Dict, Sequence

from ._config import Config
from ._declarations import namespaces
from ._errors import MissingReferenceError

OptionNode = Dict[str, Any]

_EXTENDS_SEPARATOR = re.compile(r"[\s,]+")


def _javascript_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def strip_doclets(node: Any) -> Any:
    """Copy of a tree without `doclet` entries, for debug dumps."""
    if isinstance(node, dict):
        return {
            key: strip_doclets(value) for key, value in node.items() if key != "doclet"
        }
    if isinstance(node, list):
        return [strip_doclets(item) for item in node]
    return node


class OptionsParser:
    def __init__(
        self,
        options: dict[str, OptionNode],
        config: Config,
        debug_path: Path | None = None,
    ) -> None:
        self.options = options
        self._config = config
        self._debug_path = debug_path

    def parse(self) -> OptionNode:
        """Complete all top-level nodes and return the root node."""
        for key in list(self.options):
            node = self.options[key]
            if not isinstance(node, dict) or not node.get("doclet"):
                del self.options[key]
                continue
            node.setdefault("children", {})
            node.setdefault("meta", {})
            self.complete_node_names(node, key)
            self.complete_node_extensions(node)
            self.complete_node_names(node, key)
            self.complete_node_products(node, list(self._config.products))
            self.complete_node_types(node)

        return {
            "children": self.options,
            "doclet": {},
            "meta": {"fullname": "", "name": ""},
        }

    def clone_node_into(self, source: OptionNode, target: OptionNode) -> None:
        """Copy missing doclet and meta entries and all children (except the
        excluded ones) from one node into another."""
        source_doclet = source["doclet"]
        source_meta = source.get("meta", {})
        target_doclet = target["doclet"]
        target_meta = target.setdefault("meta", {})
        target_exclude = target_doclet.get("exclude") or []
        target_name = target_meta.get("fullname") or target_meta.get("name") or ""
        target_children = target.setdefault("children", {})

        for key, value in source_doclet.items():
            if key not in target_doclet:
                target_doclet[key] = copy.deepcopy(value)
        for key, value in source_meta.items():
            if key not in target_meta:
                target_meta[key] = copy.deepcopy(value)

        for key, child in source.get("children", {}).items():
            if key in target_exclude:
                continue
            if key not in target_children:
                target_children[key] = {
                    "children": {},
                    "doclet": {},
                    "meta": {
                        "filename": source_meta.get("filename"),
                        "fullname": target_name and target_name + "." + key,
                        "line": source_meta.get("line"),
                        "lineEnd": source_meta.get("lineEnd"),
                        "name": key,
                    },
                }
            self.clone_node_into(child, target_children[key])

    def complete_node_extensions(self, node: OptionNode) -> None:
        """Resolve the `extends` list of a node and its descendants.

        Raises:
            MissingReferenceError: if an extended node does not exist.
        """
        extends = node["doclet"].pop("extends", "")
        if extends:
            # `series` is applied last so specific parents win.
            names = sorted(
                (name for name in _EXTENDS_SEPARATOR.split(extends) if name),
                key=lambda name: name == "series",
            )
            names = [
                "plotOptions.series" if name == "series" else name for name in names
            ]
            node["doclet"].setdefault("_extends", names)
            for name in names:
                extended = self.find_node(name)
                if extended is None:
                    self._dump_tree()
                    meta = node.get("meta", {})
                    raise MissingReferenceError(
                        f"Extends: Node {name} not found! "
                        f"Referenced by {meta.get('fullname') or meta.get('name')}."
                    )
                self.clone_node_into(extended, node)

        for child in list(node.get("children", {}).values()):
            self.complete_node_extensions(child)

    def complete_node_names(self, node: OptionNode, name: str) -> None:
        meta = node.setdefault("meta", {})
        meta["fullname"] = name
        meta["name"] = name[name.rfind(".") + 1 :]
        for child_name, child in node.get("children", {}).items():
            self.complete_node_names(child, name + "." + child_name)

    def complete_node_products(
        self, node: OptionNode, parent_products: Sequence[str]
    ) -> None:
        """Inherit the product list of the parent where a node has none."""
        doclet = node["doclet"]
        if doclet.get("products"):
            parent_products = doclet["products"]
        else:
            doclet["products"] = list(parent_products)
        for child in node.get("children", {}).values():
            self.complete_node_products(child, parent_products)

    def complete_node_types(self, node: OptionNode) -> None:
        """Infer `type.names` of a node and its descendants.

        The type comes from the option type mapping, then the documented type,
        then the runtime type of the sample default, then a guess from the
        documented default value."""
        doclet = node["doclet"]
        meta = node.get("meta", {})
        mapped = meta.get("fullname") and self._config.map_option_type(
            meta["fullname"]
        )

        if mapped:
            doclet["type"] = {"names": [mapped]}
        elif (doclet.get("type") or {}).get("names"):
            pass
        elif meta.get("default"):
            doclet["type"] = {"names": [_javascript_type(meta["default"])]}
        else:
            doclet["type"] = {"names": [self._guess_type(doclet)]}

        for child in node.get("children", {}).values():
            self.complete_node_types(child)

    @staticmethod
    def _guess_type(doclet: dict[str, Any]) -> str:
        default = (doclet.get("default") or {}).get("value") or doclet.get(
            "defaultvalue"
        )
        if not default and doclet.get("defaultByProduct"):
            default = next(iter(doclet["defaultByProduct"].values()))
        if not default:
            return "object"
        if isinstance(default, bool) or default in ("false", "true"):
            return "boolean"
        if default in ("0", "1"):
            return "number"
        if default in ("null", "undefined"):
            return "*"
        # Any other default, numeric or not, is typed as a number.
        return "number"

    def find_node(self, name: str) -> OptionNode | None:
        """Find a node by its dotted name, resolving the extensions of every
        node on the way."""
        if not name:
            raise ValueError("No node name has been provided.")
        node: OptionNode = {"children": self.options, "doclet": {}, "meta": {}}
        for space_name in namespaces(name):
            child = node.get("children", {}).get(space_name)
            if child is None:
                return None
            node = child
            if node["doclet"].get("extends"):
                self.complete_node_extensions(node)
        return node

    def _dump_tree(self) -> None:
        if self._debug_path is None:
            return
        self._debug_path.parent.mkdir(parents=True, exist_ok=True)
        self._debug_path.write_text(
            json.dumps(strip_doclets(self.options), indent="\t"), encoding="utf-8"
        )


def parse_options(
    options: dict[str, OptionNode],
    config: Config | None = None,
    debug_path: Path | None = None,
) -> OptionNode:
    """Complete an options tree in place and return its root node.

    Args:
        options: Top-level option nodes by name.
        config: Run configuration, for products and option type overrides.
        debug_path: Where to dump the tree when an extension cannot be
            resolved.
    """
    return OptionsParser(options, config or Config(), debug_path).parse()
