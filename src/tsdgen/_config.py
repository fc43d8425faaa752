"""Run configuration and the mapping of documented types to TypeScript."""

from __future__ import annotations

import dataclasses
import json
import re
from pathlib import Path
from typing import Any

from ._declarations import TYPE_NAME, TYPE_SEPARATOR

_MAP_TYPE_MINIARRAY = re.compile(
    r'Array<(["\w\.]+(?:<[^,]+>)?,\s*(?:["\w\.\,]+|\([^,]+\)|\[[^,]+\]|<[^,]+>)+)>',
    re.MULTILINE,
)
_SEE_LINK_NAME_LAST = re.compile(r"\.(\w+)$", re.MULTILINE)

# Keys of `tsgconfig.json` and the fields they populate.
_CONFIG_KEYS = {
    "mainModule": "main_module",
    "products": "products",
    "seeBaseUrl": "see_base_url",
    "withoutLinks": "without_links",
    "typeMapping": "type_mapping",
    "optionTypeMapping": "option_type_mapping",
    "treeNamespaceJsonFile": "tree_namespace_json_file",
    "treeOptionsJsonFile": "tree_options_json_file",
    "staticDir": "static_dir",
    "outputDir": "output_dir",
}


def _default_type_mapping() -> dict[str, str]:
    return {
        "Array": "Array<any>",
        "Boolean": "boolean",
        "Number": "number",
        "String": "string",
        "function": "Function",
    }


@dataclasses.dataclass(frozen=True)
class Config:
    """Configuration of one generation run."""

    main_module: str = "code/highcharts"
    """Module key of the main namespace. Other module keys are resolved
    relative to its directory."""
    products: dict[str, str] = dataclasses.field(
        default_factory=lambda: {"highcharts": "code/highcharts"}
    )
    """Product name => module key of the product bundle."""
    see_base_url: str = "https://api.highcharts.com/"
    without_links: bool = False
    """Skip `@see` links to the online documentation."""
    type_mapping: dict[str, str] = dataclasses.field(
        default_factory=_default_type_mapping
    )
    option_type_mapping: dict[str, str] = dataclasses.field(default_factory=dict)
    """Option full name => type, overriding the documented type."""
    tree_namespace_json_file: str = "tree-namespace.json"
    tree_options_json_file: str = "tree.json"
    static_dir: str | None = None
    """Directory with hand-written declarations, copied next to the main
    module."""
    output_dir: str = "."

    def __post_init__(self) -> None:
        # Longer keys first.
        object.__setattr__(
            self,
            "type_mapping",
            {
                key: self.type_mapping[key]
                for key in sorted(self.type_mapping, key=len, reverse=True)
            },
        )

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load a `tsgconfig.json` file. Without a path, or when the file does
        not exist, the defaults are returned."""
        if path is None or not Path(path).exists():
            return cls()

        raw: dict[str, Any] = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            **{
                field: raw[key]
                for key, field in _CONFIG_KEYS.items()
                if raw.get(key) is not None
            }
        )

    def map_option_type(self, option: str) -> str | None:
        return self.option_type_mapping.get(option)

    def map_type(self, type_: str, without_config: bool = False) -> str:
        """Map a documented type expression to TypeScript."""
        type_ = type_.replace("()", "")
        type_ = re.sub(r"\s+", " ", type_)
        type_ = type_.replace(".<", "<").replace("*", "any")
        type_ = _MAP_TYPE_MINIARRAY.sub(r"[\1]", type_)

        if TYPE_SEPARATOR.search(type_):

            def _map(match: re.Match[str]) -> str:
                name, suffix = match.group(1), match.group(2)
                if name.endswith("."):
                    name = name[:-1]
                return self.map_type(name, suffix == "<") + suffix

            return TYPE_NAME.sub(_map, type_)

        if not without_config and self.type_mapping.get(type_):
            type_ = self.type_mapping[type_]
        if type_.startswith(("global.", "window.")):
            type_ = type_[7:]
        if type_.startswith("typeof_"):
            type_ = "typeof " + type_[7:]
        return type_

    @staticmethod
    def map_value(value: Any) -> str:
        """Map a documented value to a TypeScript literal type."""
        if value is None:
            return "undefined"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return '"' + value + '"'
        if isinstance(value, (dict, list)):
            return "Object"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def see_link(self, name: str, kind: str, product: str | None = None) -> str:
        """URL of the online documentation of a doclet."""
        name = name.replace(":.", "-", 1)
        product = product or "highcharts"

        if kind == "global":
            return self.see_base_url + "class-reference/"
        if kind in ("class", "namespace"):
            return self.see_base_url + "class-reference/" + name
        if kind in ("constructor", "function"):
            return self.see_base_url + "class-reference/" + _SEE_LINK_NAME_LAST.sub(
                r"#\1", name
            )
        if kind == "member":
            return self.see_base_url + "class-reference/" + _SEE_LINK_NAME_LAST.sub(
                r"#.\1", name
            )
        if kind in ("interface", "option", "typedef"):
            return self.see_base_url + product + "/" + name
        return ""
