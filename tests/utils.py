"""Builders for documentation trees used across the tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from hypothesis import strategies as st

from tsdgen import Config

identifiers = st.from_regex(r"[A-Za-z][A-Za-z0-9]{0,11}", fullmatch=True)


def option(children: dict[str, Any] | None = None, **doclet: Any) -> dict[str, Any]:
    """Option node as found in `tree.json`."""
    node: dict[str, Any] = {"doclet": doclet}
    if children is not None:
        node["children"] = children
    return node


def typed_option(description: str, *type_names: str, **doclet: Any) -> dict[str, Any]:
    return option(description=description, type={"names": list(type_names)}, **doclet)


def sample_options() -> dict[str, Any]:
    """Small options tree with one series type."""
    align = ('"left"', '"center"', '"right"')
    return {
        "chart": option(
            {
                "align": typed_option("Alignment of the chart.", *align),
                "height": typed_option("Height of the chart.", "number", "null"),
                "secret": typed_option("Internal.", "string", access="private"),
            },
            description="General options for the chart.",
        ),
        "title": option(
            {"align": typed_option("Alignment of the title.", *align)},
            description="The chart title.",
        ),
        "plotOptions": option(
            {
                "series": option(
                    {"visible": typed_option("Whether to show.", "boolean")},
                    description="General options for all series.",
                ),
                "line": option(
                    {"step": typed_option("Whether to draw steps.", "boolean")},
                    description="Line series options.",
                    extends="series",
                ),
            },
            description="Options for all series types.",
        ),
        "series": option(
            {
                "type": typed_option("The type of the series.", "string"),
                "line": option(
                    {"data": typed_option("The data points.", "Array<number>")},
                    description="A line series.",
                    extends="plotOptions.line",
                    exclude=["step", "marker"],
                ),
            },
            description="Series options.",
            type={"names": ["Array<*>"]},
        ),
    }


def namespace_node(
    name: str,
    kind: str,
    *children: dict[str, Any],
    path: str | None = None,
    **doclet: Any,
) -> dict[str, Any]:
    """Namespace node. With a path, the node carries file meta as found in
    `tree-namespace.json`; without, it is already assigned to a module."""
    node: dict[str, Any] = {"doclet": {"kind": kind, "name": name, **doclet}}
    if path is not None:
        node["meta"] = {"files": [{"path": path}]}
    if children:
        node["children"] = list(children)
    return node


def module_tree(*children: dict[str, Any]) -> dict[str, Any]:
    return {
        "children": list(children),
        "doclet": {"description": "", "kind": "global", "name": ""},
    }


def main_module_tree() -> dict[str, Any]:
    """Module tree of the main module with the common declaration kinds."""
    return module_tree(
        namespace_node(
            "Highcharts",
            "namespace",
            namespace_node(
                "Highcharts.Chart",
                "class",
                namespace_node(
                    "Highcharts.Chart",
                    "constructor",
                    description="Creates a chart.",
                    parameters={
                        "renderTo": {
                            "types": ["string", "Highcharts.HTMLDOMElement"],
                            "isOptional": True,
                        },
                        "options": {"types": ["Highcharts.Options"]},
                    },
                ),
                namespace_node(
                    "Highcharts.Chart.index",
                    "member",
                    types=["number"],
                    isReadOnly=True,
                ),
                description="The chart class.",
            ),
            namespace_node(
                "Highcharts.chart",
                "function",
                parameters={
                    "renderTo": {
                        "types": ["string", "Highcharts.HTMLDOMElement"],
                        "isOptional": True,
                    },
                    "options": {"types": ["Highcharts.Options"]},
                },
                **{"return": {"types": ["Highcharts.Chart"]}},
            ),
            namespace_node(
                "Highcharts.ColorString",
                "typedef",
                description="A color in CSS notation.",
                types=["string"],
            ),
            namespace_node(
                "Highcharts.FormatterCallbackFunction",
                "typedef",
                parameters={"value": {"types": ["number"]}},
                **{"return": {"types": ["string"]}},
            ),
            description="The Highcharts object.",
        ),
        namespace_node("external:SVGElement", "external"),
    )


MAIN_FILE = "code/highcharts.src.js"
EXPORTING_FILE = "code/modules/exporting.src.js"


def namespace_tree() -> dict[str, Any]:
    """Namespace tree documented across the main and an exporting module."""
    highcharts = namespace_node(
        "Highcharts",
        "namespace",
        description="The Highcharts object.",
        path=MAIN_FILE,
    )
    highcharts["meta"]["files"].append({"path": EXPORTING_FILE})
    return {
        "children": [
            highcharts,
            namespace_node(
                "Highcharts.Chart",
                "class",
                description="The chart class.",
                path=MAIN_FILE,
            ),
            namespace_node(
                "Highcharts.Chart.exportChart",
                "function",
                description="Exports the chart.",
                path=EXPORTING_FILE,
            ),
        ]
    }


def write_trees(directory: Path, options: dict[str, Any] | None = None) -> Config:
    """Write both documentation trees and return a configuration reading them
    and writing into `directory / "out"`."""
    options_file = directory / "tree.json"
    namespace_file = directory / "tree-namespace.json"
    options_file.write_text(json.dumps(options or sample_options()), encoding="utf-8")
    namespace_file.write_text(json.dumps(namespace_tree()), encoding="utf-8")
    return Config(
        tree_options_json_file=str(options_file),
        tree_namespace_json_file=str(namespace_file),
        output_dir=str(directory / "out"),
    )
