"""Tests for the run configuration and type mapping."""

import dataclasses
import json
from pathlib import Path

import pytest

from tsdgen import Config


@pytest.mark.parametrize(
    ("documented", "expected"),
    [
        ("*", "any"),
        ("Array", "Array<any>"),
        ("Array.<string>", "Array<string>"),
        ("Array<number, number>", "[number, number]"),
        ("Highcharts.Dictionary.<number>", "Highcharts.Dictionary<number>"),
        ("function", "Function"),
        ("global.Element", "Element"),
        ("typeof_Highcharts", "typeof Highcharts"),
        ("Highcharts.SVGElement", "Highcharts.SVGElement"),
    ],
)
def test_map_type(documented: str, expected: str) -> None:
    assert Config().map_type(documented) == expected


def test_map_type_without_config() -> None:
    assert Config().map_type("function", True) == "function"


def test_map_value() -> None:
    assert Config.map_value(None) == "undefined"
    assert Config.map_value(True) == "true"
    assert Config.map_value("left") == '"left"'
    assert Config.map_value({"a": 1}) == "Object"
    assert Config.map_value(2.0) == "2"
    assert Config.map_value(1.5) == "1.5"


def test_see_links() -> None:
    config = Config()

    assert config.see_link("Highcharts.Chart", "class") == (
        "https://api.highcharts.com/class-reference/Highcharts.Chart"
    )
    assert config.see_link("Highcharts.Chart.redraw", "function") == (
        "https://api.highcharts.com/class-reference/Highcharts.Chart#redraw"
    )
    assert config.see_link("Highcharts.Chart.index", "member") == (
        "https://api.highcharts.com/class-reference/Highcharts.Chart#.index"
    )
    assert config.see_link("chart.align", "option", "highstock") == (
        "https://api.highcharts.com/highstock/chart.align"
    )
    assert config.see_link("Highcharts.Chart", "unknown") == ""


def test_longer_type_mappings_apply_first() -> None:
    config = Config(type_mapping={"a": "x", "abc": "y"})

    assert list(config.type_mapping) == ["abc", "a"]


def test_load(tmp_path: Path) -> None:
    path = tmp_path / "tsgconfig.json"
    path.write_text(
        json.dumps(
            {
                "mainModule": "code/main",
                "withoutLinks": True,
                "typeMapping": {"Number": "number"},
                "staticDir": None,
                "unknown": 1,
            }
        ),
        encoding="utf-8",
    )

    config = Config.load(path)

    assert config.main_module == "code/main"
    assert config.without_links
    assert config.type_mapping == {"Number": "number"}
    assert config.static_dir is None
    assert config.output_dir == "."


def test_load_without_file(tmp_path: Path) -> None:
    assert Config.load(tmp_path / "missing.json") == Config()
    assert Config.load() == Config()


def test_config_is_frozen() -> None:
    config = Config()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.without_links = True  # type: ignore
