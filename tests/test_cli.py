"""Tests for the command-line entrypoint."""

import dataclasses
import json
from pathlib import Path

import pytest

from tsdgen._cli import main
from utils import write_trees


def _write_config(tmp_path: Path, **overrides) -> Path:
    config = dataclasses.replace(write_trees(tmp_path), **overrides)
    path = tmp_path / "tsgconfig.json"
    path.write_text(
        json.dumps(
            {
                "treeOptionsJsonFile": config.tree_options_json_file,
                "treeNamespaceJsonFile": config.tree_namespace_json_file,
                "outputDir": config.output_dir,
            }
        ),
        encoding="utf-8",
    )
    return path


def test_main_writes_declarations(tmp_path: Path) -> None:
    main(config=_write_config(tmp_path))

    assert (tmp_path / "out" / "code" / "highcharts.d.ts").is_file()


def test_output_dir_and_links_can_be_overridden(tmp_path: Path) -> None:
    main(
        config=_write_config(tmp_path),
        output_dir=tmp_path / "other",
        without_links=True,
    )

    code = (tmp_path / "other" / "code" / "highcharts.d.ts").read_text(
        encoding="utf-8"
    )
    assert "@see" not in code
    assert not (tmp_path / "out").exists()


def test_failures_exit_with_status(tmp_path: Path) -> None:
    config = _write_config(
        tmp_path, tree_options_json_file=str(tmp_path / "missing.json")
    )

    with pytest.raises(SystemExit) as excinfo:
        main(config=config)

    assert excinfo.value.code == 1
