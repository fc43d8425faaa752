"""Command-line entrypoint for generating declaration files."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path

import rich
import tyro

from ._config import Config
from ._errors import DeclarationError
from ._pipeline import generate_declarations


def main(
    config: Path = Path("tsgconfig.json"),
    output_dir: Path | None = None,
    without_links: bool = False,
) -> None:
    """Generate TypeScript declarations from documentation trees.

    Args:
        config: JSON configuration file. Defaults are used if it does not exist.
        output_dir: Overrides the output directory of the configuration.
        without_links: Omit `@see` links in the generated doclets.
    """
    cfg = Config.load(config) if config.exists() else Config()
    if output_dir is not None:
        cfg = dataclasses.replace(cfg, output_dir=str(output_dir))
    if without_links:
        cfg = dataclasses.replace(cfg, without_links=True)

    rich.print("[bold](tsdgen)[/bold] Start creating TypeScript declarations...")
    try:
        result = asyncio.run(generate_declarations(cfg))
    except (DeclarationError, OSError, ValueError) as e:
        rich.print(f"[bold red](tsdgen)[/bold red] {e}")
        raise SystemExit(1) from e
    rich.print(
        f"[bold](tsdgen)[/bold] Finished; wrote {len(result.files)} files to"
        f" {cfg.output_dir}."
    )


def entrypoint() -> None:
    """Entrypoint for use with pyproject scripts."""
    tyro.cli(main)


if __name__ == "__main__":
    entrypoint()
