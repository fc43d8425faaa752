"""Rendering and saving of declaration modules."""

from __future__ import annotations

import asyncio
import re
import shutil
from pathlib import Path

from ._declarations import ModuleDeclaration

COPYRIGHT = "Copyright (c) Highsoft AS. All rights reserved."

_DECLARE_MODULE = re.compile(r'(declare module ")(.*highcharts)(" \{)')
_IMPORT_STATEMENT = re.compile(r'(import \* as Highcharts from ".*highcharts)(";)')


def to_source_variant(code: str) -> str:
    """Point module specifiers of the main module to its `.src` variant."""
    code = _DECLARE_MODULE.sub(r"\g<1>\g<2>.src\g<3>", code)
    return _IMPORT_STATEMENT.sub(r"\g<1>.src\g<2>", code)


def merge_modules(
    namespace_modules: dict[str, ModuleDeclaration],
    option_modules: dict[str, ModuleDeclaration],
) -> dict[str, ModuleDeclaration]:
    """Combine both module dictionaries. Option modules with the path of a
    namespace module are merged into it."""
    modules = dict(namespace_modules)
    for path, module in option_modules.items():
        existing = modules.get(path)
        if existing is None:
            modules[path] = module
        elif existing is not module:
            existing.add_children(*module.remove_children())
            existing.imports.extend(
                statement
                for statement in module.imports
                if statement not in existing.imports
            )
    return modules


def _write(path: Path, code: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(code, encoding="utf-8")
    return path


async def save_module(
    output_dir: Path, path: str, module: ModuleDeclaration
) -> list[Path]:
    """Render a module and write `<path>.d.ts` and `<path>.src.d.ts`. Nothing
    is written when the module has nothing to render but the banner."""
    module.copyright = ""
    if not module.render():
        return []
    module.copyright = COPYRIGHT
    code = module.render()
    return list(
        await asyncio.gather(
            asyncio.to_thread(_write, output_dir / (path + ".d.ts"), code),
            asyncio.to_thread(
                _write, output_dir / (path + ".src.d.ts"), to_source_variant(code)
            ),
        )
    )


async def save_declarations(
    modules: dict[str, ModuleDeclaration], output_dir: Path
) -> list[Path]:
    """Save all modules concurrently and return the written files."""
    saved = await asyncio.gather(
        *(save_module(output_dir, path, module) for path, module in modules.items())
    )
    return [file for files in saved for file in files]


async def save_static(static_dir: Path, target_dir: Path) -> list[Path]:
    """Copy hand-written declarations into the output."""
    if not static_dir.is_dir():
        return []
    await asyncio.to_thread(
        shutil.copytree, static_dir, target_dir, dirs_exist_ok=True
    )
    return sorted(
        target_dir / file.relative_to(static_dir)
        for file in static_dir.rglob("*")
        if file.is_file()
    )
