from __future__ import annotations

import asyncio
import dataclasses
import json
from pathlib import Path
from typing import Any

import rich

from ._config import Config
from ._declarations import ModuleDeclaration
from ._namespace_generator import generate_namespace
from ._namespace_parser import parse_namespace
from ._options_generator import generate_options
from ._options_parser import parse_options
from ._relocator import relocate_references
from ._serializer import merge_modules, save_declarations, save_static
from ._session import GenerationSession
from ._utilities import parent


async def load_json(path: Path) -> Any:
    text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return json.loads(text)


@dataclasses.dataclass
class GenerationResult:
    modules: dict[str, ModuleDeclaration]
    """Declaration modules by module path."""
    files: list[Path]
    """Written files, including copied static files."""


async def generate_declarations(
    config: Config, session: GenerationSession | None = None
) -> GenerationResult:
    """Run all stages: parse and generate the options tree, parse and generate
    the namespace tree, relocate references, then save everything."""
    session = session or GenerationSession()
    session.clear()
    output_dir = Path(config.output_dir)

    options_json = await load_json(Path(config.tree_options_json_file))
    options_tree = parse_options(
        options_json, config, debug_path=output_dir / "tree-extended.json"
    )
    option_modules = generate_options(options_tree, config, session)
    rich.print("[bold](tsdgen)[/bold] Options processed.")

    namespace_json = await load_json(Path(config.tree_namespace_json_file))
    namespace_trees = parse_namespace(namespace_json, config, session)
    namespace_modules = generate_namespace(
        namespace_trees, option_modules[config.main_module], config, session
    )
    rich.print("[bold](tsdgen)[/bold] Namespaces processed.")

    modules = merge_modules(namespace_modules, option_modules)
    relocated = relocate_references(modules, config.main_module, session)
    if relocated:
        rich.print(
            f"[bold](tsdgen)[/bold] Moved {len(relocated)} declarations into the"
            " main namespace."
        )

    files = await save_declarations(modules, output_dir)
    if config.static_dir is not None:
        files.extend(
            await save_static(
                Path(config.static_dir),
                output_dir / parent(config.main_module),
            )
        )

    session.clear()
    return GenerationResult(modules=modules, files=files)
