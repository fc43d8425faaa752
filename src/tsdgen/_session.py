from __future__ import annotations

import dataclasses

from ._declarations import Declaration, InterfaceDeclaration, simplify_name


@dataclasses.dataclass
class GenerationSession:
    """State shared by the generators and the relocator during one run.

    A session is created per run and never shared between runs."""

    references: dict[str, list[Declaration]] = dataclasses.field(default_factory=dict)
    """Simplified type name => every declaration registered under that name."""
    series: list[str] = dataclasses.field(default_factory=list)
    """Full names of the generated series option interfaces."""
    _last_unique_id: int = 0

    def next_unique_id(self) -> int:
        self._last_unique_id += 1
        return self._last_unique_id

    def register(self, declaration: Declaration) -> None:
        """Record a declaration in the reference dictionary."""
        registered = self.references.setdefault(declaration.name, [])
        if not any(entry is declaration for entry in registered):
            registered.append(declaration)

    def lookup(self, type_name: str) -> list[Declaration]:
        return list(self.references.get(simplify_name(type_name), []))

    def declared_elsewhere(
        self, full_name: str, target: Declaration
    ) -> Declaration | None:
        """Find a non-interface declaration with the given full name that lives
        outside of `target`."""
        for declaration in self.lookup(full_name):
            if declaration.parent is None or declaration.parent is target:
                continue
            if isinstance(declaration, InterfaceDeclaration):
                continue
            if declaration.full_name == full_name:
                return declaration
        return None

    def clear(self) -> None:
        self.references.clear()
        self.series.clear()
