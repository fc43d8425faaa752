"""Relocation of referenced declarations into the main namespace.

Secondary modules augment the main namespace. When the main namespace refers
to a declaration that only exists in such an augmentation, the main module
would have to import a module that imports it back. The relocator moves
these declarations, and everything they refer to in turn, into the main
namespace."""

from __future__ import annotations

import collections
from typing import Deque, Iterable

from ._declarations import (
    Declaration,
    ExternalModuleDeclaration,
    ModuleDeclaration,
    simplify_name,
)
from ._session import GenerationSession


class ReferenceRelocator:
    def __init__(self, namespace: Declaration, session: GenerationSession) -> None:
        self.namespace = namespace
        self._session = session
        self._name = simplify_name(namespace.full_name)
        self._queue: Deque[Declaration] = collections.deque()
        self._visited: set[int] = set()
        self.relocated: list[Declaration] = []
        """Declarations moved into the namespace, in order."""

    def _is_foreign_copy(self, declaration: Declaration) -> bool:
        """Check whether a declaration lives in another module's copy of the
        namespace and is not yet declared in the namespace itself."""
        parent = declaration.parent
        if parent is None or parent is self.namespace:
            return False
        if simplify_name(parent.full_name) != self._name:
            return False
        return not self.namespace.get_children(declaration.name)

    def _collect(self, declaration: Declaration) -> list[Declaration]:
        candidates: list[Declaration] = []
        for type_name in declaration.get_referenced_types(True):
            for reference in self._session.lookup(type_name):
                if self._is_foreign_copy(reference) and not any(
                    reference is candidate for candidate in candidates
                ):
                    candidates.append(reference)
        return candidates

    def _move(self, candidates: list[Declaration]) -> None:
        held = {
            child.unique_id
            for child in self.namespace.get_children()
            if child.unique_id
        }
        for candidate in candidates:
            parent = candidate.parent
            if parent is None or not self._is_foreign_copy(candidate):
                continue
            detached = [
                declaration
                for declaration in parent.remove_child(candidate.name)
                if not declaration.unique_id or declaration.unique_id not in held
            ]
            self.namespace.add_children(*detached)
            self.relocated.extend(detached)
            self._queue.extend(detached)

    def relocate(self, start: Iterable[Declaration]) -> None:
        """Follow the references of the given declarations transitively."""
        self._queue.extend(start)
        while self._queue:
            declaration = self._queue.popleft()
            if id(declaration) in self._visited:
                continue
            self._visited.add(id(declaration))
            self._move(self._collect(declaration))


def relocate_references(
    modules: dict[str, ModuleDeclaration],
    main_module: str,
    session: GenerationSession,
) -> list[Declaration]:
    """Move declarations referenced from the main namespace out of the
    augmentations of other modules into the main namespace.

    The references of the augmentations in `options` modules are followed
    as well. Returns the relocated declarations."""
    namespace = modules[main_module]
    relocator = ReferenceRelocator(namespace, session)
    relocator.relocate(namespace.get_children())

    for path, module in modules.items():
        if "options" not in path or module is namespace:
            continue
        for child in module.get_children():
            if isinstance(child, ExternalModuleDeclaration):
                relocator.relocate(child.get_children())

    return relocator.relocated
