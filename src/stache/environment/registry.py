"""Directive registry for the stache Registry.

Provides a dict-like view over the registry's directive map.
"""

from __future__ import annotations

from collections.abc import Callable, ItemsView, KeysView, ValuesView
from typing import TYPE_CHECKING, Any

from stache.directives.base import DirectiveDef, FunctionDirective

if TYPE_CHECKING:
    from stache.environment.core import Registry


def as_directive(impl: DirectiveDef | Callable[..., Any]) -> DirectiveDef:
    """Return ``impl`` as a directive, wrapping plain callables.

    Raises:
        TypeError: If ``impl`` is neither a directive nor callable
    """
    if isinstance(impl, DirectiveDef):
        return impl
    if callable(impl):
        return FunctionDirective(impl)
    raise TypeError(f"Directive must define call() or be callable, got {type(impl).__name__}")


class DirectiveRegistry:
    """Dict-like interface for directives.

    Supports:
        - registry.helpers['name'] = directive_or_function
        - registry.helpers.update({'name': func})
        - impl = registry.helpers['name']
        - 'name' in registry.helpers
        - del registry.helpers['name']

    All mutations use copy-on-write: a render that already read the map
    keeps seeing the version it started with.
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: Registry):
        self._registry = registry

    def _get_dict(self) -> dict[str, DirectiveDef]:
        return self._registry._directives

    def _set_dict(self, d: dict[str, DirectiveDef]) -> None:
        self._registry._directives = d

    def __getitem__(self, name: str) -> DirectiveDef:
        return self._get_dict()[name]

    def __setitem__(self, name: str, impl: DirectiveDef | Callable[..., Any]) -> None:
        new = self._get_dict().copy()
        new[name] = as_directive(impl)
        self._set_dict(new)

    def __delitem__(self, name: str) -> None:
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __len__(self) -> int:
        return len(self._get_dict())

    def get(self, name: str, default: DirectiveDef | None = None) -> DirectiveDef | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: dict[str, DirectiveDef | Callable[..., Any]]) -> None:
        """Register several directives at once."""
        new = self._get_dict().copy()
        new.update({name: as_directive(impl) for name, impl in mapping.items()})
        self._set_dict(new)

    def copy(self) -> dict[str, DirectiveDef]:
        return self._get_dict().copy()

    def keys(self) -> KeysView[str]:
        return self._get_dict().keys()

    def values(self) -> ValuesView[DirectiveDef]:
        return self._get_dict().values()

    def items(self) -> ItemsView[str, DirectiveDef]:
        return self._get_dict().items()
