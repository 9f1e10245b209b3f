"""Template loaders for the stache Registry.

Loaders provide template source for names the Registry has no registered
template for (typically partials). They implement ``get_source(name)``
returning ``(source, filename)``.

Built-in Loaders:
- ``FileSystemLoader``: Load ``.hbs`` files from directories
- ``DictLoader``: Load from an in-memory dictionary (testing/embedded)
- ``ChoiceLoader``: Try multiple loaders in order (theme fallback)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM partials WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row.source, f"db://{name}"

        def list_templates(self) -> list[str]:
            return [r.name for r in db.query("SELECT name FROM partials")]
    ```

Loader results are not cached: the Registry parses the source again on
every lookup. Register a template explicitly to keep it parsed.

Thread-Safety:
All built-in loaders are safe for concurrent ``get_source()`` calls.

"""

from __future__ import annotations

from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from stache.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    """Source provider consulted by ``Registry.get_template``."""

    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_templates(self) -> list[str]: ...


def _not_found(name: str, available: list[str], where: str | None = None) -> TemplateNotFoundError:
    msg = f"Template '{name}' not found"
    if where:
        msg += f" in: {where}"
    matches = get_close_matches(name, available, n=1, cutoff=0.6)
    if matches:
        msg += f". Did you mean '{matches[0]}'?"
    elif available:
        msg += f". Available: {', '.join(available[:10])}"
        if len(available) > 10:
            msg += f" ... ({len(available)} total)"
    return TemplateNotFoundError(msg)


class FileSystemLoader:
    """Load templates from filesystem directories.

    A template name maps to ``<directory>/<name><extension>``; names may
    contain ``/`` for subdirectories. Directories are searched in order and
    the first matching file wins.

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("partials/card")
            >>> filename
            'templates/partials/card.hbs'

    Raises:
        TemplateNotFoundError: If the template is in none of the directories

    """

    __slots__ = ("_encoding", "_extension", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        extension: str = ".hbs",
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._extension = extension
        self._encoding = encoding

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from the first directory that has it."""
        for base in self._paths:
            path = base / f"{name}{self._extension}"
            if path.is_file():
                return path.read_text(self._encoding), str(path)
        raise _not_found(
            name,
            self.list_templates(),
            ", ".join(str(p) for p in self._paths),
        )

    def list_templates(self) -> list[str]:
        """List template names (without extension) across all directories."""
        templates: set[str] = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob(f"*{self._extension}"):
                    rel = path.relative_to(base).as_posix()
                    templates.add(rel[: -len(self._extension)] if self._extension else rel)
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Example:
            >>> loader = DictLoader({"card": "<div>{{name}}</div>"})
            >>> registry = Registry(loader=loader)
            >>> registry.render_template("{{> card person}}", {"person": {"name": "Ada"}})
            '<div>Ada</div>'

    Raises:
        TemplateNotFoundError: If the name is not in the mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            raise _not_found(name, sorted(self._mapping))
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping)


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Example:
            >>> loader = ChoiceLoader([
            ...     FileSystemLoader("themes/custom/"),
            ...     FileSystemLoader("themes/default/"),
            ... ])

    Raises:
        TemplateNotFoundError: If no loader can find the template

    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders"
        )

    def list_templates(self) -> list[str]:
        """Merge template lists from all loaders (deduplicated, sorted)."""
        templates: set[str] = set()
        for loader in self._loaders:
            templates.update(loader.list_templates())
        return sorted(templates)
