"""Registry of source text known during a compilation run."""

from typing import Iterator, Mapping, Optional


class SourceRegistry:
    """Maps source unit names to source text.

    Entries are added by explicit injection or by successful reads and are
    never removed during a run. The last write for a name wins; iteration
    follows insertion order so diagnostics are deterministic.
    """

    def __init__(self, sources: Optional[Mapping[str, str]] = None) -> None:
        self._sources: dict[str, str] = dict(sources or {})

    def set(self, source_unit_name: str, text: str) -> None:
        """Store ``text`` under ``source_unit_name``, replacing any previous text."""
        self._sources[source_unit_name] = text

    def get(self, source_unit_name: str) -> Optional[str]:
        """Return the text stored under ``source_unit_name`` or None."""
        return self._sources.get(source_unit_name)

    def replace_all(self, sources: Mapping[str, str]) -> None:
        """Replace every entry with the contents of ``sources``."""
        self._sources = dict(sources)

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the current mapping."""
        return dict(self._sources)

    def __contains__(self, source_unit_name: object) -> bool:
        return source_unit_name in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[str]:
        return iter(self._sources)
