"""
Version Registry

The ordered, duplicate-free list of version names for one invocation.

A version is an opaque name. Its only derived property is its position in
the registry, and position is the sole ordering signal: no semantic-version
parsing or collation is ever performed. "v10" sorts after "v9" only if the
caller listed it after "v9".
"""

from typing import Dict, Iterable, Iterator, Optional, Sequence

from versioning.errors import DuplicateVersionError, SourceLocation, UnknownVersionError


class VersionRegistry:
    """
    Ordered sequence of unique version names.

    Example:
        registry = VersionRegistry(["v1_0_0", "v1_1_0", "v2_0_0"])
        registry.index_of("v1_1_0")   # 1
        list(registry)                # ["v1_0_0", "v1_1_0", "v2_0_0"]

    INVARIANTS:
        - No name appears twice (DuplicateVersionError at construction)
        - Iteration order is exactly the order given by the caller
    """

    def __init__(
            self,
            names: Iterable[str],
            locations: Optional[Sequence[Optional[SourceLocation]]] = None):
        self._names = []
        self._positions: Dict[str, int] = {}
        for i, name in enumerate(names):
            if name in self._positions:
                location = locations[i] if locations is not None else None
                raise DuplicateVersionError(name, location)
            self._positions[name] = i
            self._names.append(name)
        self._names = tuple(self._names)

    @property
    def names(self) -> tuple:
        return self._names

    def index_of(self, name: str) -> int:
        """
        Position of a version name.

        Raises:
            UnknownVersionError: If the name was never declared
        """
        try:
            return self._positions[name]
        except KeyError:
            raise UnknownVersionError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionRegistry):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"VersionRegistry({list(self._names)!r})"


__all__ = ["VersionRegistry"]
