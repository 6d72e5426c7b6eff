"""Typed records handed to the stores by the extraction stage.

Records are immutable descriptors of scraped data. They carry no row ids;
the stores resolve parents by natural key and map records to columns with
``to_params`` using an explicit attribute -> column map per entity.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

REF_SEPARATOR = "/"


@dataclass(frozen=True, slots=True)
class LibraryRecord:
    """Library descriptor. Natural key: (name, version)."""

    name: str
    version: str
    description: str | None = None
    site_url: str | None = None
    source_base_url: str | None = None
    copyright: str | None = None
    license: str | None = None


@dataclass(frozen=True, slots=True)
class NamespaceRecord:
    """Namespace descriptor. ``version`` defaults to the owning library's."""

    name: str
    doc: str | None = None
    source_url: str | None = None
    version: str | None = None


@dataclass(frozen=True, slots=True)
class FunctionRef:
    """Identity of a function as written in a reference: ``namespace/name``."""

    namespace: str
    name: str
    version: str | None = None

    @classmethod
    def parse(cls, text: str, default_namespace: str | None = None) -> FunctionRef:
        """Parse ``ns/name``; a bare ``name`` uses ``default_namespace``.

        Raises:
            ValueError: bare name with no default namespace, or empty parts.
        """
        namespace, sep, name = text.rpartition(REF_SEPARATOR)
        if not sep:
            namespace = default_namespace or ""
        # "clojure.core//" names the division function "/"
        if text.endswith(REF_SEPARATOR * 2):
            namespace, name = text[:-2], REF_SEPARATOR
        if not namespace or not name:
            raise ValueError(f"Not a qualified function reference: {text!r}")
        return cls(namespace=namespace, name=name)

    def __str__(self) -> str:
        return f"{self.namespace}{REF_SEPARATOR}{self.name}"


@dataclass(frozen=True, slots=True)
class FunctionRecord:
    """Function descriptor. Natural key: (namespace, name, version)."""

    namespace: str
    name: str
    version: str | None = None
    file: str | None = None
    line: int | None = None
    arglists: tuple[str, ...] = ()
    added: str | None = None
    doc: str | None = None
    source: str | None = None
    references: tuple[FunctionRef, ...] = field(default_factory=tuple)

    @property
    def ref(self) -> FunctionRef:
        return FunctionRef(namespace=self.namespace, name=self.name, version=self.version)


# attribute -> column maps; derived columns are added by the stores
LIBRARY_COLUMNS: Mapping[str, str] = {
    "description": "description",
    "site_url": "site_url",
    "source_base_url": "source_base_url",
    "copyright": "copyright",
    "license": "license",
}

NAMESPACE_COLUMNS: Mapping[str, str] = {
    "source_url": "source_url",
}

FUNCTION_COLUMNS: Mapping[str, str] = {
    "file": "file",
    "line": "line",
    "added": "added",
    "doc": "doc",
    "source": "source",
}


def to_params(record: Any, field_map: Mapping[str, str]) -> dict[str, Any]:
    """Copy the record attributes named in ``field_map`` into a column dict."""
    return {column: getattr(record, attr) for attr, column in field_map.items()}
