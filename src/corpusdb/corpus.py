"""Scraped corpus documents: the hand-off format from the extraction stage.

A corpus document is JSON or YAML::

    library:
      name: demo
      version: "1.0"
      site_url: https://example.org
    namespaces:
      - name: demo.core
        doc: |
          Core functions.
        functions:
          - name: foo
            arglists: ["[x]", "[x y]"]
            references: [bar, demo.util/baz]

Bare reference names resolve against the function's own namespace.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from corpusdb.core.errors import CorpusError
from corpusdb.store.records import FunctionRecord, FunctionRef, LibraryRecord, NamespaceRecord


class LibraryDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    description: str | None = None
    site_url: str | None = None
    source_base_url: str | None = None
    copyright: str | None = None
    license: str | None = None


class FunctionDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    file: str | None = None
    line: int | None = None
    arglists: list[str] = Field(default_factory=list)
    added: str | None = None
    doc: str | None = None
    source: str | None = None
    references: list[str] = Field(default_factory=list)


class NamespaceDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    doc: str | None = None
    source_url: str | None = None
    functions: list[FunctionDocument] = Field(default_factory=list)


class CorpusDocument(BaseModel):
    """Root of a corpus file."""

    model_config = ConfigDict(extra="ignore")

    library: LibraryDocument
    namespaces: list[NamespaceDocument] = Field(default_factory=list)

    def to_corpus(self) -> Corpus:
        library = LibraryRecord(**self.library.model_dump())
        namespaces: list[NamespaceRecord] = []
        functions: list[FunctionRecord] = []
        for ns in self.namespaces:
            namespaces.append(NamespaceRecord(name=ns.name, doc=ns.doc, source_url=ns.source_url))
            for fn in ns.functions:
                functions.append(
                    FunctionRecord(
                        namespace=ns.name,
                        name=fn.name,
                        file=fn.file,
                        line=fn.line,
                        arglists=tuple(fn.arglists),
                        added=fn.added,
                        doc=fn.doc,
                        source=fn.source,
                        references=tuple(
                            FunctionRef.parse(ref, default_namespace=ns.name)
                            for ref in fn.references
                        ),
                    )
                )
        return Corpus(library=library, namespaces=namespaces, functions=functions)


@dataclass
class Corpus:
    """One library's records, in the order the importer stores them."""

    library: LibraryRecord
    namespaces: list[NamespaceRecord]
    functions: list[FunctionRecord]


def _read(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def load_corpus(path: Path) -> Corpus:
    """Read and validate a corpus file.

    Raises:
        CorpusError: missing file, unparsable content, or invalid structure.
    """
    if not path.exists():
        raise CorpusError.file_not_found(str(path))
    try:
        data = _read(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CorpusError.parse_error(str(path), str(e)) from e

    try:
        document = CorpusDocument.model_validate(data)
        return document.to_corpus()
    except ValidationError as e:
        err = e.errors()[0]
        location = ".".join(str(loc) for loc in err["loc"])
        raise CorpusError.invalid(str(path), location, err["msg"]) from e
    except ValueError as e:
        raise CorpusError.invalid(str(path), "references", str(e)) from e
