"""
Streaming cursor over the top-level elements of an RDF/XML document.

The cursor never holds more than one top-level element of the document in
memory: every direct child of the root is handed out once its end tag has been
read and is then detached from the root. Each scan re-opens the file, so any
number of independent scans can run over the same document.
"""
import enum
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from node_importer.config import DEFAULT_PREFIXES
from node_importer.errors import OntologyParseError
from node_importer.utils.logging import index_logger


class NodeKind(enum.Enum):
    """Kind of a cursor node. The cursor only yields top-level elements."""
    ELEMENT = "element"


@dataclass
class CursorNode:
    """One top-level node read by the cursor."""

    name: str  # prefixed name, e.g. "owl:Class"
    tag: str  # Clark notation, e.g. "{http://www.w3.org/2002/07/owl#}Class"
    kind: NodeKind
    element: Optional[ET.Element] = None

    def outer_xml(self) -> str:
        """Serialized subtree starting at this node."""
        if self.element is None:
            return ""
        return ET.tostring(self.element, encoding="unicode")


def split_tag(tag: str):
    """Splits a Clark notation tag into (namespace, local name)."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


class StreamingCursor:
    """
    Forward-only iterator over the top-level elements of an XML document.

    Usage:
        with StreamingCursor(path) as cursor:
            for node in cursor:
                ...
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._file = None
        self._events = None
        self._root: Optional[ET.Element] = None
        self._depth = 0
        self._prefixes: Dict[str, str] = {}

    def open(self) -> "StreamingCursor":
        """Opens (or re-opens) the document for a new scan from the start."""
        self.close()
        index_logger.debug(f"Opening cursor on {self.file_path}")
        self._file = open(self.file_path, "rb")
        self._events = ET.iterparse(self._file, events=("start", "end", "start-ns"))
        self._root = None
        self._depth = 0
        self._prefixes = dict(DEFAULT_PREFIXES)
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._events = None
        self._root = None

    def qualified_name(self, tag: str) -> str:
        """Returns the prefixed name of a Clark notation tag, using the document's prefixes."""
        namespace, local = split_tag(tag)
        prefix = self._prefixes.get(namespace)
        if prefix:
            return f"{prefix}:{local}"
        return local

    def next(self) -> Optional[CursorNode]:
        """Returns the next top-level element, or None at the end of the document."""
        if self._events is None:
            return None
        try:
            for event, payload in self._events:
                if event == "start-ns":
                    prefix, uri = payload
                    # The document's own prefixes override the defaults
                    if prefix:
                        self._prefixes[uri] = prefix
                    continue
                if event == "start":
                    if self._depth == 0:
                        self._root = payload
                    self._depth += 1
                    continue
                # end
                self._depth -= 1
                if self._depth == 1:
                    element = payload
                    if self._root is not None:
                        self._root.remove(element)
                    return CursorNode(
                        name=self.qualified_name(element.tag),
                        tag=element.tag,
                        kind=NodeKind.ELEMENT,
                        element=element,
                    )
        except ET.ParseError as e:
            self.close()
            raise OntologyParseError(self.file_path, str(e)) from e
        self.close()
        return None

    def __iter__(self) -> Iterator[CursorNode]:
        if self._events is None:
            self.open()
        while True:
            node = self.next()
            if node is None:
                return
            yield node

    def __enter__(self) -> "StreamingCursor":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
