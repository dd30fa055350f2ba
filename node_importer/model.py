"""Records produced while flattening an ontology into the content-import model."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from xml.etree.ElementTree import Element


@dataclass(frozen=True)
class Literal:
    """Lexical literal asserted on a resource (a property element without rdf:resource)."""

    value: str
    datatype: Optional[str] = None
    language: Optional[str] = None


@dataclass
class Axiom:
    """An owl:Axiom annotating one (source, property, target) triple."""

    source: str
    property: str
    target: Optional[str]
    target_is_resource: bool = False
    ref_num: Optional[int] = None
    field: Optional[str] = None
    element: Optional[Element] = None


@dataclass
class FieldRecord:
    field_name: str
    value: Any
    references: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"field_name": self.field_name, "value": self.value}
        if self.references:
            data["references"] = self.references
        return data


@dataclass
class NodeRecord:
    title: str
    type: Optional[str]
    alias: Optional[str] = None
    uuid: Optional[str] = None
    fields: List[FieldRecord] = field(default_factory=list)

    def get_field(self, field_name: str) -> Optional[FieldRecord]:
        for node_field in self.fields:
            if node_field.field_name == field_name:
                return node_field
        return None


@dataclass
class TagRecord:
    vocabulary_id: str
    name: str
    parents: List[str] = field(default_factory=list)


@dataclass
class PendingReference:
    """A node field whose targets are resolved after every node of the run exists."""

    node_id: Any
    field_name: str
    reference_kind: str
    targets: List[Any] = field(default_factory=list)

    @property
    def key(self) -> Tuple[Any, str, str]:
        return (self.node_id, self.field_name, self.reference_kind)


@dataclass
class PendingParentLink:
    """Parent names of a vocabulary's tags, linked after all of its tags exist."""

    vocabulary_id: str
    tags: List[TagRecord] = field(default_factory=list)


__all__ = [
    "Literal",
    "Axiom",
    "FieldRecord",
    "NodeRecord",
    "TagRecord",
    "PendingReference",
    "PendingParentLink",
]
