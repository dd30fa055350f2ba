"""
Ontology index queries.

This module answers structural questions about an RDF/XML ontology by scanning
the document with a StreamingCursor. Every query performs exactly one forward
scan and keeps no parsed tree between calls.
"""
from collections import OrderedDict
from typing import Dict, Iterator, List, Optional, Set, Tuple
from xml.etree.ElementTree import Element

from node_importer.config import (
    RDF_ABOUT, RDF_RESOURCE, RDF_DATATYPE, RDF_TYPE, RDFS_SUBCLASSOF, RDFS_SUBPROPERTYOF,
    XML_LANG, OWL_NS, OWL_CLASS, OWL_NAMED_INDIVIDUAL, OWL_AXIOM, OWL_ANNOTATED_SOURCE,
    OWL_ANNOTATED_PROPERTY, OWL_ANNOTATED_TARGET, PROPERTY_ELEMENTS, REF_NUM, FIELD_ANNOTATION
)
from node_importer.model import Axiom, Literal
from node_importer.reader.cursor import CursorNode, StreamingCursor, split_tag
from node_importer.utils.logging import index_logger
from node_importer.utils.types import local_name, remove_rdfs_type, require

# Type alias for the adjacency maps built by hierarchy_edges()
Adjacency = Dict[str, List[str]]


# --- Element helpers ---

def expanded_name(tag: str) -> str:
    """Turns a Clark notation tag into the URI it denotes ('{ns}local' -> 'nslocal')."""
    namespace, local = split_tag(tag)
    return namespace + local


def child_resources(element: Element, tag: str) -> List[str]:
    """rdf:resource values of the children of element with the given Clark tag."""
    return [
        child.get(RDF_RESOURCE)
        for child in element
        if child.tag == tag and child.get(RDF_RESOURCE)
    ]


def first_child(element: Element, name: str) -> Optional[Element]:
    """First child whose local name equals name, in any namespace."""
    for child in element:
        if split_tag(child.tag)[1] == name:
            return child
    return None


def properties_in(element: Element) -> Dict[str, List[str]]:
    """Every property of a resource declaration, keyed by local name, in document order."""
    properties: Dict[str, List[str]] = {}
    for child in element:
        name = split_tag(child.tag)[1]
        resource = child.get(RDF_RESOURCE)
        value = resource if resource is not None else (child.text or '')
        properties.setdefault(name, []).append(value)
    return properties


def literals_in(element: Element, property_uri: str) -> List[Literal]:
    """Literal-valued assertions of a property on a resource declaration."""
    name = local_name(property_uri)
    return [
        Literal(child.text or '', child.get(RDF_DATATYPE), child.get(XML_LANG))
        for child in element
        if split_tag(child.tag)[1] == name and child.get(RDF_RESOURCE) is None
    ]


def resources_in(element: Element, property_uri: str) -> List[str]:
    """Resource-valued assertions of a property on a resource declaration."""
    name = local_name(property_uri)
    return [
        child.get(RDF_RESOURCE)
        for child in element
        if split_tag(child.tag)[1] == name and child.get(RDF_RESOURCE) is not None
    ]


def parse_axiom(element: Element) -> Axiom:
    """Builds an Axiom record from an owl:Axiom element."""
    source = child_resources(element, OWL_ANNOTATED_SOURCE)
    prop = child_resources(element, OWL_ANNOTATED_PROPERTY)

    target = None
    target_is_resource = False
    target_element = first_child(element, split_tag(OWL_ANNOTATED_TARGET)[1])
    if target_element is not None:
        if target_element.get(RDF_RESOURCE) is not None:
            target = target_element.get(RDF_RESOURCE)
            target_is_resource = True
        else:
            target = target_element.text or ''

    ref_num = None
    ref_num_element = first_child(element, REF_NUM)
    if ref_num_element is not None and ref_num_element.text:
        raw = remove_rdfs_type(ref_num_element.text.strip())
        try:
            ref_num = int(float(raw))
        except ValueError:
            index_logger.warning(f"Ignoring non-numeric {REF_NUM} '{ref_num_element.text}' on axiom for {source[:1]}.")

    field = None
    field_element = first_child(element, FIELD_ANNOTATION)
    if field_element is not None:
        field = field_element.get(RDF_RESOURCE) or field_element.text

    return Axiom(
        source=source[0] if source else None,
        property=prop[0] if prop else None,
        target=target,
        target_is_resource=target_is_resource,
        ref_num=ref_num,
        field=field,
        element=element,
    )


class OntologyIndex:
    """
    Read-only query operations over one ontology document.

    Attributes:
        file_path: Path of the RDF/XML document
        scan_count: Number of forward scans performed so far
    """

    def __init__(self, file_path: str):
        self.file_path = require(file_path, "file_path")
        self.scan_count = 0

    def scan(self) -> Iterator[CursorNode]:
        """Yields every top-level element of the document in one forward scan."""
        self.scan_count += 1
        with StreamingCursor(self.file_path) as cursor:
            yield from cursor

    def get_xml_element(self, uri: str) -> Optional[Element]:
        """
        Returns a class, property or individual declaration by URI.

        Args:
            uri: The rdf:about value to search for

        Returns:
            The first top-level owl:* element declaring uri, or None
        """
        require(uri, "uri")
        for node in self.scan():
            if split_tag(node.tag)[0] != OWL_NS:
                continue
            if node.element.get(RDF_ABOUT) == uri:
                return node.element
        return None

    def direct_subclasses_of(self, cls: str) -> List[str]:
        """
        Returns the classes whose rdfs:subClassOf points at cls.

        Args:
            cls: Class URI (need not exist in the document)

        Returns:
            Subclass URIs in document order, without duplicates
        """
        require(cls, "class")
        result: List[str] = []
        seen: Set[str] = set()
        for node in self.scan():
            if node.tag != OWL_CLASS:
                continue
            if cls in child_resources(node.element, RDFS_SUBCLASSOF):
                subclass = node.element.get(RDF_ABOUT)
                if subclass and subclass not in seen:
                    seen.add(subclass)
                    result.append(subclass)
        return result

    def types_of(self, individual: str) -> Optional[List[str]]:
        """
        Returns the rdf:type resources of a named individual.

        Returns:
            The declared types, or None when uri does not declare an owl:NamedIndividual
        """
        require(individual, "individual")
        element = self.get_xml_element(individual)
        if element is None or element.tag != OWL_NAMED_INDIVIDUAL:
            return None
        return child_resources(element, RDF_TYPE)

    def all_of_type(self, type_name: str) -> List[str]:
        """
        Returns every resource of the given type.

        Args:
            type_name: A prefixed element name (e.g. 'owl:NamedIndividual') or a full type URI

        Returns:
            rdf:about values in document order, without duplicates
        """
        require(type_name, "type_name")
        result: List[str] = []
        seen: Set[str] = set()
        for node in self.scan():
            uri = node.element.get(RDF_ABOUT)
            if not uri or uri in seen:
                continue
            if (
                node.name == type_name
                or expanded_name(node.tag) == type_name
                or type_name in child_resources(node.element, RDF_TYPE)
            ):
                seen.add(uri)
                result.append(uri)
        return result

    def properties_as_array(self, uri: str) -> Dict[str, List[str]]:
        """
        Returns all properties of a resource, keyed by property local name.

        Resource-valued properties contribute the referenced URI, the others their text.
        """
        require(uri, "uri")
        element = self.get_xml_element(uri)
        if element is None:
            return {}
        return properties_in(element)

    def literals_of(self, uri: str, property_uri: str) -> List[Literal]:
        """Literal assertions of property_uri on uri, in document order."""
        require(uri, "uri")
        require(property_uri, "property")
        element = self.get_xml_element(uri)
        if element is None:
            return []
        return literals_in(element, property_uri)

    def resources_of(self, uri: str, property_uri: str) -> List[str]:
        """Resource assertions of property_uri on uri, in document order."""
        require(uri, "uri")
        require(property_uri, "property")
        element = self.get_xml_element(uri)
        if element is None:
            return []
        return resources_in(element, property_uri)

    def axioms_for(self, individual: str, property_uri: str) -> List[Tuple[int, Axiom]]:
        """
        Returns the axioms annotating (individual, property_uri, *), sorted by ref_num.

        Axioms without ref_num get the previous key + 1, so un-numbered axioms keep
        their encounter order. An axiom whose key is already taken replaces the
        earlier one.

        Returns:
            List of (key, Axiom) tuples sorted by key ascending
        """
        require(individual, "individual")
        require(property_uri, "property")

        result: Dict[int, Axiom] = OrderedDict()
        prev_index = 0
        for node in self.scan():
            if node.tag != OWL_AXIOM:
                continue
            axiom = parse_axiom(node.element)
            if axiom.source != individual or axiom.property != property_uri:
                continue
            cur_index = axiom.ref_num if axiom.ref_num is not None else prev_index + 1
            result[cur_index] = axiom
            prev_index = cur_index

        return sorted(result.items(), key=lambda item: item[0])

    def axiom_with_target(self, individual: str, property_uri: str, target: str) -> Optional[Axiom]:
        """Returns the first axiom on (individual, property_uri) whose annotatedTarget is target."""
        require(target, "target")
        for _, axiom in self.axioms_for(individual, property_uri):
            if axiom.target == target:
                return axiom
        return None

    def property_declarations(self) -> Dict[str, Tuple[str, List[str]]]:
        """
        Returns every annotation, datatype and object property in one scan.

        Returns:
            {property_uri: (element tag, [super property URIs])} in document order
        """
        result: Dict[str, Tuple[str, List[str]]] = OrderedDict()
        for node in self.scan():
            if node.tag not in PROPERTY_ELEMENTS:
                continue
            uri = node.element.get(RDF_ABOUT)
            if not uri:
                continue
            supers = child_resources(node.element, RDFS_SUBPROPERTYOF)
            if uri in result:
                result[uri][1].extend(s for s in supers if s not in result[uri][1])
            else:
                result[uri] = (node.tag, supers)
        return result

    def hierarchy_edges(self) -> Tuple[Adjacency, Adjacency]:
        """
        Builds the direct-subclass and individual-type maps in one scan.

        Returns:
            (subclasses by class URI, types by named individual URI)
        """
        subclasses: Adjacency = {}
        types: Adjacency = {}
        declared = set()
        for node in self.scan():
            uri = node.element.get(RDF_ABOUT)
            if not uri:
                continue
            if node.tag == OWL_CLASS:
                for parent in child_resources(node.element, RDFS_SUBCLASSOF):
                    children = subclasses.setdefault(parent, [])
                    if uri not in children:
                        children.append(uri)
            # Only the first owl:* declaration of a URI counts, as in get_xml_element
            if split_tag(node.tag)[0] != OWL_NS or uri in declared:
                continue
            declared.add(uri)
            if node.tag == OWL_NAMED_INDIVIDUAL:
                types[uri] = child_resources(node.element, RDF_TYPE)
        index_logger.debug(f"Indexed {len(subclasses)} superclasses and {len(types)} individuals in one scan.")
        return subclasses, types
