"""
Entity flattening module for the node importer.

This module turns ontology resources below the Node marker class into
NodeRecords: a title, a bundle, an alias and one FieldRecord per field
property. Literal values are ordered by their axioms, resource values are
classified into node, file, taxonomy or entity references.
"""
from typing import Any, Dict, List, Optional, Set

from node_importer.config import (
    NODE, IMG, FILE, DOC, ENTITY, VOCABULARY, DEFAULT_BODY_FORMAT,
    REFERENCE_NODE, REFERENCE_FILE, REFERENCE_TAXONOMY_TERM
)
from node_importer.errors import (
    MissingFieldAxiomError, MixedReferenceKindsError, UnclassifiedIndividualError,
    UnresolvableTargetError
)
from node_importer.model import FieldRecord, NodeRecord
from node_importer.query.closure import ClosureEngine
from node_importer.utils.logging import node_logger
from node_importer.utils.types import bundle_name, literal_value_to_string, local_name, require


def _first(properties: Dict[str, List[str]], name: str) -> Optional[str]:
    values = properties.get(name)
    return values[0] if values else None


class EntityFlattener:
    """
    Flattens individuals (and optionally classes) below Node into NodeRecords.

    Attributes:
        closure: Closure engine over the ontology document
        classes_as_nodes: Import the subclasses of each bundle class as nodes too
        only_leaf_classes_as_nodes: With classes_as_nodes, import only leaf classes
    """

    def __init__(self,
                 closure: ClosureEngine,
                 classes_as_nodes: bool = False,
                 only_leaf_classes_as_nodes: bool = False):
        self.closure = closure
        self.index = closure.index
        self.classes_as_nodes = classes_as_nodes
        self.only_leaf_classes_as_nodes = only_leaf_classes_as_nodes

    def get_individuals(self) -> List[str]:
        """
        Returns all resources to import as nodes.

        Classes below the bundle classes come first (if enabled), then every named
        individual that is transitively a Node. Individuals typed Node directly
        are ignored.

        Returns:
            Resource URIs without duplicates
        """
        individuals: List[str] = []

        if self.classes_as_nodes:
            for node_type_class in self.closure.direct_subclasses_of(NODE):
                if self.only_leaf_classes_as_nodes:
                    individuals.extend(self.closure.find_all_leaf_classes_of(node_type_class))
                else:
                    individuals.extend(self.closure.find_all_subclasses_of(node_type_class))

        for individual in self.index.all_of_type("owl:NamedIndividual"):
            if (
                not self.closure.is_a_transitive(individual, NODE)
                or self.closure.is_a(individual, NODE)
            ):
                continue
            individuals.append(individual)

        result: List[str] = []
        seen: Set[str] = set()
        for individual in individuals:
            if individual not in seen:
                seen.add(individual)
                result.append(individual)
        return result

    def get_bundle(self, uri: str) -> Optional[str]:
        """
        Returns the bundle machine name for a resource below Node.

        Args:
            uri: Individual or class URI

        Returns:
            The converted local name of the first matching direct subclass of
            Node, or None
        """
        require(uri, "node")
        for bundle in self.closure.direct_subclasses_of(NODE):
            if (
                self.closure.is_a_transitive(uri, bundle)
                or self.closure.has_transitive_subclass(bundle, uri)
            ):
                return bundle_name(local_name(bundle))
        return None

    def flatten(self, uri: str) -> NodeRecord:
        """
        Builds the NodeRecord for a resource.

        Raises:
            UnclassifiedIndividualError: If the resource has no bundle
            ClassificationError: If a referenced resource cannot be classified
        """
        require(uri, "individual")
        properties = self.index.properties_as_array(uri)

        bundle = self.get_bundle(uri)
        if bundle is None:
            raise UnclassifiedIndividualError(uri)

        return NodeRecord(
            title=_first(properties, "title") or local_name(uri),
            type=bundle,
            alias=_first(properties, "alias"),
            fields=self.create_node_fields(uri, properties),
        )

    def create_node_fields(self, uri: str, properties: Optional[Dict[str, List[str]]] = None) -> List[FieldRecord]:
        """
        Returns all fields of a resource.

        Args:
            uri: Individual or class URI
            properties: The resource's properties_as_array(), if already known
        """
        require(uri, "individual")
        if properties is None:
            properties = self.index.properties_as_array(uri)

        fields = [FieldRecord(
            field_name="body",
            value={
                "value": _first(properties, "content"),
                "summary": _first(properties, "summary"),
                "format": DEFAULT_BODY_FORMAT,
            },
        )]

        if (
            self.closure.is_a_transitive(uri, VOCABULARY)
            or self.closure.has_transitive_subclass(VOCABULARY, uri)
        ):
            fields.append(FieldRecord(
                field_name="field_tags",
                value=self.create_field_tags(uri, properties),
                references=REFERENCE_TAXONOMY_TERM,
            ))

        for property_uri in self.closure.get_field_properties():
            if local_name(property_uri) not in properties:
                continue
            node_field = self.create_node_field(uri, property_uri)
            if node_field is not None:
                fields.append(node_field)

        return fields

    def create_field_tags(self, uri: str, properties: Optional[Dict[str, List[str]]] = None) -> List[Dict[str, str]]:
        """
        Returns the tags a resource is classified with as {vid, name} pairs.

        Tags are the rdf:type and rdfs:subClassOf values below Vocabulary.
        """
        require(uri, "individual")
        if properties is None:
            properties = self.index.properties_as_array(uri)

        field_tags = []
        for tag in properties.get("type", []) + properties.get("subClassOf", []):
            if not self.closure.has_transitive_subclass(VOCABULARY, tag):
                continue
            vocabulary = self.closure.get_vocabulary_for_tag(tag)
            if vocabulary is None:
                # a vocabulary class itself is not a tag
                continue
            field_tags.append({"vid": local_name(vocabulary), "name": local_name(tag)})
        return field_tags

    def create_node_field(self, uri: str, property_uri: str) -> Optional[FieldRecord]:
        """
        Returns the field for one property of a resource.

        Literal values win over resource values.

        Returns:
            The FieldRecord, or None if the resource has no value for the property
        """
        require(uri, "individual")
        require(property_uri, "property")

        literals = self.get_sorted_literals(uri, property_uri)
        if literals:
            return FieldRecord(field_name=local_name(property_uri), value=literals)
        if self.get_sorted_resources(uri, property_uri):
            return self.get_resource_values_for_node_field(uri, property_uri)
        return None

    def get_sorted_literals(self, uri: str, property_uri: str) -> List[str]:
        """
        Returns the literal values of a property, axiom targets first.

        Axiom targets follow the axiom order (ref_num), the remaining literals
        follow document order. xsd:dateTime values are formatted as dates.

        Args:
            uri: Individual or class URI
            property_uri: Property URI

        Returns:
            List of strings, empty if the resource asserts no literal for the property
        """
        require(uri, "individual")
        require(property_uri, "property")

        literals = self.index.literals_of(uri, property_uri)
        if not literals:
            return []
        datatypes = {literal.value: literal.datatype for literal in literals}

        result: List[str] = []
        for _, axiom in self.index.axioms_for(uri, property_uri):
            if axiom.target is None or axiom.target_is_resource:
                continue
            value = literal_value_to_string(axiom.target, datatypes.get(axiom.target))
            if value not in result:
                result.append(value)

        for literal in literals:
            value = literal_value_to_string(literal.value, literal.datatype)
            if value not in result:
                result.append(value)
        return result

    def get_sorted_resources(self, uri: str, property_uri: str) -> List[str]:
        """
        Returns the referenced resources of a property, axiom targets first.

        Returns:
            List of URIs, empty if the resource asserts no resource for the property
        """
        require(uri, "individual")
        require(property_uri, "property")

        resources = self.index.resources_of(uri, property_uri)
        if not resources:
            return []

        result: List[str] = []
        for _, axiom in self.index.axioms_for(uri, property_uri):
            if axiom.target and axiom.target_is_resource and axiom.target not in result:
                result.append(axiom.target)

        for resource in resources:
            if resource not in result:
                result.append(resource)
        return result

    def get_resource_values_for_node_field(self, uri: str, property_uri: str) -> Optional[FieldRecord]:
        """
        Returns the field for a resource-valued property, one value per target.

        Targets are classified in order: Node, Img, File, Doc, vocabulary tag,
        Entity. Doc targets are skipped. All remaining targets must share one
        reference kind.

        Raises:
            MissingFieldAxiomError: If an Entity target has no axiom naming its field
            UnresolvableTargetError: If a target matches no category
            MixedReferenceKindsError: If the targets are of different kinds
        """
        require(uri, "individual")
        require(property_uri, "property")

        resources = self.get_sorted_resources(uri, property_uri)
        if not resources:
            return None

        values: List[Any] = []
        kinds: List[Optional[str]] = []
        for target in resources:
            resolved = self._resolve_target(uri, property_uri, target)
            if resolved is None:
                continue
            value, references = resolved
            if kinds and references != kinds[-1]:
                raise MixedReferenceKindsError(uri, property_uri, kinds + [references])
            values.append(value)
            kinds.append(references)

        if not values:
            return None
        return FieldRecord(field_name=local_name(property_uri), value=values, references=kinds[0])

    def _resolve_target(self, uri: str, property_uri: str, target: str):
        """Returns (value, reference kind) for one target, or None for a target to skip."""
        target_properties = self.index.properties_as_array(target)

        if self.closure.is_a_transitive(target, NODE):
            return _first(target_properties, "title") or local_name(target), REFERENCE_NODE

        if self.closure.is_a_transitive(target, IMG):
            return {
                "alt": _first(target_properties, "alt"),
                "title": _first(target_properties, "title"),
                "uri": _first(target_properties, "uri"),
            }, REFERENCE_FILE

        if self.closure.is_a_transitive(target, FILE):
            return {
                "uri": _first(target_properties, "uri"),
                "title": _first(target_properties, "title"),
            }, REFERENCE_FILE

        if self.closure.is_a_transitive(target, DOC):
            node_logger.warning(f"Skipping document reference {local_name(target)} of {local_name(uri)}: not supported.")
            return None

        vocabulary = self.closure.get_vocabulary_for_tag(target)
        if vocabulary is not None:
            return {"vid": local_name(vocabulary), "name": local_name(target)}, REFERENCE_TAXONOMY_TERM

        if self.closure.is_a_transitive(target, ENTITY):
            axiom = self.index.axiom_with_target(uri, property_uri, target)
            if axiom is None or not axiom.field:
                raise MissingFieldAxiomError(uri, property_uri, target)
            value: Any = _first(target_properties, local_name(axiom.field))
            return value, None

        raise UnresolvableTargetError(uri, property_uri, target)
