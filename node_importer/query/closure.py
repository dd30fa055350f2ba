"""
Closure engine for the ontology class hierarchy.

This module computes transitive subclass sets and transitive type membership on
top of a HierarchyStrategy, and the set of properties registered as node fields.
"""
from typing import Dict, List, Optional

from node_importer.config import VOCABULARY, FIELD_PROPERTY_MARKERS
from node_importer.query.index import OntologyIndex
from node_importer.query.strategy import HierarchyStrategy, StreamingHierarchy
from node_importer.utils.logging import closure_logger
from node_importer.utils.types import local_name, require


class ClosureEngine:
    """
    Transitive hierarchy queries over one ontology document.

    Attributes:
        index: Index queries over the document
        strategy: Strategy answering direct-subclass and type questions
    """

    def __init__(self, index: OntologyIndex, strategy: Optional[HierarchyStrategy] = None):
        self.index = index
        self.strategy = strategy if strategy is not None else StreamingHierarchy(index)
        self._subclass_cache: Dict[str, List[str]] = {}
        self._field_properties: Optional[List[str]] = None
        closure_logger.debug(f"Closure engine using '{self.strategy.name}' hierarchy strategy.")

    def direct_subclasses_of(self, cls: str) -> List[str]:
        return self.strategy.direct_subclasses_of(cls)

    def find_all_subclasses_of(self, cls: str) -> List[str]:
        """
        Returns all subclasses of the given class, direct and transitive.

        A class already in the result is never expanded again, so cyclic
        subClassOf graphs terminate. cls itself is part of the result only if it
        is reachable as a subclass of itself.

        Args:
            cls: Class URI

        Returns:
            Subclass URIs in discovery order, without duplicates
        """
        require(cls, "class")
        if cls in self._subclass_cache:
            return list(self._subclass_cache[cls])

        result: List[str] = []
        seen = set()
        stack = [cls]
        while stack:
            current = stack.pop()
            # Reverse so that siblings come out in the order the strategy returned them
            for subclass in reversed(self.direct_subclasses_of(current)):
                if subclass in seen:
                    continue
                seen.add(subclass)
                result.append(subclass)
                stack.append(subclass)

        self._subclass_cache[cls] = result
        closure_logger.debug(f"Found {len(result)} transitive subclasses of {local_name(cls)}.")
        return list(result)

    def find_all_leaf_classes_of(self, cls: str) -> List[str]:
        """
        Returns all subclasses of cls which have no subclasses themselves (leafs).

        Leaf classes are the ones that can be instantiated by individuals.
        """
        require(cls, "class")
        return [
            subclass for subclass in self.find_all_subclasses_of(cls)
            if not self.direct_subclasses_of(subclass)
        ]

    def has_transitive_subclass(self, cls: str, candidate: str) -> bool:
        """Returns True if candidate is a direct or transitive subclass of cls."""
        require(cls, "class")
        require(candidate, "subclass")
        return candidate in self.find_all_subclasses_of(cls)

    def is_a(self, individual: str, cls: str) -> bool:
        """Returns True if the individual declares rdf:type cls (non-transitive)."""
        require(individual, "individual")
        require(cls, "class")
        types = self.strategy.types_of(individual)
        if not types:
            return False
        return cls in types

    def is_a_transitive(self, individual: str, cls: str) -> bool:
        """
        Checks if the given individual is a transitive instantiation of the given class.

        Args:
            individual: Individual URI
            cls: Superclass URI
        """
        require(individual, "individual")
        require(cls, "class")

        types = self.strategy.types_of(individual)
        if not types:
            return False
        if cls in types:
            return True
        return any(subclass in types for subclass in self.find_all_subclasses_of(cls))

    # --- Vocabulary helpers ---

    def get_vocabulary_classes(self) -> List[str]:
        """Returns all direct subclasses of the Vocabulary marker class."""
        return self.direct_subclasses_of(VOCABULARY)

    def get_vocabulary_for_tag(self, tag: str) -> Optional[str]:
        """
        Returns the vocabulary class a tag belongs to.

        Args:
            tag: Tag class URI

        Returns:
            The vocabulary class whose subclass closure contains tag, or None
        """
        require(tag, "tag")
        for vocabulary in self.get_vocabulary_classes():
            if tag in self.find_all_subclasses_of(vocabulary):
                return vocabulary
        return None

    # --- Field properties ---

    def get_field_properties(self) -> List[str]:
        """
        Returns every property registered as a node field.

        Annotation, datatype and object properties count as fields when they are
        direct or transitive sub-properties of the matching DUO marker property.
        Annotation fields come first, then datatype and object fields, each in
        document order.
        """
        if self._field_properties is not None:
            return list(self._field_properties)

        declarations = self.index.property_declarations()

        def reaches(prop: str, marker: str) -> bool:
            seen = set()
            pending = list(declarations[prop][1])
            while pending:
                current = pending.pop()
                if current == marker:
                    return True
                if current in seen:
                    continue
                seen.add(current)
                if current in declarations:
                    pending.extend(declarations[current][1])
            return False

        markers = {marker for _, marker in FIELD_PROPERTY_MARKERS}
        result: List[str] = []
        for element_tag, marker in FIELD_PROPERTY_MARKERS:
            for prop, (tag, _) in declarations.items():
                if tag != element_tag or prop in markers or prop in result:
                    continue
                if reaches(prop, marker):
                    result.append(prop)

        self._field_properties = result
        closure_logger.info(f"Found {len(result)} field properties.")
        return list(result)
