"""
Hierarchy strategies for the closure engine.

A strategy answers the two primitive hierarchy questions the closure engine is
built from: the direct subclasses of a class and the declared types of an
individual. All strategies return the same answers for the same document; they
differ in how much of the document they keep in memory.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from owlready2 import World, ThingClass, Thing

from node_importer.config import AVAILABLE_STRATEGIES
from node_importer.query.index import OntologyIndex
from node_importer.utils.logging import closure_logger
from node_importer.utils.types import require


class HierarchyStrategy(ABC):
    """Interface every hierarchy strategy implements."""

    name = "abstract"

    @abstractmethod
    def direct_subclasses_of(self, cls: str) -> List[str]:
        """
        Returns the direct subclasses of a class.

        Args:
            cls: Class URI

        Returns:
            Subclass URIs without duplicates (empty for unknown classes)
        """
        pass

    @abstractmethod
    def types_of(self, individual: str) -> Optional[List[str]]:
        """
        Returns the declared rdf:type classes of a named individual.

        Returns:
            Type URIs, or None if the URI is not a named individual
        """
        pass


class StreamingHierarchy(HierarchyStrategy):
    """Answers every question with a fresh forward scan of the document."""

    name = "streaming"

    def __init__(self, index: OntologyIndex):
        self.index = index

    def direct_subclasses_of(self, cls: str) -> List[str]:
        return self.index.direct_subclasses_of(cls)

    def types_of(self, individual: str) -> Optional[List[str]]:
        return self.index.types_of(individual)


class IndexedHierarchy(HierarchyStrategy):
    """Builds the subclass and type maps in a single scan on first use."""

    name = "indexed"

    def __init__(self, index: OntologyIndex):
        self.index = index
        self._subclasses: Optional[Dict[str, List[str]]] = None
        self._types: Optional[Dict[str, List[str]]] = None

    def _ensure_loaded(self) -> None:
        if self._subclasses is None:
            closure_logger.info(f"Building hierarchy index for {self.index.file_path}...")
            self._subclasses, self._types = self.index.hierarchy_edges()

    def direct_subclasses_of(self, cls: str) -> List[str]:
        require(cls, "class")
        self._ensure_loaded()
        return list(self._subclasses.get(cls, []))

    def types_of(self, individual: str) -> Optional[List[str]]:
        require(individual, "individual")
        self._ensure_loaded()
        types = self._types.get(individual)
        return list(types) if types is not None else None


class OwlreadyHierarchy(HierarchyStrategy):
    """
    Loads the ontology into an owlready2 World and answers from its class graph.

    Only suitable for ontologies that fit in memory.
    """

    name = "owlready"

    def __init__(self, file_path: str, world: Optional[World] = None):
        self.file_path = require(file_path, "file_path")
        self.world = world if world is not None else World()
        self._onto = None

    def _entity(self, iri: str):
        if self._onto is None:
            closure_logger.info(f"Loading {self.file_path} into an owlready2 world...")
            self._onto = self.world.get_ontology(Path(self.file_path).absolute().as_uri()).load()
            closure_logger.info(f"Successfully loaded ontology: {self._onto.base_iri}")
        return self.world[iri]

    def direct_subclasses_of(self, cls: str) -> List[str]:
        require(cls, "class")
        entity = self._entity(cls)
        if not isinstance(entity, ThingClass):
            return []
        result: List[str] = []
        for subclass in entity.subclasses():
            if subclass.iri not in result:
                result.append(subclass.iri)
        return result

    def types_of(self, individual: str) -> Optional[List[str]]:
        require(individual, "individual")
        entity = self._entity(individual)
        if entity is None or isinstance(entity, ThingClass) or not isinstance(entity, Thing):
            return None
        return [cls.iri for cls in entity.is_a if isinstance(cls, ThingClass)]


def make_strategy(name: str, index: OntologyIndex) -> HierarchyStrategy:
    """
    Creates the hierarchy strategy registered under name.

    Args:
        name: One of AVAILABLE_STRATEGIES
        index: Index over the document the strategy answers for
    """
    if name == StreamingHierarchy.name:
        return StreamingHierarchy(index)
    if name == IndexedHierarchy.name:
        return IndexedHierarchy(index)
    if name == OwlreadyHierarchy.name:
        return OwlreadyHierarchy(index.file_path)
    raise ValueError(f"Unknown hierarchy strategy '{name}'. Choose one of: {', '.join(AVAILABLE_STRATEGIES)}")
