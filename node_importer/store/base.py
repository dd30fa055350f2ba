"""
ContentStore: Abstract base class for content store backends.

This module provides the interface the importer writes through. A backend
persists nodes, taxonomy vocabularies and terms, files and URL aliases, and
answers exact-match identifier lookups used to decide between create and update.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class ContentStore(ABC):
    """
    Abstract base class for content store implementations.

    Identifiers returned by the create methods are opaque to the importer; they
    are only passed back into the store.
    """

    # ========== Lookups ==========

    @abstractmethod
    def find_entity_ids(self, criteria: Dict[str, Any]) -> List[Any]:
        """
        Returns the ids of all entities matching every criterion exactly.

        Args:
            criteria: Must contain 'entity_type' (node, taxonomy_term,
                taxonomy_vocabulary, file, path); every other key is a field
                compared by equality (e.g. uuid, vid, name, uri)

        Returns:
            Matching ids in creation order
        """
        pass

    @abstractmethod
    def bundle_exists(self, bundle: str) -> bool:
        """Returns True if nodes of this bundle (content type) can be created."""
        pass

    @abstractmethod
    def node_has_field(self, bundle: str, field_name: str) -> bool:
        """Returns True if nodes of the bundle carry a field with this name."""
        pass

    # ========== Nodes ==========

    @abstractmethod
    def create_node(
        self,
        bundle: str,
        title: str,
        uuid: str,
        langcode: str = "en",
        user_id: Any = None
    ) -> Any:
        """
        Creates a node and returns its id.

        Args:
            bundle: Content type of the node
            title: Node title
            uuid: Stable external key used for later lookups
            langcode: Language of the node
            user_id: Owner of the node
        """
        pass

    @abstractmethod
    def update_node(
        self,
        node_id: Any,
        title: Optional[str] = None,
        fields: Optional[Dict[str, Any]] = None,
        revision_message: Optional[str] = None
    ) -> None:
        """
        Updates the title and/or field values of a node.

        Field values given here replace any previous value of the same field.
        """
        pass

    @abstractmethod
    def load_node(self, node_id: Any) -> Optional[Dict[str, Any]]:
        """Returns the stored node as a dictionary, or None."""
        pass

    # ========== Taxonomy ==========

    @abstractmethod
    def create_vocabulary(self, vid: str, name: str) -> Any:
        """Creates a taxonomy vocabulary and returns its id."""
        pass

    @abstractmethod
    def create_taxonomy_term(self, vid: str, name: str) -> Any:
        """Creates a taxonomy term without parents and returns its id."""
        pass

    @abstractmethod
    def set_term_parents(self, term_id: Any, parent_ids: List[Any]) -> None:
        """Replaces the parents of a taxonomy term."""
        pass

    # ========== Files and aliases ==========

    @abstractmethod
    def create_file(self, uri: str, user_id: Any = None) -> Any:
        """Creates a file entity for the uri and returns its id."""
        pass

    @abstractmethod
    def create_url_alias(self, node_id: Any, alias: str, langcode: str = "en") -> Any:
        """Creates a URL alias for a node and returns the alias id."""
        pass

    # ========== Deletion ==========

    @abstractmethod
    def delete_entity(self, entity_type: str, entity_id: Any) -> None:
        """Deletes one entity; unknown ids are ignored."""
        pass
