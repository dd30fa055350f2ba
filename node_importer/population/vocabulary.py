"""
Vocabulary import module for the node importer.

This module turns the class hierarchy under the Vocabulary marker class into
taxonomy vocabularies and tags. Tags are created without parents; parent links
are queued and written once every tag of the vocabulary exists.
"""
from typing import Any, Dict, List, Optional

from node_importer.config import VOCABULARY
from node_importer.errors import VocabularyExistsError
from node_importer.model import PendingParentLink, TagRecord
from node_importer.population.core import ImportContext
from node_importer.query.closure import ClosureEngine
from node_importer.utils.logging import vocab_logger
from node_importer.utils.types import local_name, require


class VocabularyImporter:
    """Writes vocabularies and tags to the content store."""

    def __init__(self, context: ImportContext):
        self.context = context
        self.store = context.store

    def import_vocabularies(self, data: List[Dict[str, Any]]) -> None:
        """
        Imports pre-built vocabularies.

        Args:
            data: List of {'vid', 'name', 'tags': [TagRecord, ...]}
        """
        if not data:
            return
        for vocabulary in data:
            self.create_vocabulary(vocabulary['vid'], vocabulary['name'])
            self.create_tags(vocabulary['vid'], vocabulary.get('tags', []))
            self.set_tag_parents(vocabulary['vid'], vocabulary.get('tags', []))

    def create_vocabulary(self, vid: str, name: str) -> None:
        """
        Creates a vocabulary.

        An existing vocabulary is cleared and reused when overwrite is set.

        Raises:
            VocabularyExistsError: If the vocabulary exists and overwrite is off
        """
        require(vid, "vid")
        require(name, "name")

        if self._clear_vocabulary_if_exists(vid):
            return

        self.store.create_vocabulary(vid, name)
        self.context.vocabularies.append(vid)
        vocab_logger.debug(f"Created vocabulary '{vid}'.")

    def _clear_vocabulary_if_exists(self, vid: str) -> bool:
        """Deletes all tags of an existing vocabulary if overwrite is set; returns whether it existed."""
        if not self.vocabulary_exists(vid):
            return False
        if not self.context.overwrite:
            raise VocabularyExistsError(vid)

        tids = self.store.find_entity_ids({"entity_type": "taxonomy_term", "vid": vid})
        for tid in tids:
            self.store.delete_entity("taxonomy_term", tid)
        vocab_logger.info(f"Cleared {len(tids)} tags of existing vocabulary '{vid}'.")
        return True

    def vocabulary_exists(self, vid: str) -> bool:
        require(vid, "vid")
        return bool(self.store.find_entity_ids({"entity_type": "taxonomy_vocabulary", "vid": vid}))

    def create_tags(self, vid: str, tags: List[TagRecord]) -> None:
        """
        Creates a set of tags for the given vocabulary.

        Parents are not added, because they may not exist yet.
        """
        require(vid, "vid")
        for tag in tags or []:
            self.create_tag(vid, tag.name)

    def create_tag(self, vid: str, name: str) -> Optional[Any]:
        """Creates a single tag without parents and returns its id."""
        require(vid, "vid")
        if not name:
            return None
        tid = self.store.create_taxonomy_term(vid, name)
        self.context.terms.append(tid)
        return tid

    def set_tag_parents(self, vid: str, tags: List[TagRecord]) -> None:
        """
        Adds parents to previously created tags.

        Parent ids replace any earlier parents and keep the order of tag.parents.
        Parents that cannot be found are left out.

        Args:
            vid: Vocabulary of the tags
            tags: Tags with the names of their parents
        """
        require(vid, "vid")
        for tag in tags or []:
            if not tag.parents:
                continue

            tid = self.search_tag_id_by_name(vid, tag.name)
            if tid is None:
                vocab_logger.warning(f"Cannot set parents of unknown tag '{tag.name}' in vocabulary '{vid}'.")
                continue

            parent_ids = self.search_tag_ids_by_names(
                [{"vid": vid, "name": parent} for parent in tag.parents]
            )
            self.store.set_term_parents(tid, parent_ids)

    def search_tag_id_by_name(self, vid: str, name: str) -> Optional[Any]:
        require(vid, "vid")
        require(name, "name")
        result = self.store.find_entity_ids({"entity_type": "taxonomy_term", "vid": vid, "name": name})
        return result[0] if result else None

    def search_tag_ids_by_names(self, tags: List[Dict[str, str]]) -> List[Any]:
        """
        Returns the ids of the given (vid, name) pairs; pairs without a match are left out.

        Args:
            tags: List of {'vid', 'name'}
        """
        ids = []
        for tag in tags or []:
            tid = self.search_tag_id_by_name(tag["vid"], tag["name"])
            if tid is None:
                vocab_logger.warning(f"Tag '{tag['name']}' not found in vocabulary '{tag['vid']}'.")
                continue
            ids.append(tid)
        return ids


class VocabularyBuilder:
    """
    Derives vocabularies and tags from the class hierarchy under Vocabulary.

    Each direct subclass of Vocabulary becomes a vocabulary, each of its
    transitive subclasses a tag. Parent links are queued on the context and
    written by the ReferenceResolver.
    """

    def __init__(self, closure: ClosureEngine, importer: VocabularyImporter):
        self.closure = closure
        self.importer = importer

    def build(self) -> List[str]:
        """
        Creates all vocabularies and their tags.

        Returns:
            The vids of the handled vocabularies
        """
        vids = []
        for cls in self.closure.get_vocabulary_classes():
            vid = local_name(cls)
            vocab_logger.info(f"Handling vocabulary: {vid}")
            self.importer.create_vocabulary(vid, vid)

            vocab_logger.info("Collecting terms...")
            tags = self.closure.find_all_subclasses_of(cls)
            vocab_logger.info(f"Found {len(tags)} terms.")

            for tag in tags:
                self.importer.create_tag(vid, local_name(tag))

            self.importer.context.defer_parent_link(PendingParentLink(
                vocabulary_id=vid,
                tags=[TagRecord(vid, local_name(tag), self.get_parent_tags(tag)) for tag in tags],
            ))
            vids.append(vid)
        return vids

    def get_parent_tags(self, tag: str) -> List[str]:
        """
        Returns the local names of all parents of a tag, except the Vocabulary marker.

        Args:
            tag: Tag class URI
        """
        require(tag, "tag")
        parents = self.closure.index.properties_as_array(tag).get("subClassOf", [])
        return [local_name(parent) for parent in parents if parent != VOCABULARY]
