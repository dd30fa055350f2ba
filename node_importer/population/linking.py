"""
Reference linking module for the node importer.

This module runs the second pass of an import: it writes the tag parents and
node references that were queued while vocabularies and nodes were created.
"""
from typing import Any, List, Optional

from node_importer.config import REFERENCE_NODE, REFERENCE_TAXONOMY_TERM
from node_importer.errors import UnsupportedReferenceError
from node_importer.model import PendingReference
from node_importer.population.core import ImportContext
from node_importer.population.nodes import NodeImporter
from node_importer.population.vocabulary import VocabularyImporter
from node_importer.utils.logging import link_logger


class ReferenceResolver:
    """
    Resolves the deferred work of an ImportContext.

    Attributes:
        context: The run-scoped ImportContext whose queues are drained
        vocabulary_importer: Used for tag lookups and parent links
        node_importer: Used for node lookups by uuid
    """

    def __init__(self,
                 context: ImportContext,
                 vocabulary_importer: VocabularyImporter,
                 node_importer: Optional[NodeImporter] = None):
        self.context = context
        self.vocabulary_importer = vocabulary_importer
        self.node_importer = node_importer if node_importer is not None else NodeImporter(context)

    def resolve(self) -> int:
        """
        Writes all queued tag parents, then all queued node references.

        Returns:
            The number of node reference fields written
        """
        link_logger.info("Starting second pass: Linking tag parents and node references...")

        links = self.context.drain_parent_links()
        for link in links:
            link_logger.debug(f"Adding child parent linkages to terms of vocabulary '{link.vocabulary_id}'...")
            self.vocabulary_importer.set_tag_parents(link.vocabulary_id, link.tags)
        link_logger.info(f"Linked tag parents of {len(links)} vocabularies.")

        written = self.insert_node_references()
        link_logger.info(f"Second pass complete: {written} node reference fields written.")
        return written

    def insert_node_references(self) -> int:
        """
        Writes every queued node reference.

        Targets are looked up by uuid (node references) or by vocabulary and name
        (taxonomy references); targets that cannot be found are left out. The
        resolved ids replace the field value.

        Raises:
            UnsupportedReferenceError: For a reference kind other than node or taxonomy_term

        Returns:
            The number of fields written
        """
        written = 0
        for reference in self.context.drain_references():
            target_ids = self._resolve_targets(reference)
            self.context.store.update_node(reference.node_id, fields={reference.field_name: target_ids})
            written += 1
        return written

    def _resolve_targets(self, reference: PendingReference) -> List[Any]:
        if reference.reference_kind == REFERENCE_TAXONOMY_TERM:
            target_ids = self.vocabulary_importer.search_tag_ids_by_names(reference.targets)
        elif reference.reference_kind == REFERENCE_NODE:
            target_ids = []
            for uuid in reference.targets:
                node_id = self.node_importer.search_node_id_by_uuid(uuid)
                if node_id is None:
                    link_logger.warning(
                        f"Node with uuid '{uuid}' referenced by node {reference.node_id} "
                        f"in field '{reference.field_name}' not found."
                    )
                    continue
                target_ids.append(node_id)
        else:
            raise UnsupportedReferenceError(reference.reference_kind, reference.field_name)

        if len(target_ids) < len(reference.targets):
            link_logger.warning(
                f"Resolved {len(target_ids)} of {len(reference.targets)} targets of field "
                f"'{reference.field_name}' on node {reference.node_id}."
            )
        return target_ids
