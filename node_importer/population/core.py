"""
Core population module for the node importer.

This module provides the ImportContext class: the run-scoped owner of the content
store handle, the registries of created entities and the deferred queues that
the reference resolver drains at the end of a run.
"""
from typing import Dict, Any, List, Tuple

from node_importer.config import DEFAULT_USER_ID, DEFAULT_FILE_SCHEME, DEFAULT_LANGCODE
from node_importer.model import PendingReference, PendingParentLink
from node_importer.store.base import ContentStore
from node_importer.utils.logging import main_logger

# Type Alias for the node registry: (node id, uuid)
NodeRegistryEntry = Tuple[Any, str]


class ImportContext:
    """
    Holds everything one import run accumulates.

    Attributes:
        store: The content store entities are written to
        overwrite: Whether existing vocabularies may be cleared and reused
        user_id: Owner of created nodes and files
        file_scheme: Stream wrapper scheme prefixed to file URIs
        langcode: Language of created nodes and aliases
    """
    def __init__(self,
                 store: ContentStore,
                 overwrite: bool = False,
                 user_id: Any = DEFAULT_USER_ID,
                 file_scheme: str = DEFAULT_FILE_SCHEME,
                 langcode: str = DEFAULT_LANGCODE):
        self.store = store
        self.overwrite = overwrite
        self.user_id = user_id
        self.file_scheme = file_scheme
        self.langcode = langcode

        # Created entities, in creation order
        self.nodes: List[NodeRegistryEntry] = []
        self.files: List[Any] = []
        self.paths: List[Any] = []
        self.vocabularies: List[Any] = []
        self.terms: List[Any] = []

        # Deferred work, drained by the ReferenceResolver
        self._pending_references: Dict[Tuple[Any, str, str], PendingReference] = {}
        self._pending_parent_links: List[PendingParentLink] = []

        # Individuals that could not be imported: (uri, reason)
        self.skipped: List[Tuple[str, str]] = []

    # --- Deferred queues ---

    def defer_reference(self, reference: PendingReference) -> None:
        """
        Queues a node field whose targets may not exist yet.

        Recording the same (node, field, kind) again replaces the earlier entry.
        """
        self._pending_references[reference.key] = reference

    def defer_parent_link(self, link: PendingParentLink) -> None:
        self._pending_parent_links.append(link)

    def pending_references(self) -> List[PendingReference]:
        return list(self._pending_references.values())

    def pending_parent_links(self) -> List[PendingParentLink]:
        return list(self._pending_parent_links)

    def drain_references(self) -> List[PendingReference]:
        references = self.pending_references()
        self._pending_references.clear()
        return references

    def drain_parent_links(self) -> List[PendingParentLink]:
        links = self.pending_parent_links()
        self._pending_parent_links.clear()
        return links

    def record_skip(self, uri: str, reason: str) -> None:
        self.skipped.append((uri, reason))

    # --- Counters ---

    def count_created_nodes(self) -> int:
        return len(self.nodes)

    def count_created_files(self) -> int:
        return len(self.files)

    def count_created_vocabularies(self) -> int:
        return len(self.vocabularies)

    def count_created_tags(self) -> int:
        return len(self.terms)

    def report(self) -> Dict[str, Any]:
        """
        Generate a summary of the run.

        Returns:
            Dictionary with entity counts, pending work and skipped individuals
        """
        return {
            "created_nodes": self.count_created_nodes(),
            "created_files": self.count_created_files(),
            "created_vocabularies": self.count_created_vocabularies(),
            "created_tags": self.count_created_tags(),
            "created_aliases": len(self.paths),
            "pending_references": len(self._pending_references),
            "pending_parent_links": len(self._pending_parent_links),
            "skipped": list(self.skipped),
        }

    def log_import_report(self) -> None:
        """
        Log import statistics at INFO level.
        """
        report = self.report()

        main_logger.info("Import Report")
        main_logger.info(f"  Vocabularies created: {report['created_vocabularies']}")
        main_logger.info(f"  Tags created: {report['created_tags']}")
        main_logger.info(f"  Nodes created or updated: {report['created_nodes']}")
        main_logger.info(f"  Files created: {report['created_files']}")
        main_logger.info(f"  URL aliases created: {report['created_aliases']}")

        if report['pending_references'] or report['pending_parent_links']:
            main_logger.warning(
                f"  {report['pending_references']} node references and "
                f"{report['pending_parent_links']} parent links were never resolved."
            )

        if report['skipped']:
            main_logger.warning(f"  {len(report['skipped'])} individuals were skipped:")
            for uri, reason in report['skipped'][:20]:
                main_logger.warning(f"    {uri}: {reason}")
            if len(report['skipped']) > 20:
                main_logger.warning("    ...")

