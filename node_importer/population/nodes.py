"""
Node writing module for the node importer.

This module writes flattened NodeRecords to the content store. Node and taxonomy
references are not written here: they are queued on the ImportContext and
resolved by the ReferenceResolver once every node of the run exists.
"""
import copy
from datetime import datetime
from typing import Any, Dict, List, Optional

from node_importer.config import (
    MAX_FIELDNAME_LENGTH, DEFERRED_REFERENCE_KINDS, REFERENCE_FILE
)
from node_importer.errors import ArgumentError
from node_importer.model import FieldRecord, NodeRecord, PendingReference
from node_importer.population.core import ImportContext
from node_importer.utils.logging import node_logger
from node_importer.utils.types import require


def _has_value(value: Any) -> bool:
    """Checks whether a field value is worth writing (structured values need a non-null 'value')."""
    if value is None:
        return False
    if isinstance(value, dict):
        return value.get("value") is not None if "value" in value else bool(value)
    if isinstance(value, list):
        return len(value) > 0
    return True


class NodeImporter:
    """
    Creates or updates nodes from NodeRecords.

    Attributes:
        context: The run-scoped ImportContext
    """

    def __init__(self, context: ImportContext):
        self.context = context
        self.store = context.store

    def import_nodes(self, records: List[NodeRecord]) -> List[Any]:
        """
        Creates every node of records.

        References are only queued; run the ReferenceResolver afterwards.

        Returns:
            The ids of the created or updated nodes (None for skipped records)
        """
        if not records:
            return []
        return [self.create_node(record) for record in records]

    def create_node(self, record: NodeRecord) -> Optional[Any]:
        """
        Creates a node for the given record, or updates the node with the same uuid.

        Args:
            record: The node to write; title and type are required, uuid defaults to the title

        Returns:
            The node id, or None if the bundle does not exist in the store
        """
        if record.title is None:
            raise ArgumentError("title")
        if record.type is None:
            raise ArgumentError("type")
        uuid = record.uuid or record.title
        bundle = record.type

        if not self.store.bundle_exists(bundle):
            node_logger.warning(f"Content type '{bundle}' does not exist in the content store.")
            return None

        node_id = self.search_node_id_by_uuid(uuid)
        if node_id is not None:
            self.store.update_node(
                node_id,
                title=record.title,
                revision_message=f"Incrementally updated at {datetime.now():%Y-%m-%d %H:%M}"
            )
            node_logger.debug(f"Updated existing node {node_id} with uuid '{uuid}'.")
        else:
            node_id = self.store.create_node(
                bundle, record.title, uuid,
                langcode=self.context.langcode,
                user_id=self.context.user_id
            )
            node_logger.debug(f"Created node {node_id} ({bundle}) with uuid '{uuid}'.")

        if record.fields:
            self.insert_fields(node_id, bundle, record.fields)

        if record.alias:
            self.add_alias(node_id, record.alias)

        self.context.nodes.append((node_id, uuid))
        return node_id

    def insert_fields(self, node_id: Any, bundle: str, fields: List[FieldRecord]) -> None:
        """
        Inserts fields into a node.

        Node and taxonomy references are deferred, file references create the
        referenced files first.

        Args:
            node_id: Id of the node
            bundle: Bundle of the node, used to check which fields exist
            fields: Field records to write
        """
        require(node_id, "node_id")
        if not fields:
            return

        values: Dict[str, Any] = {}
        for node_field in fields:
            field_name = node_field.field_name[:MAX_FIELDNAME_LENGTH]

            if not self.store.node_has_field(bundle, field_name):
                node_logger.warning(f"Field '{field_name}' does not exist in bundle '{bundle}'.")
                continue

            if node_field.references in DEFERRED_REFERENCE_KINDS:
                self.context.defer_reference(PendingReference(
                    node_id=node_id,
                    field_name=field_name,
                    reference_kind=node_field.references,
                    targets=list(node_field.value or []),
                ))
                continue

            value = node_field.value
            if node_field.references == REFERENCE_FILE:
                value = self._attach_files(value)

            if _has_value(value):
                values[field_name] = value

        if values:
            self.store.update_node(node_id, fields=values)

    def _attach_files(self, value: Any) -> Any:
        """Creates the files a file field points at and adds their ids as 'target_id'."""
        if isinstance(value, dict):
            value = copy.deepcopy(value)
            value["target_id"] = self.create_file(value.get("uri"))
            return value
        attached = []
        for item in value or []:
            item = copy.deepcopy(item)
            item["target_id"] = self.create_file(item.get("uri"))
            attached.append(item)
        return attached

    def create_file(self, uri: str) -> Any:
        """
        Returns the id of the file entity for uri, creating it if needed.

        Args:
            uri: Path of the file relative to the file scheme
        """
        require(uri, "uri")
        file_uri = f"{self.context.file_scheme}://{uri}"

        existing = self.store.find_entity_ids({"entity_type": "file", "uri": file_uri})
        if existing:
            node_logger.info(f"Found file {existing[0]} for uri '{file_uri}'.")
            return existing[0]

        file_id = self.store.create_file(file_uri, user_id=self.context.user_id)
        self.context.files.append(file_id)
        return file_id

    def add_alias(self, node_id: Any, alias: Optional[str]) -> None:
        """
        Adds a URL alias to a node.

        Args:
            node_id: Id of the node (required)
            alias: Alias to insert; nothing happens if it is empty
        """
        require(node_id, "id")
        if not alias:
            return
        path_id = self.store.create_url_alias(node_id, alias, langcode=self.context.langcode)
        self.context.paths.append(path_id)

    def search_node_id_by_uuid(self, uuid: str) -> Optional[Any]:
        """Queries the store for a node uuid and returns the corresponding id."""
        require(uuid, "uuid")
        result = self.store.find_entity_ids({"entity_type": "node", "uuid": uuid})
        return result[0] if result else None
