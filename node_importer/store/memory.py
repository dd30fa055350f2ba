"""
In-memory content store.

Keeps every entity in plain dictionaries with integer ids. Used for dry runs,
for exporting an import as JSON and by the test suite.
"""
import copy
import json
from itertools import count
from typing import Any, Dict, List, Optional, Set

from node_importer.store.base import ContentStore
from node_importer.utils.logging import main_logger

ENTITY_TYPES = ("node", "taxonomy_vocabulary", "taxonomy_term", "file", "path")


class InMemoryContentStore(ContentStore):
    """
    Content store backed by dictionaries.

    Args:
        schema: Optional {bundle: set of field names}. Without a schema every
            bundle and every field is accepted.
    """

    def __init__(self, schema: Optional[Dict[str, Set[str]]] = None):
        self.schema = {bundle: set(fields) for bundle, fields in schema.items()} if schema else None
        self.entities: Dict[str, Dict[Any, Dict[str, Any]]] = {entity_type: {} for entity_type in ENTITY_TYPES}
        self._ids = count(1)

    def _next_id(self) -> int:
        return next(self._ids)

    # ========== Lookups ==========

    def find_entity_ids(self, criteria: Dict[str, Any]) -> List[Any]:
        criteria = dict(criteria)
        entity_type = criteria.pop("entity_type", None)
        if entity_type not in self.entities:
            raise ValueError(f"Unknown entity type '{entity_type}'")
        return [
            entity_id for entity_id, entity in self.entities[entity_type].items()
            if all(entity.get(key) == value for key, value in criteria.items())
        ]

    def bundle_exists(self, bundle: str) -> bool:
        if self.schema is None:
            return True
        return bundle in self.schema

    def node_has_field(self, bundle: str, field_name: str) -> bool:
        if self.schema is None:
            return True
        return field_name in self.schema.get(bundle, set())

    # ========== Nodes ==========

    def create_node(self, bundle, title, uuid, langcode="en", user_id=None):
        node_id = self._next_id()
        self.entities["node"][node_id] = {
            "nid": node_id,
            "type": bundle,
            "title": title,
            "uuid": uuid,
            "langcode": langcode,
            "status": 1,
            "uid": user_id,
            "fields": {},
            "revisions": [],
        }
        return node_id

    def update_node(self, node_id, title=None, fields=None, revision_message=None):
        node = self.entities["node"].get(node_id)
        if node is None:
            raise KeyError(f"Node {node_id} does not exist")
        if title is not None:
            node["title"] = title
        if fields:
            node["fields"].update(copy.deepcopy(fields))
        if revision_message:
            node["revisions"].append(revision_message)

    def load_node(self, node_id):
        node = self.entities["node"].get(node_id)
        return copy.deepcopy(node) if node is not None else None

    # ========== Taxonomy ==========

    def create_vocabulary(self, vid, name):
        self.entities["taxonomy_vocabulary"][vid] = {"vid": vid, "name": name, "weight": 0}
        return vid

    def create_taxonomy_term(self, vid, name):
        term_id = self._next_id()
        self.entities["taxonomy_term"][term_id] = {"tid": term_id, "vid": vid, "name": name, "parent": []}
        return term_id

    def set_term_parents(self, term_id, parent_ids):
        term = self.entities["taxonomy_term"].get(term_id)
        if term is None:
            raise KeyError(f"Taxonomy term {term_id} does not exist")
        term["parent"] = list(parent_ids)

    # ========== Files and aliases ==========

    def create_file(self, uri, user_id=None):
        file_id = self._next_id()
        self.entities["file"][file_id] = {"fid": file_id, "uri": uri, "uid": user_id, "status": 1}
        return file_id

    def create_url_alias(self, node_id, alias, langcode="en"):
        path_id = self._next_id()
        self.entities["path"][path_id] = {
            "pid": path_id,
            "source": f"/node/{node_id}",
            "alias": f"/{alias}",
            "langcode": langcode,
        }
        return path_id

    # ========== Deletion ==========

    def delete_entity(self, entity_type, entity_id):
        self.entities.get(entity_type, {}).pop(entity_id, None)

    # ========== Export ==========

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Returns every stored entity, grouped by entity type."""
        return {
            entity_type: [copy.deepcopy(entity) for entity in entities.values()]
            for entity_type, entities in self.entities.items()
        }

    def save_json(self, path: str) -> None:
        """Writes to_dict() to a JSON file."""
        with open(path, "w", encoding="utf-8") as outfile:
            json.dump(self.to_dict(), outfile, indent=2, ensure_ascii=False, default=str)
        main_logger.info(f"Import data written to {path}")
