"""
Unit tests for node_importer.population.linking module.

Tests the second pass that resolves deferred node references and tag parents.
"""
import pytest

from node_importer.errors import UnsupportedReferenceError
from node_importer.model import FieldRecord, NodeRecord, PendingParentLink, PendingReference, TagRecord
from node_importer.population.core import ImportContext
from node_importer.population.linking import ReferenceResolver
from node_importer.population.nodes import NodeImporter
from node_importer.population.vocabulary import VocabularyImporter
from node_importer.store.memory import InMemoryContentStore
from node_importer.utils.logging import link_logger


@pytest.fixture
def context():
    return ImportContext(InMemoryContentStore())


@pytest.fixture
def vocabulary_importer(context):
    return VocabularyImporter(context)


@pytest.fixture
def node_importer(context):
    return NodeImporter(context)


@pytest.fixture
def resolver(context, vocabulary_importer, node_importer):
    return ReferenceResolver(context, vocabulary_importer, node_importer)


def fields_of(context, node_id):
    return context.store.load_node(node_id)["fields"]


class TestNodeReferences:

    def test_forward_reference_is_resolved(self, context, node_importer, resolver):
        first = node_importer.create_node(NodeRecord(title="First", type="document", fields=[
            FieldRecord("field_related", ["Second"], references="node"),
        ]))
        second = node_importer.create_node(NodeRecord(title="Second", type="document"))

        assert resolver.resolve() == 1
        assert fields_of(context, first)["field_related"] == [second]
        assert context.pending_references() == []

    def test_taxonomy_reference_is_resolved(self, context, node_importer, vocabulary_importer, resolver):
        tid = vocabulary_importer.create_tag("Genre", "Fiction")
        node_id = node_importer.create_node(NodeRecord(title="Doc", type="document", fields=[
            FieldRecord("field_tags", [{"vid": "Genre", "name": "Fiction"}], references="taxonomy_term"),
        ]))

        resolver.insert_node_references()

        assert fields_of(context, node_id)["field_tags"] == [tid]

    def test_missing_targets_are_dropped(self, context, node_importer, resolver, mocker):
        warning = mocker.patch.object(link_logger, "warning")
        other = node_importer.create_node(NodeRecord(title="Other", type="document"))
        node_id = node_importer.create_node(NodeRecord(title="Doc", type="document", fields=[
            FieldRecord("field_related", ["Missing", "Other"], references="node"),
        ]))

        resolver.insert_node_references()

        assert fields_of(context, node_id)["field_related"] == [other]
        messages = [call[0][0] for call in warning.call_args_list]
        assert any("'Missing'" in message for message in messages)

    def test_unsupported_reference_kind_raises(self, context, resolver):
        context.defer_reference(PendingReference(1, "field_owner", "user", ["admin"]))

        with pytest.raises(UnsupportedReferenceError) as excinfo:
            resolver.insert_node_references()
        assert excinfo.value.reference_kind == "user"
        assert excinfo.value.field_name == "field_owner"

    def test_re_recorded_reference_replaces_earlier_entry(self, context):
        context.defer_reference(PendingReference(1, "field_related", "node", ["A"]))
        context.defer_reference(PendingReference(1, "field_related", "node", ["B"]))

        pending = context.pending_references()
        assert len(pending) == 1
        assert pending[0].targets == ["B"]

    def test_default_node_importer(self, context, vocabulary_importer):
        resolver = ReferenceResolver(context, vocabulary_importer)
        assert isinstance(resolver.node_importer, NodeImporter)
        assert resolver.node_importer.context is context


class TestParentLinks:

    def test_parent_links_are_applied_and_drained(self, context, vocabulary_importer, resolver):
        parent = vocabulary_importer.create_tag("Genre", "NonFiction")
        child = vocabulary_importer.create_tag("Genre", "Fiction")
        context.defer_parent_link(PendingParentLink("Genre", [
            TagRecord("Genre", "NonFiction", ["Genre"]),
            TagRecord("Genre", "Fiction", ["NonFiction"]),
        ]))

        assert resolver.resolve() == 0

        terms = context.store.entities["taxonomy_term"]
        assert terms[child]["parent"] == [parent]
        assert terms[parent]["parent"] == []
        assert context.pending_parent_links() == []
        assert context.report()["pending_parent_links"] == 0
