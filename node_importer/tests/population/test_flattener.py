"""
Unit tests for node_importer.population.flattener module.

This module tests how ontology resources are flattened into NodeRecords:
- selection of individuals and classes to import
- bundle detection
- field creation, axiom ordering and date conversion
- classification of referenced resources
"""
import logging

import pytest

from node_importer.errors import (
    ClassificationError, MissingFieldAxiomError, MixedReferenceKindsError,
    UnclassifiedIndividualError, UnresolvableTargetError
)
from node_importer.population.flattener import EntityFlattener
from node_importer.query.closure import ClosureEngine
from node_importer.query.index import OntologyIndex

EX = "http://example.org/test#"

CLASSIFICATION_BODY = """
<owl:ObjectProperty rdf:about="http://www.lha.org/duo#reference_field"/>
<owl:ObjectProperty rdf:about="http://example.org/test#field_related">
    <rdfs:subPropertyOf rdf:resource="http://www.lha.org/duo#reference_field"/>
</owl:ObjectProperty>
<owl:Class rdf:about="http://www.lha.org/duo#Node"/>
<owl:Class rdf:about="http://www.lha.org/duo#Entity"/>
<owl:Class rdf:about="http://www.lha.org/duo#Img"/>
<owl:Class rdf:about="http://example.org/test#Document">
    <rdfs:subClassOf rdf:resource="http://www.lha.org/duo#Node"/>
</owl:Class>
<owl:Class rdf:about="http://example.org/test#Person">
    <rdfs:subClassOf rdf:resource="http://www.lha.org/duo#Entity"/>
</owl:Class>
<owl:Class rdf:about="http://example.org/test#Other"/>
<owl:NamedIndividual rdf:about="http://example.org/test#Stranger">
    <rdf:type rdf:resource="http://example.org/test#Other"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#Bob">
    <rdf:type rdf:resource="http://example.org/test#Person"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#Pic">
    <rdf:type rdf:resource="http://www.lha.org/duo#Img"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#D1">
    <rdf:type rdf:resource="http://example.org/test#Document"/>
    <field_related rdf:resource="http://example.org/test#Stranger"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#D2">
    <rdf:type rdf:resource="http://example.org/test#Document"/>
    <field_related rdf:resource="http://example.org/test#Bob"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#D3">
    <rdf:type rdf:resource="http://example.org/test#Document"/>
    <field_related rdf:resource="http://example.org/test#D1"/>
    <field_related rdf:resource="http://example.org/test#Pic"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#Letter">
    <rdf:type rdf:resource="http://www.lha.org/duo#Doc"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#D4">
    <rdf:type rdf:resource="http://example.org/test#Document"/>
    <field_related rdf:resource="http://example.org/test#Letter"/>
    <field_related rdf:resource="http://example.org/test#D1"/>
</owl:NamedIndividual>
<owl:NamedIndividual rdf:about="http://example.org/test#D5">
    <rdf:type rdf:resource="http://example.org/test#Document"/>
    <field_related rdf:resource="http://example.org/test#Letter"/>
</owl:NamedIndividual>
"""


def make_flattener(path, **kwargs):
    return EntityFlattener(ClosureEngine(OntologyIndex(path)), **kwargs)


@pytest.fixture
def flattener(sample_owl):
    return make_flattener(sample_owl)


@pytest.fixture
def classification_flattener(write_owl):
    return make_flattener(write_owl(CLASSIFICATION_BODY, "classification.owl"))


class TestIndividualSelection:

    def test_named_individuals_below_node(self, flattener):
        # Orphan is typed Node directly and is ignored, Pic1 and Alice are no nodes
        assert flattener.get_individuals() == [EX + "Doc1", EX + "Doc2", EX + "Doc3"]

    def test_classes_as_nodes(self, sample_owl):
        flattener = make_flattener(sample_owl, classes_as_nodes=True)
        assert flattener.get_individuals() == [
            EX + "Report", EX + "Memo", EX + "Doc1", EX + "Doc2", EX + "Doc3"
        ]

    def test_only_leaf_classes_as_nodes(self, sample_owl):
        flattener = make_flattener(sample_owl, classes_as_nodes=True, only_leaf_classes_as_nodes=True)
        assert flattener.get_individuals() == [EX + "Memo", EX + "Doc1", EX + "Doc2", EX + "Doc3"]

    def test_only_leaf_classes_requires_classes_as_nodes(self, sample_owl):
        flattener = make_flattener(sample_owl, only_leaf_classes_as_nodes=True)
        assert flattener.get_individuals() == [EX + "Doc1", EX + "Doc2", EX + "Doc3"]


class TestBundles:

    @pytest.mark.parametrize("uri, expected", [
        (EX + "Doc1", "document"),
        (EX + "Doc2", "document"),
        (EX + "Memo", "document"),
        (EX + "Pic1", None),
        (EX + "Document", None),
    ])
    def test_get_bundle(self, flattener, uri, expected):
        assert flattener.get_bundle(uri) == expected

    def test_unclassified_individual_raises(self, flattener):
        with pytest.raises(UnclassifiedIndividualError) as excinfo:
            flattener.flatten(EX + "Pic1")
        assert excinfo.value.uri == EX + "Pic1"


class TestFlatten:
    """Tests for the complete NodeRecord of the sample document."""

    @pytest.fixture
    def doc1(self, flattener):
        return flattener.flatten(EX + "Doc1")

    def test_record_attributes(self, doc1):
        assert doc1.title == "First Document"
        assert doc1.type == "document"
        assert doc1.alias == "doc-one"
        assert doc1.uuid is None

    def test_field_order(self, doc1):
        assert [field.field_name for field in doc1.fields] == [
            "body", "field_author", "field_published", "field_related",
            "field_image", "field_genre", "field_editor"
        ]

    def test_body(self, doc1):
        body = doc1.get_field("body")
        assert body.value == {"value": "<p>Body</p>", "summary": None, "format": "full_html"}
        assert body.references is None

    def test_axiom_targets_come_first(self, doc1):
        assert doc1.get_field("field_author").value == ["b", "a"]

    def test_dates_are_converted(self, doc1):
        assert doc1.get_field("field_published").value == ["2020-05-17"]

    def test_node_reference(self, doc1):
        related = doc1.get_field("field_related")
        assert related.value == ["Second Document"]
        assert related.references == "node"

    def test_image_reference(self, doc1):
        image = doc1.get_field("field_image")
        assert image.value == [{"alt": "A picture", "title": "Pic one", "uri": "images/pic1.png"}]
        assert image.references == "file"

    def test_taxonomy_reference(self, doc1):
        genre = doc1.get_field("field_genre")
        assert genre.value == [{"vid": "Genre", "name": "Fiction"}]
        assert genre.references == "taxonomy_term"

    def test_entity_projection(self, doc1):
        editor = doc1.get_field("field_editor")
        assert editor.value == ["Alice Smith"]
        assert editor.references is None

    def test_title_falls_back_to_local_name(self, flattener):
        record = flattener.flatten(EX + "Doc3")
        assert record.title == "Doc3"
        assert record.get_field("body").value["value"] is None

    def test_field_tags(self, flattener):
        record = flattener.flatten(EX + "Doc3")
        tags = record.get_field("field_tags")
        assert tags.value == [{"vid": "Genre", "name": "Fiction"}]
        assert tags.references == "taxonomy_term"

    def test_no_field_tags_without_vocabulary_type(self, doc1):
        assert doc1.get_field("field_tags") is None

    def test_class_as_node(self, flattener):
        record = flattener.flatten(EX + "Memo")
        assert record.title == "Memo"
        assert record.type == "document"
        assert [field.field_name for field in record.fields] == ["body"]


class TestSortedValues:

    def test_missing_assertions_give_empty_lists(self, flattener):
        assert flattener.get_sorted_literals(EX + "Doc1", EX + "field_related") == []
        assert flattener.get_sorted_resources(EX + "Doc1", EX + "field_author") == []
        assert flattener.create_node_field(EX + "Doc2", EX + "field_author") is None

    def test_sorted_resources(self, flattener):
        assert flattener.get_sorted_resources(EX + "Doc1", EX + "field_editor") == [EX + "Alice"]


class TestTargetClassification:
    """Tests for referenced resources that cannot be flattened normally."""

    def test_unresolvable_target(self, classification_flattener):
        with pytest.raises(UnresolvableTargetError) as excinfo:
            classification_flattener.flatten(EX + "D1")

        assert isinstance(excinfo.value, ClassificationError)
        assert excinfo.value.target == EX + "Stranger"
        assert excinfo.value.property_uri == EX + "field_related"

    def test_entity_without_field_axiom(self, classification_flattener):
        with pytest.raises(MissingFieldAxiomError) as excinfo:
            classification_flattener.flatten(EX + "D2")

        assert not isinstance(excinfo.value, ClassificationError)
        assert excinfo.value.target == EX + "Bob"

    def test_mixed_reference_kinds_raise(self, classification_flattener):
        with pytest.raises(MixedReferenceKindsError) as excinfo:
            classification_flattener.flatten(EX + "D3")

        assert isinstance(excinfo.value, ClassificationError)
        assert excinfo.value.uri == EX + "D3"
        assert excinfo.value.kinds == ["node", "file"]

    def test_document_targets_are_skipped(self, classification_flattener, caplog):
        with caplog.at_level(logging.WARNING, logger="node_import"):
            record = classification_flattener.flatten(EX + "D4")

        related = record.get_field("field_related")
        assert related.value == ["D1"]
        assert related.references == "node"
        assert "Skipping document reference Letter of D4" in caplog.text

    def test_field_with_only_document_targets_is_dropped(self, classification_flattener):
        record = classification_flattener.flatten(EX + "D5")
        assert record.get_field("field_related") is None
