"""
Shared fixtures for the node importer tests.

The sample ontology contains one vocabulary (Genre > NonFiction > Fiction), one
bundle (Document > Report > Memo), an image class, an entity class and a few
individuals referencing each other.
"""
import textwrap

import pytest

EX = "http://example.org/test#"
DUO = "http://www.lha.org/duo#"

OWL_HEADER = """<?xml version="1.0"?>
<rdf:RDF xmlns="http://example.org/test#"
     xml:base="http://example.org/test"
     xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
     xmlns:owl="http://www.w3.org/2002/07/owl#"
     xmlns:xsd="http://www.w3.org/2001/XMLSchema#"
     xmlns:rdfs="http://www.w3.org/2000/01/rdf-schema#"
     xmlns:duo="http://www.lha.org/duo#">
    <owl:Ontology rdf:about="http://example.org/test"/>
"""

OWL_FOOTER = """</rdf:RDF>
"""

SAMPLE_BODY = """
    <!-- Annotation properties -->
    <owl:AnnotationProperty rdf:about="http://www.lha.org/duo#field"/>
    <owl:AnnotationProperty rdf:about="http://www.lha.org/duo#title"/>
    <owl:AnnotationProperty rdf:about="http://www.lha.org/duo#content"/>
    <owl:AnnotationProperty rdf:about="http://www.lha.org/duo#summary"/>
    <owl:AnnotationProperty rdf:about="http://www.lha.org/duo#alias"/>
    <owl:AnnotationProperty rdf:about="http://www.lha.org/duo#ref_num"/>
    <owl:AnnotationProperty rdf:about="http://example.org/test#field_author">
        <rdfs:subPropertyOf rdf:resource="http://www.lha.org/duo#field"/>
    </owl:AnnotationProperty>

    <!-- Data properties -->
    <owl:DatatypeProperty rdf:about="http://www.lha.org/duo#literal_field"/>
    <owl:DatatypeProperty rdf:about="http://example.org/test#field_published">
        <rdfs:subPropertyOf rdf:resource="http://www.lha.org/duo#literal_field"/>
    </owl:DatatypeProperty>

    <!-- Object properties -->
    <owl:ObjectProperty rdf:about="http://www.lha.org/duo#reference_field"/>
    <owl:ObjectProperty rdf:about="http://example.org/test#field_related">
        <rdfs:subPropertyOf rdf:resource="http://www.lha.org/duo#reference_field"/>
    </owl:ObjectProperty>
    <owl:ObjectProperty rdf:about="http://example.org/test#field_image">
        <rdfs:subPropertyOf rdf:resource="http://example.org/test#field_related"/>
    </owl:ObjectProperty>
    <owl:ObjectProperty rdf:about="http://example.org/test#field_genre">
        <rdfs:subPropertyOf rdf:resource="http://www.lha.org/duo#reference_field"/>
    </owl:ObjectProperty>
    <owl:ObjectProperty rdf:about="http://example.org/test#field_editor">
        <rdfs:subPropertyOf rdf:resource="http://www.lha.org/duo#reference_field"/>
    </owl:ObjectProperty>

    <!-- Classes -->
    <owl:Class rdf:about="http://www.lha.org/duo#Vocabulary"/>
    <owl:Class rdf:about="http://www.lha.org/duo#Node"/>
    <owl:Class rdf:about="http://www.lha.org/duo#Img"/>
    <owl:Class rdf:about="http://www.lha.org/duo#File"/>
    <owl:Class rdf:about="http://www.lha.org/duo#Entity"/>
    <owl:Class rdf:about="http://example.org/test#Genre">
        <rdfs:subClassOf rdf:resource="http://www.lha.org/duo#Vocabulary"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#NonFiction">
        <rdfs:subClassOf rdf:resource="http://example.org/test#Genre"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#Fiction">
        <rdfs:subClassOf rdf:resource="http://example.org/test#NonFiction"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#Document">
        <rdfs:subClassOf rdf:resource="http://www.lha.org/duo#Node"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#Report">
        <rdfs:subClassOf rdf:resource="http://example.org/test#Document"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#Memo">
        <rdfs:subClassOf rdf:resource="http://example.org/test#Report"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#Picture">
        <rdfs:subClassOf rdf:resource="http://www.lha.org/duo#Img"/>
    </owl:Class>
    <owl:Class rdf:about="http://example.org/test#Person">
        <rdfs:subClassOf rdf:resource="http://www.lha.org/duo#Entity"/>
    </owl:Class>

    <!-- Individuals -->
    <owl:NamedIndividual rdf:about="http://example.org/test#Doc1">
        <rdf:type rdf:resource="http://example.org/test#Report"/>
        <duo:title>First Document</duo:title>
        <duo:content>&lt;p&gt;Body&lt;/p&gt;</duo:content>
        <duo:alias>doc-one</duo:alias>
        <field_author>a</field_author>
        <field_author>b</field_author>
        <field_published rdf:datatype="http://www.w3.org/2001/XMLSchema#dateTime">2020-05-17T10:00:00</field_published>
        <field_related rdf:resource="http://example.org/test#Doc2"/>
        <field_image rdf:resource="http://example.org/test#Pic1"/>
        <field_genre rdf:resource="http://example.org/test#Fiction"/>
        <field_editor rdf:resource="http://example.org/test#Alice"/>
    </owl:NamedIndividual>
    <owl:NamedIndividual rdf:about="http://example.org/test#Doc2">
        <rdf:type rdf:resource="http://example.org/test#Document"/>
        <duo:title>Second Document</duo:title>
    </owl:NamedIndividual>
    <owl:NamedIndividual rdf:about="http://example.org/test#Doc3">
        <rdf:type rdf:resource="http://example.org/test#Report"/>
        <rdf:type rdf:resource="http://example.org/test#Fiction"/>
    </owl:NamedIndividual>
    <owl:NamedIndividual rdf:about="http://example.org/test#Pic1">
        <rdf:type rdf:resource="http://example.org/test#Picture"/>
        <duo:title>Pic one</duo:title>
        <duo:alt>A picture</duo:alt>
        <duo:uri>images/pic1.png</duo:uri>
    </owl:NamedIndividual>
    <owl:NamedIndividual rdf:about="http://example.org/test#Alice">
        <rdf:type rdf:resource="http://example.org/test#Person"/>
        <duo:full_name>Alice Smith</duo:full_name>
    </owl:NamedIndividual>
    <owl:NamedIndividual rdf:about="http://example.org/test#Orphan">
        <rdf:type rdf:resource="http://www.lha.org/duo#Node"/>
    </owl:NamedIndividual>

    <!-- Axioms -->
    <owl:Axiom>
        <owl:annotatedSource rdf:resource="http://example.org/test#Doc1"/>
        <owl:annotatedProperty rdf:resource="http://example.org/test#field_author"/>
        <owl:annotatedTarget>b</owl:annotatedTarget>
        <duo:ref_num rdf:datatype="http://www.w3.org/2001/XMLSchema#integer">1</duo:ref_num>
    </owl:Axiom>
    <owl:Axiom>
        <owl:annotatedSource rdf:resource="http://example.org/test#Doc1"/>
        <owl:annotatedProperty rdf:resource="http://example.org/test#field_editor"/>
        <owl:annotatedTarget rdf:resource="http://example.org/test#Alice"/>
        <duo:field rdf:resource="http://www.lha.org/duo#full_name"/>
    </owl:Axiom>
"""


def build_owl(body: str) -> str:
    """Wraps top-level declarations into a complete RDF/XML document."""
    return OWL_HEADER + textwrap.dedent(body) + OWL_FOOTER


@pytest.fixture
def write_owl(tmp_path):
    """Factory fixture writing an RDF/XML document built from body to tmp_path."""
    def _write(body: str, name: str = "ontology.owl") -> str:
        path = tmp_path / name
        path.write_text(build_owl(body), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def sample_owl(write_owl):
    """Path of the sample ontology."""
    return write_owl(SAMPLE_BODY, "sample.owl")
