"""
Node Importer Configuration

This module contains constants and configuration settings for the node importer.
It defines the DUO marker resources that drive the import, the XML namespaces of
the expected RDF/XML documents, logging settings and the defaults used when
writing to the content store.
"""
from typing import Dict

# -----------------------------------------------------------------------------
# GENERAL CONFIGURATION
# -----------------------------------------------------------------------------
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
DEFAULT_STRATEGY = "streaming"
AVAILABLE_STRATEGIES = ("streaming", "indexed", "owlready")

# -----------------------------------------------------------------------------
# NAMESPACES
# -----------------------------------------------------------------------------
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
OWL_NS = "http://www.w3.org/2002/07/owl#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"
DUO_NS = "http://www.lha.org/duo#"

# Prefixes used when a document does not declare its own
DEFAULT_PREFIXES: Dict[str, str] = {
    RDF_NS: "rdf",
    RDFS_NS: "rdfs",
    OWL_NS: "owl",
    XSD_NS: "xsd",
    DUO_NS: "duo",
}

# Clark notation helpers for the attributes and elements read everywhere
RDF_ABOUT = f"{{{RDF_NS}}}about"
RDF_RESOURCE = f"{{{RDF_NS}}}resource"
RDF_DATATYPE = f"{{{RDF_NS}}}datatype"
RDF_TYPE = f"{{{RDF_NS}}}type"
RDFS_SUBCLASSOF = f"{{{RDFS_NS}}}subClassOf"
RDFS_SUBPROPERTYOF = f"{{{RDFS_NS}}}subPropertyOf"
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

OWL_CLASS = f"{{{OWL_NS}}}Class"
OWL_NAMED_INDIVIDUAL = f"{{{OWL_NS}}}NamedIndividual"
OWL_AXIOM = f"{{{OWL_NS}}}Axiom"
OWL_ANNOTATION_PROPERTY = f"{{{OWL_NS}}}AnnotationProperty"
OWL_DATATYPE_PROPERTY = f"{{{OWL_NS}}}DatatypeProperty"
OWL_OBJECT_PROPERTY = f"{{{OWL_NS}}}ObjectProperty"
OWL_ANNOTATED_SOURCE = f"{{{OWL_NS}}}annotatedSource"
OWL_ANNOTATED_PROPERTY = f"{{{OWL_NS}}}annotatedProperty"
OWL_ANNOTATED_TARGET = f"{{{OWL_NS}}}annotatedTarget"

PROPERTY_ELEMENTS = (OWL_ANNOTATION_PROPERTY, OWL_DATATYPE_PROPERTY, OWL_OBJECT_PROPERTY)

# -----------------------------------------------------------------------------
# DUO MARKER RESOURCES
# -----------------------------------------------------------------------------
VOCABULARY = DUO_NS + "Vocabulary"
NODE = DUO_NS + "Node"
IMG = DUO_NS + "Img"
ENTITY = DUO_NS + "Entity"
FILE = DUO_NS + "File"
DOC = DUO_NS + "Doc"  # document references are not imported
ANNOTATION_FIELD = DUO_NS + "field"
DATATYPE_FIELD = DUO_NS + "literal_field"
OBJECT_FIELD = DUO_NS + "reference_field"
NAMED_INDIVIDUAL = OWL_NS + "NamedIndividual"

# Property element kind -> marker property its field properties descend from
FIELD_PROPERTY_MARKERS = (
    (OWL_ANNOTATION_PROPERTY, ANNOTATION_FIELD),
    (OWL_DATATYPE_PROPERTY, DATATYPE_FIELD),
    (OWL_OBJECT_PROPERTY, OBJECT_FIELD),
)

# Axiom annotations (local names)
REF_NUM = "ref_num"
FIELD_ANNOTATION = "field"

# -----------------------------------------------------------------------------
# LITERAL HANDLING
# -----------------------------------------------------------------------------
XSD_DATETIME = ("xsd:dateTime", XSD_NS + "dateTime")
DATE_OUTPUT_FORMAT = "%Y-%m-%d"

# -----------------------------------------------------------------------------
# CONTENT STORE DEFAULTS
# -----------------------------------------------------------------------------
MAX_FIELDNAME_LENGTH = 32
DEFAULT_BODY_FORMAT = "full_html"
DEFAULT_FILE_SCHEME = "public"
DEFAULT_LANGCODE = "en"
DEFAULT_USER_ID = 1

REFERENCE_NODE = "node"
REFERENCE_TAXONOMY_TERM = "taxonomy_term"
REFERENCE_FILE = "file"
DEFERRED_REFERENCE_KINDS = (REFERENCE_TAXONOMY_TERM, REFERENCE_NODE)

# -----------------------------------------------------------------------------
# LOGGING CONFIGURATION
# -----------------------------------------------------------------------------
# Warning messages to suppress in logs
SUPPRESSED_WARNINGS = [
    "does not exist in bundle",
]
