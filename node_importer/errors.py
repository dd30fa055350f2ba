"""Custom exceptions for the node importer.

This module defines the error taxonomy of an import run:
- ArgumentError: a required URI or argument is missing
- OntologyParseError: the ontology document is not well-formed XML
- ClassificationError: one individual or field cannot be classified (skippable),
  including fields whose targets mix reference kinds
- MissingFieldAxiomError: an Entity reference has no field-naming axiom (fatal)
- UnsupportedReferenceError: a deferred reference of an unknown kind (fatal)
- VocabularyExistsError: a vocabulary exists and overwrite is off (fatal)
"""
from typing import List, Optional


class NodeImporterError(Exception):
    """Base class for all errors raised during an import run."""


class ArgumentError(NodeImporterError, ValueError):
    """Raised when a required argument is missing or empty.

    Attributes:
        parameter: Name of the missing parameter
    """

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"Error: parameter '{parameter}' missing")


class OntologyParseError(NodeImporterError):
    """Raised when the ontology document cannot be parsed.

    Attributes:
        file_path: Path of the document
    """

    def __init__(self, file_path: str, message: str) -> None:
        self.file_path = file_path
        super().__init__(f"Could not parse ontology '{file_path}': {message}")


class ClassificationError(NodeImporterError):
    """Raised when an individual or one of its fields cannot be classified.

    The run logs the error and continues with the next individual.

    Attributes:
        uri: The offending resource
    """

    def __init__(self, uri: str, message: str) -> None:
        self.uri = uri
        super().__init__(message)


class UnclassifiedIndividualError(ClassificationError):
    """Raised when an individual instantiates no direct subclass of Node."""

    def __init__(self, uri: str) -> None:
        super().__init__(uri, f"Could not determine bundle for '{uri}': no Node subclass matches.")


class UnresolvableTargetError(ClassificationError):
    """Raised when a referenced resource matches no known target category.

    Attributes:
        property_uri: The property holding the reference
        target: The referenced resource
    """

    def __init__(self, uri: str, property_uri: str, target: Optional[str] = None) -> None:
        self.property_uri = property_uri
        self.target = target
        super().__init__(
            uri,
            f"Could not determine target fields for '{uri}' and property '{property_uri}'"
            + (f" (target '{target}')." if target else ".")
        )


class MixedReferenceKindsError(ClassificationError):
    """Raised when the targets of one field are of different reference kinds.

    Attributes:
        property_uri: The property holding the references
        kinds: The kinds found, in target order
    """

    def __init__(self, uri: str, property_uri: str, kinds: List[Optional[str]]) -> None:
        self.property_uri = property_uri
        self.kinds = kinds
        super().__init__(
            uri,
            f"Field '{property_uri}' of '{uri}' mixes reference kinds "
            + ", ".join(f"'{kind or 'value'}'" for kind in kinds) + "."
        )


class MissingFieldAxiomError(NodeImporterError):
    """Raised when an Entity target is referenced without a field-naming axiom.

    Attributes:
        uri: The referencing individual
        property_uri: The property holding the reference
        target: The referenced Entity
    """

    def __init__(self, uri: str, property_uri: str, target: str) -> None:
        self.uri = uri
        self.property_uri = property_uri
        self.target = target
        super().__init__(
            f"Error: Entity '{target}' referenced by '{uri}' but no field given ({property_uri})."
        )


class UnsupportedReferenceError(NodeImporterError):
    """Raised when a deferred reference has a kind other than node or taxonomy_term.

    Attributes:
        reference_kind: The unsupported kind
        field_name: The field holding the reference
    """

    def __init__(self, reference_kind: str, field_name: str) -> None:
        self.reference_kind = reference_kind
        self.field_name = field_name
        super().__init__(
            f"Error: not supported entity type '{reference_kind}' in reference found (field '{field_name}')."
        )


class VocabularyExistsError(NodeImporterError):
    """Raised when a vocabulary already exists and overwrite is disabled.

    Attributes:
        vid: The vocabulary id
    """

    def __init__(self, vid: str) -> None:
        self.vid = vid
        super().__init__(
            f"Error: vocabulary with vid '{vid}' already exists. "
            "Use overwrite if you want to replace it and try again."
        )
