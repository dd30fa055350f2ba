"""
Type conversion utilities for the node importer.

This module provides helpers for turning ontology identifiers and lexical
literals into the plain strings written to the content store.
"""
import re
from typing import Any, Optional

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError

from node_importer.config import XSD_DATETIME, DATE_OUTPUT_FORMAT
from node_importer.errors import ArgumentError
from node_importer.utils.logging import node_logger

_RDFS_TYPE_SUFFIX = re.compile(r'^"?(.*?)"?\^\^.*$', re.DOTALL)


def require(value: Any, name: str) -> Any:
    """
    Returns value unchanged, raising ArgumentError if it is None or empty.

    Args:
        value: The argument to check
        name: Parameter name reported in the error
    """
    if value is None or (isinstance(value, str) and value == ''):
        raise ArgumentError(name)
    return value


def local_name(uri: Optional[str]) -> Optional[str]:
    """
    Returns the fragment after the last '#' of a URI (the whole URI if there is none).

    Args:
        uri: The URI to shorten

    Returns:
        The local name, or None for a missing URI
    """
    if uri is None:
        return None
    return re.sub(r'^.*#', '', str(uri))


def remove_rdfs_type(value: Optional[str]) -> Optional[str]:
    """
    Returns the string without an rdfs type at the end (e.g. '^^xsd:integer').

    Quotes around the lexical form of a typed literal are removed as well, so
    both '5^^xsd:integer' and '"5"^^xsd:integer' become '5'.

    Args:
        value: String with or without rdfs type suffix
    """
    if value is None:
        return None
    match = _RDFS_TYPE_SUFFIX.match(value)
    if match:
        return match.group(1)
    return value


def is_datetime_type(datatype: Optional[str]) -> bool:
    """Checks whether a declared datatype is xsd:dateTime (prefixed or full URI)."""
    return datatype in XSD_DATETIME


def literal_value_to_string(value: Optional[str], datatype: Optional[str] = None) -> Optional[str]:
    """
    Returns the value of a literal as string. Dates are converted to 'YYYY-MM-DD'.

    Args:
        value: Lexical form of the literal
        datatype: Declared datatype of the literal, if any

    Returns:
        The converted string, or None for a missing value
    """
    if value is None:
        return None

    if is_datetime_type(datatype):
        stripped = remove_rdfs_type(value).strip()
        try:
            return dateutil_parser.isoparse(stripped).strftime(DATE_OUTPUT_FORMAT)
        except (ParserError, ValueError, OverflowError) as e:
            node_logger.warning(f"Could not parse xsd:dateTime literal '{value}': {e}. Keeping lexical value.")
            return stripped

    return remove_rdfs_type(value)


def bundle_name(name: Any) -> Optional[str]:
    """
    Converts a class local name into a bundle machine name.

    Args:
        name: Local name of a Node subclass

    Returns:
        The lower-cased name with every non-alphanumeric character replaced by '_'
    """
    if name is None:
        return None
    return re.sub(r'[^A-Za-z0-9]', '_', str(name)).lower()
