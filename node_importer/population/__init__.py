from .core import ImportContext
from .nodes import NodeImporter
from .vocabulary import VocabularyImporter, VocabularyBuilder
from .flattener import EntityFlattener
from .linking import ReferenceResolver

# List functions/classes to expose at the package level
__all__ = [
    'ImportContext',
    'NodeImporter',
    'VocabularyImporter',
    'VocabularyBuilder',
    'EntityFlattener',
    'ReferenceResolver',
]
