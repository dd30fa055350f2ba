from .index import OntologyIndex
from .strategy import (
    HierarchyStrategy, StreamingHierarchy, IndexedHierarchy, OwlreadyHierarchy,
    make_strategy
)
from .closure import ClosureEngine

__all__ = [
    'OntologyIndex',
    'HierarchyStrategy',
    'StreamingHierarchy',
    'IndexedHierarchy',
    'OwlreadyHierarchy',
    'make_strategy',
    'ClosureEngine',
]
