from .base import ContentStore
from .memory import InMemoryContentStore

__all__ = [
    'ContentStore',
    'InMemoryContentStore',
]
