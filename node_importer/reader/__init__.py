from .cursor import NodeKind, CursorNode, StreamingCursor, split_tag

__all__ = [
    'NodeKind',
    'CursorNode',
    'StreamingCursor',
    'split_tag',
]
