"""Model subpackage: field paths and comparison nodes.

Re-exports the public API for the model module:
- FieldPath: immutable location of a value relative to the comparison root
- ComparisonNode: (path, actual, expected) unit of traversal work
"""

from object_deep_diff.model.path import FieldPath
from object_deep_diff.model.node import ComparisonNode, PairKey

__all__ = ["ComparisonNode", "FieldPath", "PairKey"]
