"""RecursiveComparator: orchestrator that wires policy resolution + Traversal.

This is the central wiring layer between the traversal engine and the public
API.  It resolves the policy once per call (so configuration errors surface
before any traversal), runs a fresh ``Traversal`` and packages the
differences, bookkeeping counters and timing into a ``ComparisonResult``.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from object_deep_diff.algorithm.config import ComparisonPolicy
from object_deep_diff.algorithm.traversal import Traversal
from object_deep_diff.result import ComparisonResult

__all__ = ["RecursiveComparator"]

logger = logging.getLogger(__name__)


class RecursiveComparator:
    """Orchestrator for recursive structural comparison.

    The comparator only holds the immutable policy; every ``compare()`` call
    gets its own work queue and visited set, so one instance can be reused
    freely, including from several threads at once.

    Example::

        from object_deep_diff import ComparisonPolicy, RecursiveComparator

        cmp = RecursiveComparator(ComparisonPolicy(ignored_fields={"id"}))
        result = cmp.compare(actual_order, expected_order)
        for diff in result.differences:
            print(diff.rendered_path, diff.kind)
    """

    def __init__(self, policy: ComparisonPolicy | None = None) -> None:
        """Initialise the comparator.

        Args:
            policy: Ignore rules, comparators and type-checking switches.
                Defaults to ``ComparisonPolicy()``.
        """
        self._policy: ComparisonPolicy = policy if policy is not None else ComparisonPolicy()

    @property
    def policy(self) -> ComparisonPolicy:
        return self._policy

    def compare(self, actual: Any, expected: Any) -> ComparisonResult:
        """Compare two values of any shape and return a ComparisonResult.

        Calling this twice with the same inputs yields the same differences
        in the same order.

        Args:
            actual:   The value produced by the code under test.
            expected: The reference value.

        Returns:
            A ``ComparisonResult``; ``result.is_equal`` is True when no
            differences were found.

        Raises:
            PolicyConfigurationError: If the policy cannot be resolved.
        """
        t0 = time.perf_counter()

        resolved = self._policy.resolve()
        traversal = Traversal(resolved)
        differences = traversal.run(actual, expected)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug(
            "Compared %d nodes (%d cycle skips) in %.3f ms: %d differences",
            traversal.nodes_compared,
            traversal.cycles_skipped,
            elapsed_ms,
            len(differences),
        )

        return ComparisonResult(
            differences=tuple(differences),
            nodes_compared=traversal.nodes_compared,
            cycles_skipped=traversal.cycles_skipped,
            computation_time_ms=elapsed_ms,
        )
