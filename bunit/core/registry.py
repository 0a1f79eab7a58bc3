"""Test registry and the registration protocol.

Tests are declared during an explicit initialization phase (importing the
configured test modules). The composition root freezes the registry before
the runner starts; from then on it is read-only.
"""

import logging
from collections.abc import Callable, Iterator
from typing import overload

from .models import UNGROUPED, TestAction, TestUnit

logger = logging.getLogger(__name__)


class RegistryFrozenError(RuntimeError):
    """Raised when registering after the registration phase has ended."""


class TestRegistry:
    """Mapping of group name to an ordered mapping of test name to TestUnit.

    Groups and tests keep insertion order. Re-registering an existing
    (group, name) pair replaces the earlier unit in place.
    """

    __test__ = False

    def __init__(self) -> None:
        self._groups: dict[str, dict[str, TestUnit]] = {}
        self._frozen = False
        self._total: int | None = None

    def register(self, group: str, name: str, action: TestAction) -> TestUnit:
        """Upsert the action under (group, name).

        This is the only place a TestUnit is constructed. A blank group
        falls back to "ungrouped".

        Returns:
            The newly registered TestUnit.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"cannot register '{name}' in group '{group}': registry is frozen"
            )

        if not group or not group.strip():
            group = UNGROUPED
        unit = TestUnit(name=name, group=group, action=action)
        tests = self._groups.setdefault(group, {})
        if name in tests:
            logger.debug(f"Replacing test '{name}' in group '{group}'")
        tests[name] = unit
        return unit

    def freeze(self) -> None:
        """End the registration phase. Idempotent."""
        if not self._frozen:
            self._frozen = True
            self._total = self._count()
            logger.debug(
                f"Registry frozen with {self._total} tests in {self.group_count()} groups"
            )

    @property
    def frozen(self) -> bool:
        return self._frozen

    def group_count(self) -> int:
        return len(self._groups)

    def total_test_count(self) -> int:
        """Sum of per-group test counts, cached once frozen."""
        if self._total is not None:
            return self._total
        return self._count()

    def _count(self) -> int:
        return sum(len(tests) for tests in self._groups.values())

    def groups(self) -> Iterator[tuple[str, tuple[TestUnit, ...]]]:
        """Yield (group name, tests) pairs in registration order."""
        for group, tests in self._groups.items():
            yield group, tuple(tests.values())

    def get(self, group: str, name: str) -> TestUnit | None:
        return self._groups.get(group, {}).get(name)

    def __len__(self) -> int:
        return self.total_test_count()

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        group, name = key
        return self.get(group, name) is not None


default_registry = TestRegistry()


def declare_test(
    name: str,
    action: TestAction,
    group: str = UNGROUPED,
    registry: TestRegistry | None = None,
) -> TestUnit:
    """Declare a test by pairing a name, a group and a zero-argument action.

    Args:
        name: Test name, unique within its group.
        action: Zero-argument callable; returning normally means success.
        group: Group label, "ungrouped" when omitted.
        registry: Target registry, the process-wide default when omitted.

    Returns:
        The registered TestUnit.
    """
    target = registry if registry is not None else default_registry
    return target.register(group, name, action)


@overload
def case(func: Callable[[], object], /) -> Callable[[], object]: ...


@overload
def case(
    *,
    name: str | None = None,
    group: str = UNGROUPED,
    registry: TestRegistry | None = None,
) -> Callable[[Callable[[], object]], Callable[[], object]]: ...


def case(
    func: Callable[[], object] | None = None,
    /,
    *,
    name: str | None = None,
    group: str = UNGROUPED,
    registry: TestRegistry | None = None,
):
    """Decorator form of declare_test.

    Usable bare (``@case``) or with options (``@case(group="tokenizing")``).
    The decorated function is returned unchanged.
    """

    def decorator(fn: Callable[[], object]) -> Callable[[], object]:
        declare_test(name or fn.__name__, fn, group=group, registry=registry)
        return fn

    if func is not None:
        return decorator(func)
    return decorator
