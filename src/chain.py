"""Ordered strategy chains: run strategies until one produces a result."""

import inspect
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class StrategyChain(Generic[T]):
    """Runs named strategies in order and stops at the first non-None result.

    Strategies may be plain functions or coroutine functions. The chain is
    strictly sequential: a later strategy only runs after every earlier one
    returned None.

    Args:
        strategies: ``(name, callable)`` pairs in priority order.
    """

    def __init__(self, strategies: Sequence[tuple[str, Callable[..., Any]]]) -> None:
        self._strategies = list(strategies)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._strategies]

    def run_sync(self, *args: Any) -> tuple[str, T] | None:
        """Run synchronous strategies only."""
        for name, strategy in self._strategies:
            result = strategy(*args)
            if result is not None:
                return name, result
        return None

    async def run(self, *args: Any) -> tuple[str, T] | None:
        """Run the chain, awaiting strategies that return awaitables.

        Returns:
            ``(strategy_name, result)`` for the first hit, or None.
        """
        for name, strategy in self._strategies:
            result = strategy(*args)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                return name, result
        return None
