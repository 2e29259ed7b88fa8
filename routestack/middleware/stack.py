"""Ordered middleware stacks shared by routes and route groups.

A stack holds tagged entries: an ``Identifier`` is looked up through a
resolver when the stack is consumed, a ``Unit`` is a middleware that is
already built. Entries are tagged once, when they are added, so consuming the
stack never has to guess what an entry is.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from routestack.protocols import MiddlewareProtocol, ResolverProtocol


@dataclass(frozen=True, slots=True)
class Identifier:
    """A middleware reference resolved lazily, a class or a ``module:Symbol`` string."""

    value: type | str

    def resolve(self, resolver: ResolverProtocol) -> Any:
        return resolver.get(self.value)


@dataclass(frozen=True, slots=True)
class Unit:
    """A middleware instance that is ready to run."""

    value: MiddlewareProtocol

    def resolve(self, resolver: ResolverProtocol) -> Any:
        return self.value


type MiddlewareEntry = Identifier | Unit


def as_entry(middleware: Any) -> MiddlewareEntry:
    """Tag a raw middleware reference.

    Strings and classes are identifiers; anything else is treated as a ready
    middleware unit.
    """
    match middleware:
        case Identifier() | Unit():
            return middleware
        case str() | type():
            return Identifier(middleware)
        case _:
            return Unit(middleware)


class MiddlewareStackView(Iterable):
    """Restartable, non-consuming view over the entries left in a stack.

    Every iteration walks the stack as it is at that moment and yields the raw
    middleware references in insertion order.
    """

    __slots__ = ("_stack",)

    def __init__(self, stack: "MiddlewareStack"):
        self._stack = stack

    def __iter__(self) -> Iterator[Any]:
        for entry in self._stack.entries():
            yield entry.value

    def __len__(self) -> int:
        return len(self._stack)

    def __repr__(self) -> str:
        return f"MiddlewareStackView({list(self)!r})"


class MiddlewareStack:
    """An ordered middleware sequence with a consuming front cursor.

    Examples:
        ```python
        stack = MiddlewareStack()
        stack.append(AuthMiddleware).prepend("myapp.middleware:Timing")

        # Resolves "myapp.middleware:Timing" through the resolver
        first = stack.shift(resolver)
        ```
    """

    def __init__(self, entries: Iterable[Any] = ()):
        self._entries: deque[MiddlewareEntry] = deque(as_entry(e) for e in entries)

    def append(self, middleware: Any) -> "MiddlewareStack":
        self._entries.append(as_entry(middleware))
        return self

    def extend(self, middlewares: Iterable[Any]) -> "MiddlewareStack":
        for middleware in middlewares:
            self.append(middleware)
        return self

    def prepend(self, middleware: Any) -> "MiddlewareStack":
        self._entries.appendleft(as_entry(middleware))
        return self

    def peek(self) -> MiddlewareEntry | None:
        """Return the front entry without consuming it."""
        return self._entries[0] if self._entries else None

    def shift(self, resolver: ResolverProtocol) -> Any | None:
        """Remove the front entry and return it resolved, or None when empty."""
        if not self._entries:
            return None

        return self._entries.popleft().resolve(resolver)

    def entries(self) -> tuple[MiddlewareEntry, ...]:
        return tuple(self._entries)

    def copy(self) -> "MiddlewareStack":
        """Return an independent stack with the same entries.

        Request-time consumers work on a copy so the declared stack can be
        reused by every request.
        """
        return MiddlewareStack(self._entries)

    def view(self) -> MiddlewareStackView:
        return MiddlewareStackView(self)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"MiddlewareStack({list(self._entries)!r})"
