"""Reactive Graph — writable signals and derived nodes with synchronous push propagation.

Invariants:
    - Derived nodes are pure functions of their sources' current values
    - Registration order is a topological order (sources must exist before dependents)
    - A write recomputes every affected derived node, in registration order,
      before any subscriber is notified — subscribers never see stale derived state
    - A node whose new value == old value does not count as changed (no propagation,
      no notification)
    - Nested batch() blocks flush once, at the outermost exit

Design Decisions:
    - Explicit graph object owned by each store (no module-level reactive state)
    - Equality-based change detection: registries are copy-on-write, so == is
      the natural "did it change" test and keeps derived recomputation minimal
    - Subscriber exceptions propagate to the writer (never swallowed)
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sequence

Subscriber = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class Node:
    """A named value in a ReactiveGraph that can be observed."""

    def __init__(self, graph: "ReactiveGraph", name: str, value: Any):
        self._graph = graph
        self.name = name
        self._value = value
        self._subscribers: list[Subscriber] = []

    @property
    def value(self) -> Any:
        return self._value

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Call `callback(value)` after each propagation that changes this node."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Signal(Node):
    """Writable node — the store's registries, assignment table and audit log."""

    def set(self, value: Any) -> None:
        if value == self._value:
            return
        self._value = value
        self._graph._mark_changed(self)

    def update(self, fn: Callable[[Any], Any]) -> None:
        """Replace the value with fn(current). fn must not mutate its argument."""
        self.set(fn(self._value))


class Derived(Node):
    """Read-only node recomputed from its sources."""

    def __init__(
        self,
        graph: "ReactiveGraph",
        name: str,
        sources: Sequence[Node],
        fn: Callable[..., Any],
    ):
        self.sources: tuple[Node, ...] = tuple(sources)
        self._fn = fn
        super().__init__(graph, name, self._compute())

    def _compute(self) -> Any:
        return self._fn(*(source.value for source in self.sources))

    def _recompute(self) -> bool:
        """Refresh the cached value. Returns whether it changed."""
        value = self._compute()
        if value == self._value:
            return False
        self._value = value
        return True


class ReactiveGraph:
    """Owns a set of named nodes and propagates writes through them."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._pending: list[Signal] = []
        self._batch_depth = 0

    # --- Construction ----------------------------------------------------------

    def signal(self, name: str, initial: Any) -> Signal:
        return self._register(Signal(self, name, initial))

    def derived(
        self, name: str, sources: Sequence[Node], fn: Callable[..., Any],
    ) -> Derived:
        if not sources:
            raise ValueError(f"Derived node '{name}' needs at least one source")
        for source in sources:
            if self._nodes.get(source.name) is not source:
                raise ValueError(
                    f"Source '{source.name}' of '{name}' is not registered in this graph",
                )
        return self._register(Derived(self, name, sources, fn))

    def _register(self, node):
        if node.name in self._nodes:
            raise ValueError(f"Node '{node.name}' already registered")
        self._nodes[node.name] = node
        return node

    # --- Lookup / observation ----------------------------------------------------

    def __getitem__(self, name: str) -> Node:
        return self._nodes[name]

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    @property
    def names(self) -> list[str]:
        return list(self._nodes)

    def observe(self, name: str, callback: Subscriber) -> Unsubscribe:
        """Subscribe to a node by name. Raises KeyError for unknown names."""
        return self._nodes[name].subscribe(callback)

    # --- Propagation -------------------------------------------------------------

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Coalesce several writes into a single propagation pass."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._flush()

    def _mark_changed(self, signal: Signal) -> None:
        if signal not in self._pending:
            self._pending.append(signal)
        if self._batch_depth == 0:
            self._flush()

    def _flush(self) -> None:
        if not self._pending:
            return
        changed: set[Node] = set(self._pending)
        self._pending = []

        for node in self._nodes.values():
            if not isinstance(node, Derived):
                continue
            if any(source in changed for source in node.sources) and node._recompute():
                changed.add(node)

        for node in list(self._nodes.values()):
            if node in changed:
                node._notify()
