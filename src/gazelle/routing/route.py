"""Route tree nodes, path segments, and match results."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from gazelle._internal.types import Handler
from gazelle.hooks import PostResponseHook, PreRequestHook


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Literal: ``/users``  (is_param=False)
    Param:   ``/:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


class RouteNode:
    """A node in the route tree.

    Owns its children exclusively. Holds per-method handlers, the hooks
    registered with each ``(method, path)`` route, and the path-level hooks
    attached with ``Router.attach_hooks`` that apply to every method. A node
    without handlers only structures the tree: requests may not terminate
    there, but its shared hooks still apply to the routes below it.
    """

    __slots__ = (
        "children",
        "handlers",
        "param_child",
        "parent",
        "post_hooks",
        "pre_hooks",
        "route_hooks",
        "segment",
    )

    def __init__(self, segment: PathSegment | None = None, parent: RouteNode | None = None) -> None:
        self.segment = segment
        self.parent = parent
        # Literal children: "users" -> node
        self.children: dict[str, RouteNode] = {}
        # Single dynamic child (only one param pattern per level)
        self.param_child: RouteNode | None = None
        # Handlers at this node, keyed by HTTP method
        self.handlers: dict[str, Handler] = {}
        # Hooks registered with a route, keyed by its HTTP method
        self.route_hooks: dict[str, tuple[tuple[PreRequestHook, ...], tuple[PostResponseHook, ...]]] = {}
        # Path-level hooks, every method
        self.pre_hooks: tuple[PreRequestHook, ...] = ()
        self.post_hooks: tuple[PostResponseHook, ...] = ()

    def __repr__(self) -> str:
        methods = ",".join(sorted(self.handlers)) or "-"
        return f"<RouteNode {self.path!r} [{methods}]>"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def path(self) -> str:
        """The registration pattern that leads to this node (``/users/:id``)."""
        parts = [node.segment.value for node in self.lineage() if node.segment is not None]
        return "/" + "/".join(parts)

    def lineage(self) -> tuple[RouteNode, ...]:
        """Nodes from the tree root down to (and including) this node."""
        nodes: list[RouteNode] = []
        node: RouteNode | None = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        return tuple(reversed(nodes))

    def iter_tree(self) -> Iterator[RouteNode]:
        """Depth-first walk: this node, literal children, then the dynamic child."""
        yield self
        for child in self.children.values():
            yield from child.iter_tree()
        if self.param_child is not None:
            yield from self.param_child.iter_tree()

    def attach_hooks(
        self,
        pre_hooks: tuple[PreRequestHook, ...] = (),
        post_hooks: tuple[PostResponseHook, ...] = (),
    ) -> None:
        """Append hooks not already attached here, keeping registration order."""
        self.pre_hooks = (*self.pre_hooks, *(h for h in pre_hooks if h not in self.pre_hooks))
        self.post_hooks = (*self.post_hooks, *(h for h in post_hooks if h not in self.post_hooks))

    def hooks_for(self, method: str) -> tuple[tuple[PreRequestHook, ...], tuple[PostResponseHook, ...]]:
        """Path-level hooks followed by the hooks of the *method* route here."""
        route_pre, route_post = self.route_hooks.get(method, ((), ()))
        pre = (*self.pre_hooks, *(h for h in route_pre if h not in self.pre_hooks))
        post = (*self.post_hooks, *(h for h in route_post if h not in self.post_hooks))
        return pre, post


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    node: RouteNode
    handler: Handler
    path_params: dict[str, str]
    method: str = "GET"
