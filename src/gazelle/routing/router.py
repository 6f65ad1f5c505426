"""Route tree with literal-first path matching.

Routes are registered during setup, straight into the tree, so conflicting
patterns fail at the registration call. The router is compiled (frozen)
when the app starts serving.
"""

from collections.abc import Iterable
from typing import TypeVar

from gazelle._internal.types import Handler
from gazelle.errors import AmbiguousRouteError, ConfigurationError, NotFound
from gazelle.hooks import PostResponseHook, PreRequestHook
from gazelle.routing.route import PathSegment, RouteMatch, RouteNode

PARAM_PREFIX = ":"

T = TypeVar("T")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/"               -> []
        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment(":id", is_param=True, param_name="id")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith(PARAM_PREFIX):
            name = part[len(PARAM_PREFIX):]
            if not name:
                msg = f"Empty parameter name in route path {path!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        elif part.startswith("{") and part.endswith("}"):
            msg = (
                f"Route path {path!r} uses {{param}} syntax. "
                f"Gazelle expects :param, e.g. /users/:id."
            )
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))
    return segments


def split_path(path: str) -> list[str]:
    """Split a request path into non-empty parts (trailing slashes ignored)."""
    return [p for p in path.strip("/").split("/") if p]


def _unique(hooks: Iterable[T]) -> tuple[T, ...]:
    """Hooks in registration order, repeats dropped."""
    return tuple(dict.fromkeys(hooks))


class Router:
    """Route tree keyed by path segments.

    Usage::

        router = Router()
        router.add("GET", "/users", list_users)
        router.add("GET", "/users/:id", show_user, pre_hooks=(auth,))
        router.compile()
        match = router.match("GET", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = RouteNode()
        self._compiled = False

    @property
    def root(self) -> RouteNode:
        return self._root

    def add(
        self,
        method: str,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> RouteNode:
        """Register *handler* for *method* at *path*. Must be called before compile().

        Raises ``AmbiguousRouteError`` if *path* conflicts with an existing
        dynamic sibling or the method is already registered there.
        """
        node = self._insert(path)
        method = method.upper()
        if method in node.handlers:
            msg = f"{method} {path!r} is already registered."
            raise AmbiguousRouteError(msg)
        node.handlers[method] = handler
        node.route_hooks[method] = (_unique(pre_hooks), _unique(post_hooks))
        return node

    def attach_hooks(
        self,
        path: str,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> RouteNode:
        """Attach hooks to the node at *path*, creating structural nodes as needed."""
        node = self._insert(path)
        node.attach_hooks(tuple(pre_hooks), tuple(post_hooks))
        return node

    def _insert(self, path: str) -> RouteNode:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(path)
        names = [seg.param_name for seg in segments if seg.is_param]
        if len(names) != len(set(names)):
            msg = f"Route path {path!r} repeats a parameter name."
            raise AmbiguousRouteError(msg)

        node = self._root
        for seg in segments:
            if seg.is_param:
                if node.param_child is None:
                    node.param_child = RouteNode(seg, parent=node)
                else:
                    existing = node.param_child.segment
                    assert existing is not None
                    if existing.param_name != seg.param_name:
                        msg = (
                            f"Route path {path!r} declares :{seg.param_name} where "
                            f"{existing.value!r} is already registered at {node.param_child.path!r}. "
                            "Only one dynamic segment is allowed per level."
                        )
                        raise AmbiguousRouteError(msg)
                node = node.param_child
            else:
                if seg.value not in node.children:
                    node.children[seg.value] = RouteNode(seg, parent=node)
                node = node.children[seg.value]
        return node

    def node_for(self, path: str) -> RouteNode:
        """Return the node registered for the pattern *path* (``/users/:id``).

        Raises ``KeyError`` if no such node exists.
        """
        node = self._root
        for seg in parse_path(path):
            if seg.is_param:
                child = node.param_child
                if child is None or child.segment is None or child.segment.param_name != seg.param_name:
                    raise KeyError(path)
                node = child
            else:
                node = node.children[seg.value]
        return node

    @property
    def routes(self) -> list[tuple[str, str]]:
        """All registered ``(method, path)`` pairs, in tree order."""
        return [
            (method, node.path)
            for node in self._root.iter_tree()
            for method in node.handlers
        ]

    def compile(self) -> None:
        """Freeze the router. No more routes or hooks can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against the tree.

        Returns a ``RouteMatch`` on success. Raises ``NotFound`` if no node
        matches the path or the matched node has no handler for *method*.
        """
        method = method.upper()
        result = self._match_node(self._root, split_path(path), 0, {}, method)
        if result is None:
            raise NotFound()
        node, params = result
        return RouteMatch(node=node, handler=node.handlers[method], path_params=params, method=method)

    def _match_node(
        self,
        node: RouteNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
        method: str,
    ) -> tuple[RouteNode, dict[str, str]] | None:
        """Recursively match path parts, literal child first."""
        if index == len(parts):
            if method in node.handlers:
                return node, params
            return None

        part = parts[index]

        # 1. Literal child wins ties
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params, method)
            if result is not None:
                return result

        # 2. Dynamic child binds the literal text
        edge = node.param_child
        if edge is not None and edge.segment is not None and edge.segment.param_name is not None:
            new_params = {**params, edge.segment.param_name: part}
            return self._match_node(edge, parts, index + 1, new_params, method)

        return None
