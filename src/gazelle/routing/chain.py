"""Effective hook chain for a matched route.

Hooks run root to leaf so framework-wide concerns (CORS, auth, logging)
attached high in the tree execute before more specific ones. Ancestors
contribute only hooks marked ``share_with_child_routes``; the matched node
always contributes all of its own hooks.
"""

from dataclasses import dataclass

from gazelle.hooks import PostResponseHook, PreRequestHook
from gazelle.routing.route import RouteNode


@dataclass(frozen=True, slots=True)
class HookChain:
    """Ordered pre and post hooks, each tagged with the tree depth it came from.

    Depth 0 is the root. On short-circuit the pipeline runs only the post
    hooks whose depth is at or above the level that stopped the chain.
    """

    pre: tuple[tuple[int, PreRequestHook], ...] = ()
    post: tuple[tuple[int, PostResponseHook], ...] = ()

    @property
    def pre_hooks(self) -> tuple[PreRequestHook, ...]:
        return tuple(hook for _, hook in self.pre)

    @property
    def post_hooks(self) -> tuple[PostResponseHook, ...]:
        return tuple(hook for _, hook in self.post)

    def post_through(self, depth: int) -> tuple[PostResponseHook, ...]:
        """Post hooks contributed by levels ``0..depth``."""
        return tuple(hook for level, hook in self.post if level <= depth)


def effective_hooks(node: RouteNode, method: str) -> HookChain:
    """Compose the hook chain for the *method* route at *node*.

    Each level contributes its path-level hooks, then the hooks registered
    with its own *method* route. A ``GET`` route therefore never picks up
    hooks registered with ``POST`` on the same path.
    """
    lineage = node.lineage()
    last = len(lineage) - 1
    pre: list[tuple[int, PreRequestHook]] = []
    post: list[tuple[int, PostResponseHook]] = []
    for depth, ancestor in enumerate(lineage):
        own = depth == last
        level_pre, level_post = ancestor.hooks_for(method)
        pre.extend((depth, h) for h in level_pre if own or h.share_with_child_routes)
        post.extend((depth, h) for h in level_post if own or h.share_with_child_routes)
    return HookChain(pre=tuple(pre), post=tuple(post))
