"""Routing — a tree of path segments with inherited hooks.

Routes are registered during setup, straight into the tree, and matched
literal-first in O(path-depth) steps.
"""
