"""Join tree traversals.

A query and its joins form a tree. Two orders over that tree matter:

- **Join emission** is post-order: a node's own joins are attached to it
  before the node is attached to its parent, so that a grandchild's join
  condition (which may name the middle table) is resolved inside the
  middle table's subtree.
- **Materialization** is pre-order: a result row becomes the root entity,
  followed by each join's subtree (the join itself before its nested
  joins), in the order joins were added.

Both are kept here, independent of SQL rendering, so they can be checked on
their own.
"""

from typing import TYPE_CHECKING, Iterator, List, Tuple

if TYPE_CHECKING:
    from entityquery.operations.query import Query


def preorder(root: "Query") -> List["Query"]:
    """Nodes in materialization order: root first, then each join subtree."""
    nodes: List["Query"] = []
    stack = [root]
    while stack:
        node = stack.pop()
        nodes.append(node)
        stack.extend(reversed(node.joins))
    return nodes


def join_edges(root: "Query") -> List[Tuple["Query", "Query"]]:
    """(parent, child) pairs in join emission order, children first.

    The edge attaching a child to its parent comes after every edge inside
    the child's subtree, and sibling edges keep the order joins were added.
    """
    return list(_postorder_edges(root))


def _postorder_edges(node: "Query") -> Iterator[Tuple["Query", "Query"]]:
    for child in node.joins:
        yield from _postorder_edges(child)
        yield node, child

