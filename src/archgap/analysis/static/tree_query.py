"""Generic descendant-search and node-inspection helpers.

Every detector goes through these functions instead of walking the
tree itself. Traversal is depth-first pre-order (parent before
children, children in source order), so findings within one file come
out in a stable order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import tree_sitter

from archgap.analysis.static.syntax_tree import NODE_TYPES, NodeKind, SyntaxTree

NodePredicate = Callable[[tree_sitter.Node], bool]

_DOC_COMMENT_PREFIXES = ("///", "/**")


def iter_descendants(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield every descendant of *node* in pre-order (excluding *node*)."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def descendants_of_kind(
    scope: SyntaxTree | tree_sitter.Node,
    kind: NodeKind,
    predicate: NodePredicate | None = None,
) -> Iterator[tree_sitter.Node]:
    """Lazily yield descendants of *scope* whose kind is *kind*.

    Args:
        scope: A whole tree or any node within one.
        kind: The node category to select.
        predicate: Optional extra filter applied to each candidate.
    """
    root = scope.root if isinstance(scope, SyntaxTree) else scope
    node_types = NODE_TYPES[kind]
    for node in iter_descendants(root):
        if node.type not in node_types:
            continue
        if predicate is None or predicate(node):
            yield node


def is_kind(node: tree_sitter.Node, kind: NodeKind) -> bool:
    return node.type in NODE_TYPES[kind]


def text_of(node: tree_sitter.Node | None) -> str:
    """Return the exact source slice spanned by *node*."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def name_of(node: tree_sitter.Node) -> str:
    """Declared identifier of a type/method/property/attribute node."""
    return text_of(node.child_by_field_name("name"))


def body_of(node: tree_sitter.Node) -> tree_sitter.Node | None:
    """Block body of a method, or ``None`` for abstract/expression-bodied."""
    body = node.child_by_field_name("body")
    if body is not None and body.type == "block":
        return body
    return None


def body_text(node: tree_sitter.Node) -> str:
    return text_of(body_of(node))


def members_of(
    type_node: tree_sitter.Node, kind: NodeKind
) -> list[tree_sitter.Node]:
    """Direct members of a type declaration matching *kind*."""
    body = type_node.child_by_field_name("body")
    if body is None:
        return []
    return [child for child in body.children if is_kind(child, kind)]


def modifiers_of(node: tree_sitter.Node) -> set[str]:
    """Modifier keywords (``public``, ``async``, ...) on a declaration."""
    return {
        text_of(child) for child in node.children if child.type == "modifier"
    }


def has_modifier(node: tree_sitter.Node, modifier: str) -> bool:
    return modifier in modifiers_of(node)


def attribute_lists_of(node: tree_sitter.Node) -> list[tree_sitter.Node]:
    """``[...]`` attribute lists attached directly to a declaration."""
    return [child for child in node.children if child.type == "attribute_list"]


def attribute_names(node: tree_sitter.Node) -> list[str]:
    """Names of all attributes attached to *node*, in source order."""
    names: list[str] = []
    for attr_list in attribute_lists_of(node):
        for attr in attr_list.children:
            if is_kind(attr, NodeKind.ATTRIBUTE):
                names.append(name_of(attr))
    return names


def has_annotation(node: tree_sitter.Node, name_substring: str) -> bool:
    """True if any attribute name on *node* contains *name_substring*."""
    return any(name_substring in name for name in attribute_names(node))


def attributes_text(node: tree_sitter.Node) -> str:
    """Source text of every attribute list on *node*, joined."""
    return " ".join(text_of(a) for a in attribute_lists_of(node))


def base_list_text(type_node: tree_sitter.Node) -> str:
    """Source text of a type's ``: Base, IInterface`` list (may be empty)."""
    for child in type_node.children:
        if child.type == "base_list":
            return text_of(child)
    return ""


def operator_of(node: tree_sitter.Node) -> str:
    """Operator token of a binary expression (``+``, ``&&``, ...)."""
    op = node.child_by_field_name("operator")
    if op is not None:
        return text_of(op)
    for child in node.children:
        if not child.is_named:
            return text_of(child)
    return ""


def leading_comments(node: tree_sitter.Node) -> list[tree_sitter.Node]:
    """Comment nodes immediately preceding *node*, nearest first."""
    comments: list[tree_sitter.Node] = []
    prev = node.prev_sibling
    while prev is not None and is_kind(prev, NodeKind.COMMENT):
        comments.append(prev)
        prev = prev.prev_sibling
    return comments


def has_doc_comment(node: tree_sitter.Node) -> bool:
    """True if a ``///`` or ``/** */`` comment precedes *node*."""
    return any(
        text_of(c).lstrip().startswith(_DOC_COMMENT_PREFIXES)
        for c in leading_comments(node)
    )
