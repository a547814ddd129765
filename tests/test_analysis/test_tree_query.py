"""Tests for the shared tree-walking helpers."""

from __future__ import annotations

import textwrap

import tree_sitter

from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree, parse
from archgap.analysis.static.tree_query import (
    attribute_names,
    base_list_text,
    body_of,
    body_text,
    descendants_of_kind,
    has_annotation,
    has_doc_comment,
    has_modifier,
    members_of,
    modifiers_of,
    name_of,
    operator_of,
)

SOURCE = textwrap.dedent("""\
    namespace Demo
    {
        [Serializable]
        public sealed class Account : Entity, IDisposable
        {
            public string Owner { get; set; }

            /// <summary>Deposits money.</summary>
            [Obsolete]
            public async Task Deposit(decimal amount)
            {
                if (amount > 0 && amount < 100)
                {
                    _balance += amount;
                }
            }

            private int Twice(int x) => x * 2;

            public void Dispose()
            {
                _stream.Close();
            }
        }
    }
""")


def _tree() -> SyntaxTree:
    return parse(SOURCE, path="Account.cs")


def _method(name: str) -> tree_sitter.Node:
    return next(
        descendants_of_kind(
            _tree(), NodeKind.METHOD, predicate=lambda n: name_of(n) == name
        )
    )


def test_descendants_are_in_source_order() -> None:
    names = [name_of(m) for m in descendants_of_kind(_tree(), NodeKind.METHOD)]
    assert names == ["Deposit", "Twice", "Dispose"]


def test_predicate_filters_candidates() -> None:
    public = descendants_of_kind(
        _tree(), NodeKind.METHOD, predicate=lambda n: has_modifier(n, "public")
    )
    assert [name_of(m) for m in public] == ["Deposit", "Dispose"]


def test_descendants_accept_node_scope() -> None:
    deposit = _method("Deposit")
    branches = list(descendants_of_kind(deposit, NodeKind.BRANCH))
    assert len(branches) == 1


def test_modifiers() -> None:
    assert modifiers_of(_method("Deposit")) == {"public", "async"}
    assert has_modifier(_method("Twice"), "private")


def test_attributes() -> None:
    cls = next(descendants_of_kind(_tree(), NodeKind.TYPE))
    assert attribute_names(cls) == ["Serializable"]
    assert has_annotation(_method("Deposit"), "Obsol")
    assert not has_annotation(_method("Dispose"), "Obsolete")


def test_doc_comment_detection() -> None:
    assert has_doc_comment(_method("Deposit"))
    assert not has_doc_comment(_method("Dispose"))


def test_body_of_ignores_expression_bodies() -> None:
    assert body_of(_method("Twice")) is None
    assert body_text(_method("Twice")) == ""
    assert "_stream.Close();" in body_text(_method("Dispose"))


def test_members_of_counts_direct_members() -> None:
    cls = next(descendants_of_kind(_tree(), NodeKind.TYPE))
    assert len(members_of(cls, NodeKind.METHOD)) == 3
    assert len(members_of(cls, NodeKind.PROPERTY)) == 1


def test_base_list_text() -> None:
    cls = next(descendants_of_kind(_tree(), NodeKind.TYPE))
    assert "IDisposable" in base_list_text(cls)
    assert "Entity" in base_list_text(cls)


def test_operator_of_binary_expressions() -> None:
    operators = [
        operator_of(n)
        for n in descendants_of_kind(_tree(), NodeKind.BINARY_EXPRESSION)
    ]
    assert operators == ["&&", ">", "<", "*"]
