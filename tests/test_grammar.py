import pytest

from firlr.grammar import Grammar, Item, ItemSet, SymbolKind


def test_first():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("x").symbol("y")
        .rule("A", ["x"])
        .rule("A", ["y"])
        .build()
    )
    a = grammar.symbol("A")
    x = grammar.symbol("x")
    y = grammar.symbol("y")
    assert a.firsts() == {x, y}


def test_empty():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("B").symbol("C").symbol("x")
        .rule("A", ["x"])
        .rule("A", [])
        .rule("B", ["A"])
        .rule("C", ["x"])
        .build()
    )
    a = grammar.symbol("A")
    b = grammar.symbol("B")
    assert grammar.nullables() == {a, b}


def test_first_with_empty():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("B").symbol("x")
        .rule("A", ["x"])
        .rule("A", [])
        .rule("B", ["A", "x"])
        .build()
    )
    a = grammar.symbol("A")
    b = grammar.symbol("B")
    x = grammar.symbol("x")
    assert a.firsts() == {x}
    assert b.firsts() == {x}


def test_first_left_recursion():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("B").symbol("x")
        .rule("A", ["x"])
        .rule("A", ["A", "x"])
        .build()
    )
    assert grammar.symbol("A").firsts() == {grammar.symbol("x")}


def test_first_mutual_recursion():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("B").symbol("x")
        .rule("A", ["x"])
        .rule("A", ["B"])
        .rule("B", ["A"])
        .build()
    )
    assert grammar.symbol("A").firsts() == {grammar.symbol("x")}


def test_follow_simple():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("B").symbol("x").symbol("y")
        .rule("A", ["x"])
        .rule("B", ["A", "x"])
        .rule("B", ["A", "y"])
        .build()
    )
    a = grammar.symbol("A")
    assert a.follows() == {grammar.symbol("x"), grammar.symbol("y")}


def test_follow_nullable():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("B").symbol("C")
        .symbol("x").symbol("y").symbol("z")
        .rule("A", ["x"])
        .rule("B", ["A", "y"])
        .rule("B", ["A", "C", "z"])
        .rule("C", [])
        .build()
    )
    a = grammar.symbol("A")
    assert a.follows() == {grammar.symbol("y"), grammar.symbol("z")}


def test_first_nullable():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("x")
        .rule("A", ["A", "x"])
        .rule("A", [])
        .build()
    )
    assert grammar.symbol("A").firsts() == {grammar.symbol("x")}


def test_is_terminal():
    grammar = (
        Grammar.new()
        .symbol("A").symbol("x")
        .rule("A", ["A", "x"])
        .rule("A", [])
        .build()
    )
    a = grammar.symbol("A")
    x = grammar.symbol("x")
    assert not a.is_terminal()
    assert x.is_terminal()
    assert a.is_nonterminal()
    assert a.kind is SymbolKind.NONTERMINAL
    assert x.kind is SymbolKind.TERMINAL


def _circuit_grammar():
    builder = Grammar.new()
    for name in [
        "start", "circuit", "{decl}", "decl",
        "KW_CIRCUIT", "KW_MODULE", "NEWLINE", "DEDENT", "INDENT", "VERSION",
        "ID", "INFO", "COMMA", "COLON", "EQ", "DOT", "STRING",
    ]:
        builder.symbol(name)
    return (
        builder
        .rule("start", ["circuit"])
        .rule("circuit", ["VERSION", "NEWLINE", "KW_CIRCUIT", "ID", "INFO",
                          "COLON", "NEWLINE", "INDENT", "DEDENT"])
        .rule("circuit", ["VERSION", "NEWLINE", "KW_CIRCUIT", "ID", "COLON",
                          "NEWLINE", "INDENT", "{decl}", "DEDENT"])
        .rule("{decl}", [])
        .rule("{decl}", ["{decl}", "decl"])
        .rule("decl", ["KW_MODULE"])
        .build()
    )


def test_circuit_grammar_firsts():
    grammar = _circuit_grammar()
    for symbol in grammar.terminals():
        assert symbol.firsts() == set()

    decl_star = grammar.symbol("{decl}")
    kw_module = grammar.symbol("KW_MODULE")
    dedent = grammar.symbol("DEDENT")

    assert grammar.nullables() == {decl_star}
    assert decl_star.is_nullable()
    assert decl_star.firsts() == {kw_module, dedent}
    assert grammar.symbol("start").firsts() == {grammar.symbol("VERSION")}


def test_terminals_and_nonterminals():
    grammar = _circuit_grammar()
    assert [s.name for s in grammar.nonterminals()] == ["start", "circuit", "{decl}", "decl"]
    assert len(grammar.terminals()) == 13
    assert grammar.symbol("missing") is None


def test_unknown_symbol_in_rule():
    builder = Grammar.new().symbol("A")
    with pytest.raises(ValueError, match="No such symbol: b"):
        builder.rule("A", ["b"])


def test_start_rule_requires_rules():
    grammar = Grammar.new().symbol("A").build()
    with pytest.raises(ValueError):
        grammar.start_rule()


def test_symbols_from_different_grammars_differ():
    g1 = Grammar.new().symbol("A").build()
    g2 = Grammar.new().symbol("A").build()
    assert g1.symbol("A") == g1.symbol("A")
    assert not g1.symbol("A") == g2.symbol("A")


def _expr_grammar():
    return (
        Grammar.new()
        .symbol("S").symbol("A").symbol("x")
        .rule("S", ["A"])
        .rule("A", ["x"])
        .rule("A", ["A", "x"])
        .rule("A", [])
        .build()
    )


def test_rule_and_grammar_repr():
    grammar = _expr_grammar()
    rules = grammar.rules()
    assert rules[2].name() == "A -> A x"
    assert repr(rules[3]) == "A ->"
    assert repr(grammar) == "S -> A\nA -> x\nA -> A x\nA ->"
    assert grammar.start_rule() == rules[0]
    assert grammar.rules_for(grammar.symbol("A")) == rules[1:]


def test_item_behaviour():
    grammar = _expr_grammar()
    rule = grammar.rules()[2]
    item = rule.item(0)
    assert repr(item) == "A -> . A x"
    assert item.next_symbol() == grammar.symbol("A")
    stepped = item.step().step()
    assert repr(stepped) == "A -> A x ."
    assert stepped.is_finished()
    assert stepped.next_symbol() is None
    assert stepped == rule.item(2)
    assert repr(grammar.rules()[3].item(0)) == "A -> ."


def test_item_position_out_of_range():
    grammar = _expr_grammar()
    with pytest.raises(ValueError):
        grammar.rules()[1].item(2)


def test_itemset_closure_and_follow():
    grammar = _expr_grammar()
    start = ItemSet.singleton(grammar.start_rule().item(0))
    assert repr(start) == "S -> . A\nA -> . x\nA -> . A x\nA -> ."
    after_a = start.follow(grammar.symbol("A"))
    assert repr(after_a) == "S -> A .\nA -> A . x"
    after_x = start.follow(grammar.symbol("x"))
    assert repr(after_x) == "A -> x ."
    assert start.follow(grammar.symbol("S")).is_empty()


def test_itemset_insert_and_equality():
    grammar = _expr_grammar()
    itemset = ItemSet.empty(grammar)
    assert itemset.is_empty()
    item = grammar.rules()[1].item(0)
    assert itemset.insert(item) is True
    assert itemset.insert(Item(grammar.rules()[1], 0)) is False
    assert len(itemset) == 1
    assert itemset == ItemSet(grammar, [item])
    assert list(itemset) == [item]