from exemplar.grammar import Grammar
from exemplar.incorporation import AnnotatedRecord, incorporate
from exemplar.search import RecordSpan
from exemplar.tokens import TokenStream, strip_markers


def grammar_of(*texts):
    return Grammar(TokenStream.from_texts(texts))


def tokens(*texts):
    return TokenStream.from_texts(texts)


class TestIncorporate:
    def test_exemplar_round_trip(self):
        grammar = grammar_of(
            "<tr>", "<td>", "(((title)))", "<a href='/1'>", "one", "</a>", "</td>",
            "<td>", "(((nodump)))", "{{{Price:}}}", "(((/nodump)))", "(((price)))",
            "$1", "</td>", "</tr>", "(((tail)))",
        )
        record = incorporate(grammar, strip_markers(grammar.tokens))
        assert record.tokens == grammar.tokens

    def test_markers_follow_matches(self):
        grammar = grammar_of("<li>", "(((name)))", "Foo", "</li>")
        record = incorporate(grammar, tokens("<li>", "Bar", "</li>"))
        assert record.texts == ["<li>", "(((name)))", "Bar", "</li>"]

    def test_markers_of_deleted_token(self):
        grammar = grammar_of("(((a)))", "x", "(((b)))", "y")
        record = incorporate(grammar, tokens("z"))
        assert record.texts == ["(((a)))", "z", "(((b)))"]

    def test_inserted_tokens_follow_tie_breaking(self):
        grammar = grammar_of("(((f)))", "x")
        record = incorporate(grammar, tokens("y", "z"))
        assert record.texts == ["(((f)))", "y", "z"]

    def test_substitution(self):
        grammar = grammar_of("<td>", "(((price)))", "<b>", "</td>")
        record = incorporate(grammar, tokens("<td>", "<i>", "</td>"))
        assert record.texts == ["<td>", "(((price)))", "<i>", "</td>"]

    def test_trailing_markers(self):
        grammar = grammar_of("x", "(((tail)))")
        record = incorporate(grammar, tokens("y", "<br>"))
        assert record.texts == ["y", "<br>", "(((tail)))"]

    def test_markers_in_span_are_ignored(self):
        grammar = grammar_of("(((a)))", "x")
        record = incorporate(grammar, tokens("(((other)))", "y"))
        assert record.texts == ["(((a)))", "y"]

    def test_keeps_every_span_token(self):
        grammar = grammar_of("<li>", "(((name)))", "Foo", "</li>")
        items = tokens("<li>", "<b>", "Bar", "</b>", "baz", "</li>")
        record = incorporate(grammar, items)
        assert strip_markers(record) == list(items)
        assert [t.text for t in record if t.is_marker] == ["(((name)))"]

    def test_record_span(self):
        grammar = grammar_of("(((a)))", "x")
        stream = tokens("<p>", "y", "</p>")
        span = RecordSpan(1, 1, 0, stream[1:2])
        record = incorporate(grammar, span)
        assert record.span is span
        assert record.texts == ["(((a)))", "y"]
        assert incorporate(grammar, stream[1:2]).span is None


class TestAnnotatedRecord:
    def test_sequence(self):
        items = tokens("a", "b", "c")
        record = AnnotatedRecord(items)
        assert len(record) == 3
        assert record[0] == items[0]
        assert record[1:] == tuple(items[1:])
        assert list(record) == list(items)
        assert record.span is None

    def test_repr(self):
        assert repr(AnnotatedRecord(tokens("<b>", "x"))) == "AnnotatedRecord(['<b>', 'x'])"
