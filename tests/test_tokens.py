from exemplar.classifier import BEGIN, CONTENT
from exemplar.tokens import TokenStream, pattern_view, strip_markers


class TestTokenStream:
    def setup_method(self):
        self.stream = TokenStream.from_texts(
            ["(((BEGIN)))", "<li>", "(((title)))", "one", "</li>", "(((END)))"]
        )

    def test_slice_is_a_stream(self):
        part = self.stream[1:3]
        assert isinstance(part, TokenStream)
        assert part.texts == ["<li>", "(((title)))"]

    def test_classes(self):
        assert self.stream.classes[0] == BEGIN
        assert self.stream.classes[3] == CONTENT

    def test_pattern_view(self):
        positions, tokens = self.stream.pattern_view
        assert positions == (1, 3, 4)
        assert [t.text for t in tokens] == ["<li>", "one", "</li>"]

    def test_pattern_view_is_cached(self):
        assert self.stream.pattern_view is self.stream.pattern_view

    def test_pattern_view_of_a_slice(self):
        positions, _ = self.stream[2:5].pattern_view
        assert positions == (1, 2)


def test_pattern_view_matches_strip_markers():
    stream = TokenStream.from_document("<p>(((BEGIN)))(((a)))x(((END)))</p>")
    positions, tokens = pattern_view(list(stream))
    assert list(tokens) == strip_markers(stream)
    assert positions == (0, 3, 5)
