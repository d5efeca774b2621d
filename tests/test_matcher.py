"""Tests for the token-graph matcher and both lowering modes."""

import pytest

from synonym_graph import (
    Keep,
    Replace,
    SynonymFilter,
    SynonymGraphFilter,
    SynonymMap,
    Token,
    edit_script,
)
from synonym_graph.matcher import lower_flat, lower_graph, with_positions


def _analyze(filter_cls, synonym_map, token_stream, text, **kwargs):
    """Sorted (term, type, position, start, end, position_length) rows."""
    out = filter_cls(token_stream(text), synonym_map, **kwargs)
    return sorted(
        (t.term, t.type, pos, t.start_offset, t.end_offset, t.position_length)
        for t, pos in with_positions(out)
    )


class TestEditScript:
    """Longest-match segmentation into keep and replace steps."""

    def test_unmatched_tokens_are_kept(self, multi_map, token_stream):
        steps = list(edit_script(token_stream("foo 不明確"), multi_map))
        assert [type(s) for s in steps] == [Keep, Keep]
        assert [s.token.term for s in steps] == ["foo", "不明確"]

    def test_longest_match_wins(self, multi_map, token_stream):
        steps = list(edit_script(token_stream("内閣 総理 大臣"), multi_map))
        assert len(steps) == 1
        step = steps[0]
        assert isinstance(step, Replace)
        assert [t.term for t in step.originals] == ["内閣", "総理", "大臣"]
        assert step.branches == (("総理", "大臣"), ("総理",), ("首相",))
        assert (step.start_offset, step.end_offset) == (0, 8)

    def test_partial_phrase_falls_back_to_shorter_key(self, multi_map, token_stream):
        steps = list(edit_script(token_stream("総理 です"), multi_map))
        assert isinstance(steps[0], Replace)
        assert [t.term for t in steps[0].originals] == ["総理"]
        assert isinstance(steps[1], Keep)

    def test_non_key_prefix_does_not_match(self, multi_map, token_stream):
        # "内閣" alone is only part of a key
        steps = list(edit_script(token_stream("内閣 です"), multi_map))
        assert [type(s) for s in steps] == [Keep, Keep]

    def test_key_without_synonyms_is_kept(self, dictionary, token_stream):
        dictionary.load_lines(["a>>b"])
        synonym_map = SynonymMap.Builder().build(dictionary)
        steps = list(edit_script(token_stream("b a"), synonym_map))
        assert isinstance(steps[0], Keep)
        assert isinstance(steps[1], Replace)
        assert steps[1].branches == (("b",),)

    def test_consecutive_matches(self, multi_map, token_stream):
        steps = list(edit_script(token_stream("首相 曖昧"), multi_map))
        assert [type(s) for s in steps] == [Replace, Replace]


class TestGraphFilter:
    """Graph output: alternatives share the span's slots."""

    def test_single_word_with_multi_word_synonym(self, multi_map, token_stream):
        assert _analyze(SynonymGraphFilter, multi_map, token_stream, "曖昧") == sorted([
            ("曖昧", "word", 0, 0, 2, 1),
            ("不", "SYNONYM", 0, 0, 2, 2),
            ("明確", "SYNONYM", 1, 0, 2, 1),
            ("あやふや", "SYNONYM", 0, 0, 2, 1),
        ])

    def test_multi_token_input(self, multi_map, token_stream):
        assert _analyze(SynonymGraphFilter, multi_map, token_stream, "不 明確") == sorted([
            ("曖昧", "SYNONYM", 0, 0, 4, 2),
            ("不", "word", 0, 0, 1, 2),
            ("明確", "word", 1, 2, 4, 1),
            ("あやふや", "SYNONYM", 0, 0, 4, 2),
        ])

    def test_unknown_token(self, multi_map, token_stream):
        assert _analyze(SynonymGraphFilter, multi_map, token_stream, "不明確") == [
            ("不明確", "word", 0, 0, 3, 1),
        ]

    def test_three_branches(self, multi_map, token_stream):
        # each multi-word branch runs over successive positions, and its
        # position lengths count down to 1
        assert _analyze(SynonymGraphFilter, multi_map, token_stream, "首相") == sorted([
            ("首相", "word", 0, 0, 2, 1),
            ("総理", "SYNONYM", 0, 0, 2, 1),
            ("総理", "SYNONYM", 0, 0, 2, 2),
            ("大臣", "SYNONYM", 1, 0, 2, 1),
            ("内閣", "SYNONYM", 0, 0, 2, 3),
            ("総理", "SYNONYM", 1, 0, 2, 2),
            ("大臣", "SYNONYM", 2, 0, 2, 1),
        ])

    def test_two_token_span(self, multi_map, token_stream):
        assert _analyze(SynonymGraphFilter, multi_map, token_stream, "総理 大臣") == sorted([
            ("首相", "SYNONYM", 0, 0, 5, 2),
            ("総理", "SYNONYM", 0, 0, 5, 2),
            ("総理", "word", 0, 0, 2, 2),
            ("大臣", "word", 1, 3, 5, 1),
            ("内閣", "SYNONYM", 0, 0, 5, 3),
            ("総理", "SYNONYM", 1, 0, 5, 2),
            ("大臣", "SYNONYM", 2, 0, 5, 1),
        ])

    def test_three_token_span(self, multi_map, token_stream):
        assert _analyze(SynonymGraphFilter, multi_map, token_stream, "内閣 総理 大臣") == sorted([
            ("首相", "SYNONYM", 0, 0, 8, 3),
            ("総理", "SYNONYM", 0, 0, 8, 3),
            ("総理", "SYNONYM", 0, 0, 8, 2),
            ("大臣", "SYNONYM", 1, 0, 8, 1),
            ("内閣", "word", 0, 0, 2, 3),
            ("総理", "word", 1, 3, 5, 2),
            ("大臣", "word", 2, 6, 8, 1),
        ])

    def test_branch_spans_match_their_length(self, multi_map, token_stream):
        out = list(SynonymGraphFilter(token_stream("首相"), multi_map))
        rows = [(t.term, pos, t.position_length) for t, pos in with_positions(out)]
        # "総理 大臣" covers two positions, "内閣 総理 大臣" three
        assert ("総理", 0, 2) in rows and ("大臣", 1, 1) in rows
        assert ("内閣", 0, 3) in rows and ("総理", 1, 2) in rows
        assert ("大臣", 2, 1) in rows

    def test_positions_continue_after_span(self, multi_map, token_stream):
        rows = _analyze(SynonymGraphFilter, multi_map, token_stream, "曖昧 です")
        assert ("です", "word", 2, 3, 5, 1) in rows

    def test_first_increment_is_preserved(self):
        step = Replace((Token("a", 0, 1, position_increment=3),), (("b",),))
        tokens = lower_graph(step)
        assert tokens[0].position_increment == 3
        assert [t.position_increment for t in tokens[1:]] == [0]

    def test_ignore_case(self, dictionary, token_stream):
        dictionary.load_lines(["Apple,Banana"])
        synonym_map = SynonymMap.Builder().build(dictionary)
        rows = _analyze(
            SynonymGraphFilter, synonym_map, token_stream, "apple", ignore_case=True
        )
        assert rows == sorted([
            ("apple", "word", 0, 0, 5, 1),
            ("Banana", "SYNONYM", 0, 0, 5, 1),
        ])
        assert _analyze(SynonymGraphFilter, synonym_map, token_stream, "apple") == [
            ("apple", "word", 0, 0, 5, 1),
        ]

    def test_ignore_case_uses_every_cased_key(self, dictionary, token_stream):
        # "Apple" sorts first but has no synonyms of its own
        dictionary.load_lines(["x>>Apple", "apple,fruit"])
        synonym_map = SynonymMap.Builder().build(dictionary)
        sensitive = _analyze(SynonymGraphFilter, synonym_map, token_stream, "apple")
        folded = _analyze(
            SynonymGraphFilter, synonym_map, token_stream, "apple", ignore_case=True
        )
        assert ("fruit", "SYNONYM", 0, 0, 5, 1) in sensitive
        assert folded == sensitive

    def test_requires_transducer(self, dictionary, token_stream):
        synonym_map = SynonymMap.Builder().build(dictionary)
        with pytest.raises(ValueError):
            SynonymGraphFilter(token_stream("a"), synonym_map)


class TestFlatFilter:
    """Flat output: every token has position length 1."""

    def test_single_word_input(self, multi_map, token_stream):
        assert _analyze(SynonymFilter, multi_map, token_stream, "首相") == sorted([
            ("首相", "word", 0, 0, 2, 1),
            ("総理", "SYNONYM", 0, 0, 2, 1),
            ("総理", "SYNONYM", 0, 0, 2, 1),
            ("大臣", "SYNONYM", 1, 0, 2, 1),
            ("内閣", "SYNONYM", 0, 0, 2, 1),
            ("総理", "SYNONYM", 1, 0, 2, 1),
            ("大臣", "SYNONYM", 2, 0, 2, 1),
        ])

    def test_multi_token_input(self, multi_map, token_stream):
        assert _analyze(SynonymFilter, multi_map, token_stream, "不 明確") == sorted([
            ("不", "word", 0, 0, 1, 1),
            ("明確", "word", 1, 2, 4, 1),
            ("曖昧", "SYNONYM", 0, 0, 4, 1),
            ("あやふや", "SYNONYM", 0, 0, 4, 1),
        ])

    def test_two_token_span(self, multi_map, token_stream):
        assert _analyze(SynonymFilter, multi_map, token_stream, "総理 大臣") == sorted([
            ("首相", "SYNONYM", 0, 0, 5, 1),
            ("総理", "SYNONYM", 0, 0, 5, 1),
            ("総理", "word", 0, 0, 2, 1),
            ("大臣", "word", 1, 3, 5, 1),
            ("内閣", "SYNONYM", 0, 0, 2, 1),
            ("総理", "SYNONYM", 1, 3, 5, 1),
            ("大臣", "SYNONYM", 2, 3, 5, 1),
        ])

    def test_three_token_span(self, multi_map, token_stream):
        assert _analyze(SynonymFilter, multi_map, token_stream, "内閣 総理 大臣") == sorted([
            ("首相", "SYNONYM", 0, 0, 8, 1),
            ("総理", "SYNONYM", 0, 0, 8, 1),
            ("総理", "SYNONYM", 0, 0, 2, 1),
            ("大臣", "SYNONYM", 1, 3, 5, 1),
            ("内閣", "word", 0, 0, 2, 1),
            ("総理", "word", 1, 3, 5, 1),
            ("大臣", "word", 2, 6, 8, 1),
        ])

    def test_single_word_synonym_of_phrase_has_length_one(self, dictionary, token_stream):
        dictionary.load_lines(["首相,総理 大臣"])
        synonym_map = SynonymMap.Builder().build(dictionary)
        out = list(SynonymFilter(token_stream("総理 大臣"), synonym_map))
        assert all(t.position_length == 1 for t in out)
        assert [(t.term, pos) for t, pos in with_positions(out)] == [
            ("総理", 0), ("首相", 0), ("大臣", 1),
        ]

    def test_keep_passes_through(self):
        token = Token("x", 0, 1)
        assert lower_flat(Keep(token)) == [token]


def test_with_positions():
    tokens = [Token("a", 0, 1), Token("b", 0, 1, 0), Token("c", 2, 3, 2)]
    assert [pos for _, pos in with_positions(tokens)] == [0, 0, 2]
