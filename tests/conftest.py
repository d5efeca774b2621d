"""Shared test fixtures for synonym-graph."""

from pathlib import Path

import pytest

from synonym_graph import SynonymDictionary, SynonymMap, WhitespaceTokenizer

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def dictionary():
    """An empty dictionary with the whitespace tokenizer."""
    return SynonymDictionary()


@pytest.fixture
def multi_dictionary():
    """Dictionary with multi-token synonyms loaded."""
    d = SynonymDictionary()
    d.load_dictionary(FIXTURES / "multi_token.txt")
    return d


@pytest.fixture
def multi_map(multi_dictionary):
    """SynonymMap built from the multi-token dictionary."""
    return SynonymMap.Builder().build(multi_dictionary)


@pytest.fixture
def token_stream():
    """Turn text into offset-carrying tokens."""
    return WhitespaceTokenizer().token_stream
