"""
Tests for text normalization.

Tests cover:
1. TextProcessor: lowercase, stopword removal, Snowball stemming
2. normalize_for_suggestion: cleaning used by the fuzzy suggester
3. split_title_words: word splitting used by the autocomplete trie
"""

from devshelf.normalize import (
    TextProcessor,
    normalize_for_suggestion,
    normalize_title_key,
    normalize_whitespace,
    split_title_words,
)


class IdentityStemmer:
    def stem(self, word):
        return word


class TestTextProcessor:
    """Test the shared tokenizer."""

    def test_stems_and_drops_stopwords(self):
        """Stopwords vanish and remaining words are stemmed."""
        tp = TextProcessor()
        assert tp.tokenize("The Running Dogs") == ["run", "dog"]

    def test_blank_text_gives_no_tokens(self):
        tp = TextProcessor()
        assert tp.tokenize("") == []
        assert tp.tokenize("   \t ") == []
        assert tp.tokenize(None) == []

    def test_splits_on_punctuation_keeps_apostrophes(self):
        tp = TextProcessor(stopwords=[], stemmer=IdentityStemmer())
        assert tp.tokenize("C++ and O'Reilly, 2nd-ed.") == ["c", "and", "o'reilly", "2nd", "ed"]

    def test_custom_stopwords_are_lowercased(self):
        tp = TextProcessor(stopwords=["  Python "], stemmer=IdentityStemmer())
        assert tp.tokenize("Python Tricks") == ["tricks"]

    def test_is_callable(self):
        """The processor can be passed wherever a tokenize callable is expected."""
        tp = TextProcessor()
        assert tp("Patterns") == tp.tokenize("Patterns") == ["pattern"]

    def test_same_input_same_output(self):
        tp = TextProcessor()
        text = "Designing Data-Intensive Applications"
        assert tp.tokenize(text) == tp.tokenize(text)


class TestSuggestionNormalization:
    """Test the cleaning applied before fuzzy matching."""

    def test_strips_symbols_short_words_and_stopwords(self):
        assert normalize_for_suggestion("The C++ Programming, Language!") == "programming language"

    def test_collapses_whitespace(self):
        assert normalize_for_suggestion("  clean\t\tcode  ") == "clean code"

    def test_only_stopwords_is_empty(self):
        assert normalize_for_suggestion("the of and") == ""

    def test_custom_stopwords(self):
        assert normalize_for_suggestion("Clean Code", stopwords={"clean"}) == "code"


class TestHelpers:
    def test_split_title_words_keeps_symbols(self):
        assert split_title_words("C++ Primer, 5th Edition") == ["C++", "Primer", "5th", "Edition"]

    def test_split_title_words_blank(self):
        assert split_title_words("") == []
        assert split_title_words(" , ") == []

    def test_normalize_whitespace(self):
        assert normalize_whitespace("  a \n b  ") == "a b"

    def test_title_key(self):
        assert normalize_title_key("  Clean Code ") == "clean code"
        assert normalize_title_key(None) == ""
