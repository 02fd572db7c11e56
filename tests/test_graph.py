"""
Tests for the relationship graph.

Tests cover:
1. are_related: author / category / tag / language, case-insensitive
2. RelationshipGraph.build: adjacency order, self exclusion, dedup
3. recommend: popularity ordering, stable ties, limits
4. explore: breadth-first traversal
"""

from devshelf.config import Document
from devshelf.graph import RelationshipGraph, are_related
from devshelf.normalize import normalize_title_key


def doc(doc_id, title, **kwargs):
    return Document(id=doc_id, title=title, **kwargs)


class TestAreRelated:
    def test_same_author_any_case(self):
        assert are_related(doc(1, "A", author="Robert Martin"), doc(2, "B", author="robert martin"))

    def test_shared_trimmed_tag(self):
        assert are_related(doc(1, "A", tags=[" OOP "]), doc(2, "B", tags=["design", "oop"]))

    def test_same_category_or_language(self):
        assert are_related(doc(1, "A", category="Web"), doc(2, "B", category="WEB"))
        assert are_related(doc(1, "A", language="Go"), doc(2, "B", language="go"))

    def test_padding_only_ignored_on_tags(self):
        assert not are_related(doc(1, "A", author="Robert Martin "), doc(2, "B", author="robert martin"))
        assert not are_related(doc(1, "A", language=" Go"), doc(2, "B", language="go"))

    def test_unrelated(self):
        assert not are_related(doc(1, "A", author="X", tags=["a"]), doc(2, "B", author="Y", tags=["b"]))

    def test_blank_values_never_relate(self):
        assert not are_related(doc(1, "A", author="", category=" "), doc(2, "B", author="", category=""))


class TestBuild:
    def test_adjacency_follows_corpus_order(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.connections("Clean Code") == ["the clean coder", "refactoring"]
        assert graph.connections("python") == ["python crash course"]

    def test_isolated_document_has_empty_list(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.connections("Algorithms Unlocked") == []
        assert "algorithms unlocked" in graph.adjacency

    def test_matches_pairwise_definition(self, documents):
        graph = RelationshipGraph.build(documents)
        for a in documents:
            expected = [
                normalize_title_key(b.title)
                for b in documents
                if b.id != a.id and are_related(a, b)
            ]
            assert graph.connections(a.title) == expected

    def test_input_order_does_not_matter(self, documents):
        forward = RelationshipGraph.build(documents)
        backward = RelationshipGraph.build(list(reversed(documents)))
        assert forward.adjacency == backward.adjacency

    def test_duplicate_titles_share_one_node(self):
        docs = [
            doc(1, "Go Basics", language="Go"),
            doc(2, "go basics ", language="Go"),
            doc(3, "Go Advanced", language="Go"),
        ]
        graph = RelationshipGraph.build(docs)
        assert graph.connections("Go Basics") == ["go advanced"]
        assert graph.connections("Go Advanced") == ["go basics"]
        assert graph.title_to_id["go basics"] == 1

    def test_lookup_by_title(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.title_to_id["refactoring"] == 8


class TestRecommend:
    def test_popularity_order_and_no_self(self, documents):
        graph = RelationshipGraph.build(documents)
        recs = graph.recommend("Clean Code", 5, {2: 0.3, 8: 0.9})
        assert recs == ["refactoring", "the clean coder"]
        assert "clean code" not in recs
        assert len(recs) == len(set(recs))

    def test_stable_on_ties(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.recommend("Clean Code", 5, {}) == ["the clean coder", "refactoring"]
        assert graph.recommend("Clean Code", 5, None) == ["the clean coder", "refactoring"]

    def test_limit(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.recommend("Clean Code", 1, {2: 0.3, 8: 0.9}) == ["refactoring"]
        assert graph.recommend("Clean Code", 0, {}) == []

    def test_unknown_title(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.recommend("No Such Book", 5, {}) == []

    def test_title_lookup_is_case_insensitive(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.recommend("  CLEAN CODE ", 5, {}) == ["the clean coder", "refactoring"]


class TestExplore:
    def test_breadth_first(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.explore("The Clean Coder", 5) == ["clean code", "refactoring"]

    def test_limit_and_unknown(self, documents):
        graph = RelationshipGraph.build(documents)
        assert graph.explore("The Clean Coder", 1) == ["clean code"]
        assert graph.explore("Missing", 3) == []
