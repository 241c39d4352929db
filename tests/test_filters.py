from newsdesk.services.filters import (
    build_article_query,
    flatten_unique,
    split_tags,
)


def test_split_tags_from_comma_string():
    assert split_tags("tech, science,,tech , ") == ["tech", "science"]


def test_split_tags_from_list():
    assert split_tags(["tech", "a,b", "", None, "tech"]) == ["tech", "a", "b"]


def test_split_tags_empty():
    assert split_tags(None) == []
    assert split_tags("") == []


def test_flatten_unique_mixed_shapes():
    values = ["tech", ["tech", "science"], None, "", ["", "politics"], "science"]
    assert flatten_unique(values) == ["tech", "science", "politics"]


def test_query_always_restricted_to_approved():
    query = build_article_query()
    assert query.filters == [("status", "==", "approved")]
    assert query.search is None


def test_query_publisher_filter_and_tag_predicate():
    query = build_article_query(publisher=" Daily Ledger ", tags="tech,science")
    assert query.filters == [("status", "==", "approved"), ("publisher", "==", "Daily Ledger")]
    assert query.tags == ["tech", "science"]


def test_tag_match_accepts_list_and_single_string():
    query = build_article_query(tags="tech,science")
    docs = [
        ("list", {"tags": ["politics", "science"]}),
        ("scalar", {"tags": "tech"}),
        ("other", {"tags": ["sports"]}),
        ("other-scalar", {"tags": "sports"}),
        ("none", {"tags": None}),
        ("missing", {}),
    ]
    assert [doc_id for doc_id, _ in query.apply(docs)] == ["list", "scalar"]


def test_search_and_tags_combine():
    query = build_article_query(search="vote", tags="politics")
    assert query.matches({"title": "Vote count", "tags": "politics"})
    assert not query.matches({"title": "Vote count", "tags": ["sports"]})
    assert not query.matches({"title": "Weather", "tags": ["politics"]})


def test_flatten_unique_handles_many_values():
    values = [[f"t{i % 50}", f"t{(i + 1) % 50}"] for i in range(5000)]
    assert flatten_unique(values) == [f"t{i}" for i in range(50)]


def test_search_is_case_insensitive_substring():
    query = build_article_query(search="ELECT")
    docs = [
        ("a", {"title": "Election night"}),
        ("b", {"title": "Weather"}),
        ("c", {"title": "Local elections recap"}),
        ("d", {}),
    ]
    assert [doc_id for doc_id, _ in query.apply(docs)] == ["a", "c"]


def test_blank_search_matches_everything():
    query = build_article_query(search="   ")
    assert query.matches({"title": "Anything"})
