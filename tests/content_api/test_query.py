"""Tests for the bracket-encoding query serializer."""

from datetime import date, datetime

import pytest

from src.content_api.exceptions import QuerySerializationError
from src.content_api.query import serialize_query


class TestScalars:
    def test_simple_key(self):
        assert serialize_query({"populate": "*"}) == "populate=*"

    def test_booleans_and_none(self):
        assert serialize_query({"a": True, "b": False, "c": None}) == "a=true&b=false&c="

    def test_numbers(self):
        assert serialize_query({"pagination": {"limit": 100}}) == "pagination[limit]=100"

    def test_dates_use_iso_format(self):
        query = serialize_query(
            {"d": date(2026, 1, 5), "t": datetime(2026, 1, 5, 9, 30)}
        )
        assert query == "d=2026-01-05&t=2026-01-05T09:30:00"

    def test_values_are_escaped(self):
        assert serialize_query({"q": "a b&c=d/é"}) == "q=a%20b%26c%3Dd%2F%C3%A9"

    def test_readable_characters_stay_unescaped(self):
        assert serialize_query({"sort": "publishedAt:desc,title"}) == "sort=publishedAt:desc,title"


class TestNesting:
    def test_filter_operator(self):
        query = serialize_query({"filters": {"slug": {"$eq": "hello"}}})
        assert query == "filters[slug][$eq]=hello"

    def test_populate_fields_use_brackets(self):
        query = serialize_query({"populate": {"seo": {"fields": ["a", "b"]}}})
        assert query == "populate[seo][fields][]=a&populate[seo][fields][]=b"

    def test_indices_format(self):
        query = serialize_query({"sort": ["publishedAt:desc", "title"]}, array_format="indices")
        assert query == "sort[0]=publishedAt:desc&sort[1]=title"

    def test_list_of_mappings(self):
        query = serialize_query({"filters": {"$or": [{"a": 1}, {"b": 2}]}})
        assert query == "filters[$or][][a]=1&filters[$or][][b]=2"

    def test_key_order_is_preserved(self):
        query = serialize_query({"sort": ["publishedAt:desc"], "populate": "*"})
        assert query == "sort[]=publishedAt:desc&populate=*"

    def test_empty_containers_emit_nothing(self):
        assert serialize_query({"fields": [], "filters": {}, "populate": "*"}) == "populate=*"

    def test_empty_config(self):
        assert serialize_query({}) == ""

    def test_sets_are_sorted(self):
        query = serialize_query({"fields": {"title", "slug", "author"}})
        assert query == "fields[]=author&fields[]=slug&fields[]=title"


class TestDeterminism:
    def test_repeated_calls_identical(self):
        config = {
            "filters": {"slug": {"$eq": "hello world"}},
            "populate": {
                "featuredImage": {"fields": ["url", "alternativeText"]},
                "seo": {"fields": ["seoTitle", "seoDescription"]},
            },
            "sort": ["publishedAt:desc"],
            "fields": {"slug", "title"},
            "pagination": {"limit": 100},
        }
        results = {serialize_query(config) for _ in range(5)}
        assert len(results) == 1

    def test_input_not_mutated(self):
        config = {"filters": {"slug": {"$eq": "x"}}}
        serialize_query(config)
        assert config == {"filters": {"slug": {"$eq": "x"}}}


class TestFailures:
    def test_cyclic_mapping_fails_fast(self):
        config: dict = {"filters": {}}
        config["filters"]["self"] = config["filters"]
        with pytest.raises(QuerySerializationError, match="Cyclic"):
            serialize_query(config)

    def test_cyclic_list_fails_fast(self):
        items: list = ["a"]
        items.append(items)
        with pytest.raises(QuerySerializationError):
            serialize_query({"fields": items})

    def test_shared_subtree_is_not_a_cycle(self):
        shared = {"fields": ["url"]}
        query = serialize_query({"populate": {"a": shared, "b": shared}})
        assert query == "populate[a][fields][]=url&populate[b][fields][]=url"

    def test_unknown_array_format(self):
        with pytest.raises(QuerySerializationError):
            serialize_query({"a": [1]}, array_format="comma")

    def test_serialization_error_is_value_error(self):
        assert issubclass(QuerySerializationError, ValueError)

    def test_garbage_in_does_not_raise(self):
        query = serialize_query({"filters": object, "x": 3.5})
        assert query.startswith("filters=")
        assert query.endswith("&x=3.5")
