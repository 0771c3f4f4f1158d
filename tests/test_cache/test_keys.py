"""Tests for cache key derivation."""

from mjmlcache.cache.keys import (
    build_cache_key,
    derive_query_variant,
    escape_glob,
    invalidation_patterns,
    parse_variant_pattern,
)
from mjmlcache.types import ContentIdentity


class TestBuildCacheKey:
    def test_page_only(self):
        assert build_cache_key(ContentIdentity(page_id=12)) == "mjml-12"

    def test_with_language(self):
        assert build_cache_key(ContentIdentity(page_id=12, language="fr")) == "mjml-12-fr"

    def test_with_language_and_variant(self):
        identity = ContentIdentity(page_id=12, language="fr", query_variant="page=2")
        assert build_cache_key(identity) == "mjml-12-fr-page=2"

    def test_variant_without_language(self):
        identity = ContentIdentity(page_id=7, query_variant="utm_campaign=spring")
        assert build_cache_key(identity) == "mjml-7-utm_campaign=spring"

    def test_deterministic(self):
        a = ContentIdentity(page_id=3, language="de", query_variant="x=1")
        b = ContentIdentity(page_id=3, language="de", query_variant="x=1")
        assert build_cache_key(a) == build_cache_key(b)

    def test_empty_language_ignored(self):
        assert build_cache_key(ContentIdentity(page_id=12, language="")) == "mjml-12"


class TestDeriveQueryVariant:
    def test_disabled_without_pattern(self):
        assert derive_query_variant({"page": "2"}, None) is None
        assert derive_query_variant({"page": "2"}, "") is None

    def test_wildcard_matches_any(self):
        assert derive_query_variant({"anything": "v"}, "*") == "anything=v"

    def test_allow_list_match(self):
        assert derive_query_variant({"page": "2"}, "utm_campaign, page") == "page=2"

    def test_allow_list_miss(self):
        assert derive_query_variant({"sort": "asc"}, "page") is None

    def test_only_first_parameter_considered(self):
        query = {"sort": "asc", "page": "2"}
        assert derive_query_variant(query, "page") is None

    def test_raw_is_skipped(self):
        query = {"raw": "", "page": "3"}
        assert derive_query_variant(query, "page") == "page=3"

    def test_raw_alone_gives_no_variant(self):
        assert derive_query_variant({"raw": "1"}, "*") is None

    def test_empty_value_uses_name(self):
        assert derive_query_variant({"preview": ""}, "*") == "preview"

    def test_no_query(self):
        assert derive_query_variant({}, "*") is None
        assert derive_query_variant(None, "*") is None


class TestPatterns:
    def test_invalidation_patterns(self):
        assert invalidation_patterns(12) == ["mjml-12", "mjml-12-*"]

    def test_parse_variant_pattern(self):
        assert parse_variant_pattern("a, b c,,d") == {"a", "b", "c", "d"}
        assert parse_variant_pattern(None) == set()

    def test_escape_glob(self):
        assert escape_glob("mjml-1-q=a*b?[c]") == "mjml-1-q=a[*]b[?][[]c]"
        assert escape_glob("mjml-12-fr") == "mjml-12-fr"
