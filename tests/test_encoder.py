"""Unit tests for the command encoder.

The encoder is pure, so these tests only compare token lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pytest

from redisearch_client.encoder import (
    encode_create_index,
    encode_drop_index,
    encode_index_exists,
    encode_search,
    encode_upsert,
)
from redisearch_client.exceptions import RediSearchValidationError
from redisearch_client.models import (
    FIELD_TYPE_GEO,
    FIELD_TYPE_NUMERIC,
    FIELD_TYPE_TAG,
    FIELD_TYPE_TEXT,
    INDEX_FLAG_NO_OFFSETS,
    INDEX_FLAG_SKIP_INITIAL_SCAN,
    SEARCH_FLAG_NO_STOP_WORDS,
    SEARCH_FLAG_VERBATIM,
    FieldFilter,
    FieldSchema,
    GeoFilter,
    Highlight,
    IndexOptions,
    Limit,
    SearchOptions,
    SortBy,
    Summarize,
    schema_opt_no_index,
    schema_opt_no_stem,
    schema_opt_phonetic,
    schema_opt_sortable,
    schema_opt_tag_separator,
    schema_opt_weight,
)
from redisearch_client.records import wire_field


def _split_schema(args):
    """Return ``(head, field_blocks)`` where each block starts at a field name."""
    idx = args.index("SCHEMA")
    return args[: idx + 1], args[idx + 1:]


# -----------------------------------------------------------------------
# Schema options
# -----------------------------------------------------------------------


class TestSchemaOptions:
    def test_builders(self):
        assert schema_opt_no_stem() == ("NOSTEM",)
        assert schema_opt_sortable() == ("SORTABLE",)
        assert schema_opt_no_index() == ("NOINDEX",)
        assert schema_opt_phonetic("dm:en") == ("PHONETIC", "dm:en")

    def test_weight_formats_one_decimal(self):
        assert schema_opt_weight(2) == ("WEIGHT", "2.0")
        assert schema_opt_weight(0.33) == ("WEIGHT", "0.3")

    def test_tag_separator_is_a_single_byte(self):
        assert schema_opt_tag_separator(";") == ("SEPARATOR", b";")
        assert schema_opt_tag_separator(b"|") == ("SEPARATOR", b"|")

    @pytest.mark.parametrize("bad", ["", ";;", b"ab"])
    def test_tag_separator_rejects_other_lengths(self, bad):
        with pytest.raises(RediSearchValidationError):
            schema_opt_tag_separator(bad)


# -----------------------------------------------------------------------
# FT.CREATE
# -----------------------------------------------------------------------


class TestEncodeCreateIndex:
    def test_minimal(self):
        assert encode_create_index(IndexOptions(index_name="idx")) == [
            "FT.CREATE", "idx", "ON", "HASH",
        ]

    def test_zero_and_empty_values_are_omitted(self):
        opts = IndexOptions(
            index_name="idx",
            prefix=[],
            filter="",
            score=0,
            temporary=-1,
            stop_words=[],
            schema={"title": FieldSchema(FIELD_TYPE_TEXT)},
        )
        assert encode_create_index(opts) == [
            "FT.CREATE", "idx", "ON", "HASH", "SCHEMA", "title", "TEXT",
        ]

    def test_all_options(self):
        opts = IndexOptions(
            index_name="movies",
            prefix=["movie:", "film:"],
            filter='@year>1990',
            language="english",
            language_field="lang",
            score=0.5,
            score_field="rank",
            payload_field="blob",
            flags=[INDEX_FLAG_NO_OFFSETS, INDEX_FLAG_SKIP_INITIAL_SCAN],
            stop_words=["a", "the"],
            temporary=300.0,
            schema={
                "title": FieldSchema(
                    FIELD_TYPE_TEXT, [schema_opt_weight(5), schema_opt_sortable()]
                ),
                "year": FieldSchema(FIELD_TYPE_NUMERIC, [schema_opt_sortable()]),
                "genre": FieldSchema(FIELD_TYPE_TAG, [schema_opt_tag_separator("|")]),
                "location": FieldSchema(FIELD_TYPE_GEO),
            },
        )
        head, blocks = _split_schema(encode_create_index(opts))
        assert head == [
            "FT.CREATE", "movies", "ON", "HASH",
            "PREFIX", 2, "movie:", "film:",
            "FILTER", "@year>1990",
            "LANGUAGE", "english",
            "LANGUAGE_FIELD", "lang",
            "SCORE", 0.5,
            "SCORE_FIELD", "rank",
            "PAYLOAD_FIELD", "blob",
            "TEMPORARY", 300,
            "STOPWORDS", 2, "a", "the",
            "NOOFFSETS", "SKIPINITIALSCAN",
            "SCHEMA",
        ]
        # field blocks may come out in any order
        expected_blocks = [
            ["title", "TEXT", "WEIGHT", "5.0", "SORTABLE"],
            ["year", "NUMERIC", "SORTABLE"],
            ["genre", "TAG", "SEPARATOR", b"|"],
            ["location", "GEO"],
        ]
        assert len(blocks) == sum(len(b) for b in expected_blocks)
        for block in expected_blocks:
            start = blocks.index(block[0])
            assert blocks[start:start + len(block)] == block

    def test_temporary_is_whole_seconds(self):
        args = encode_create_index(IndexOptions(index_name="idx", temporary=300.0))
        assert args == ["FT.CREATE", "idx", "ON", "HASH", "TEMPORARY", 300]
        assert type(args[-1]) is int

    def test_options_are_passed_through_uninterpreted(self):
        # NOSTEM is meaningless on NUMERIC; the server decides
        opts = IndexOptions(
            index_name="idx",
            schema={"n": FieldSchema(FIELD_TYPE_NUMERIC, [schema_opt_no_stem()])},
        )
        assert encode_create_index(opts)[-3:] == ["n", "NUMERIC", "NOSTEM"]


# -----------------------------------------------------------------------
# FT.SEARCH
# -----------------------------------------------------------------------


class TestEncodeSearch:
    def test_minimal(self):
        assert encode_search(SearchOptions(index_name="idx", query="hello")) == [
            "FT.SEARCH", "idx", "hello",
        ]

    def test_canonical_order(self):
        # keyword order deliberately scrambled
        opts = SearchOptions(
            limit=Limit(5, 20),
            sort_by=SortBy("year", descending=True),
            payload="p",
            scorer="BM25",
            expander="SYNONYM",
            language="english",
            slop=1,
            highlight=Highlight(fields=["title"], open_tag="<b>", close_tag="</b>"),
            summarize=Summarize(fields=["body"], fragments=2, length=10, separator="|"),
            return_fields=["title", "year"],
            in_fields=["title"],
            in_keys=["doc:1", "doc:2"],
            geo_filter=GeoFilter("loc", -122.4, 37.7, 10, "km"),
            filters=[FieldFilter("year", 2000, 2020), FieldFilter("rating", 1, 5, exclusive=True)],
            flags=[SEARCH_FLAG_VERBATIM, SEARCH_FLAG_NO_STOP_WORDS],
            query="hello world",
            index_name="idx",
        )
        assert encode_search(opts) == [
            "FT.SEARCH", "idx", "hello world",
            "VERBATIM", "NOSTOPWORDS",
            "FILTER", "year", 2000, 2020,
            "FILTER", "rating", "(1", "(5",
            "GEOFILTER", "loc", -122.4, 37.7, 10, "km",
            "INKEYS", 2, "doc:1", "doc:2",
            "INFIELDS", 1, "title",
            "RETURN", 2, "title", "year",
            "SUMMARIZE", "FIELDS", 1, "body", "FRAGS", 2, "LEN", 10, "SEPARATOR", "|",
            "HIGHLIGHT", "FIELDS", 1, "title", "TAGS", "<b>", "</b>",
            "SLOP", 1,
            "LANGUAGE", "english",
            "EXPANDER", "SYNONYM",
            "SCORER", "BM25",
            "PAYLOAD", "p",
            "SORTBY", "year", "DESC",
            "LIMIT", 5, 20,
        ]

    def test_geo_unit_defaults_to_meters_without_mutating_request(self):
        geo = GeoFilter("loc", 1.5, 2.5, 100)
        opts = SearchOptions(index_name="idx", query="*", geo_filter=geo)
        assert encode_search(opts)[3:] == ["GEOFILTER", "loc", 1.5, 2.5, 100, "m"]
        assert geo.unit == ""

    def test_bare_summarize_and_highlight(self):
        opts = SearchOptions(
            index_name="idx", query="q", summarize=Summarize(), highlight=Highlight()
        )
        assert encode_search(opts)[3:] == ["SUMMARIZE", "HIGHLIGHT"]

    def test_highlight_tags_need_both_ends(self):
        opts = SearchOptions(
            index_name="idx", query="q", highlight=Highlight(open_tag="<b>")
        )
        assert encode_search(opts)[3:] == ["HIGHLIGHT"]

    def test_zero_slop_is_sent(self):
        opts = SearchOptions(index_name="idx", query="q", slop=0)
        assert encode_search(opts)[3:] == ["SLOP", 0]

    def test_ascending_sort(self):
        opts = SearchOptions(index_name="idx", query="q", sort_by=SortBy("title"))
        assert encode_search(opts)[3:] == ["SORTBY", "title", "ASC"]

    def test_default_limit(self):
        opts = SearchOptions(index_name="idx", query="q", limit=Limit())
        assert encode_search(opts)[3:] == ["LIMIT", 0, 10]


# -----------------------------------------------------------------------
# FT.DROPINDEX / FT.INFO
# -----------------------------------------------------------------------


class TestEncodeIndexCommands:
    def test_drop_keeps_documents_by_default(self):
        assert encode_drop_index("idx") == ["FT.DROPINDEX", "idx"]

    def test_drop_with_purge(self):
        assert encode_drop_index("idx", True) == ["FT.DROPINDEX", "idx", "DD"]

    def test_index_exists_probe(self):
        assert encode_index_exists("idx") == ["FT.INFO", "idx"]


# -----------------------------------------------------------------------
# HSET mapping
# -----------------------------------------------------------------------


@dataclass
class Article:
    title: str
    views: int = 0
    rating: float = 0.0
    published: bool = False
    author: str = wire_field("author_name", default="")
    secret: str = wire_field("-", default="hidden")
    tags: List[str] = field(default_factory=list)


class TestEncodeUpsert:
    def test_mapping_keeps_primitive_values(self):
        value = {"title": "Hi", "views": 3, "score": 1.5, "raw": b"\x00", "tags": ["a"], "none": None}
        assert encode_upsert(value) == {"title": "Hi", "views": 3, "score": 1.5, "raw": b"\x00"}

    def test_bools_are_written_as_digits(self):
        assert encode_upsert({"on": True, "off": False}) == {"on": "1", "off": "0"}

    def test_dataclass_uses_wire_names(self):
        value = Article(title="Hi", views=7, rating=4.5, published=True, author="Ann", tags=["x"])
        assert encode_upsert(value) == {
            "title": "Hi",
            "views": 7,
            "rating": 4.5,
            "published": "1",
            "author_name": "Ann",
        }

    @pytest.mark.parametrize("bad", ["text", 42, ["a", "b"], Article])
    def test_rejects_other_values(self, bad):
        with pytest.raises(RediSearchValidationError):
            encode_upsert(bad)
