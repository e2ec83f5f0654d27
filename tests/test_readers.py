"""
Source reader tests for markovgraph.
"""

from __future__ import annotations

import json

import pytest

from markovgraph.errors import MalformedSourceError, UnsupportedSourceError
from markovgraph.models import ReaderConfig
from markovgraph.readers import available_source_readers, file_type, get_source_reader_for_path
from markovgraph.readers.message_archive import MessageArchiveReader
from markovgraph.readers.text_lines import TextLineReader
from markovgraph.tokenization import to_words


def test_to_words_splits_on_whitespace_runs():
    """
    Runs of spaces, tabs and newlines never produce empty tokens.
    """
    assert to_words("  the\tcat   sat\n") == ["the", "cat", "sat"]
    assert to_words("   ") == []


def test_file_type_is_case_insensitive_suffix():
    """
    The file type is the lower-cased suffix without its dot.
    """
    assert file_type("notes/Chat.JSON") == "json"
    assert file_type("corpus.txt") == "txt"
    assert file_type("README") == ""


def test_reader_registry_dispatches_by_suffix():
    """
    Text and JSON files resolve to their readers; other types are unsupported.
    """
    assert set(available_source_readers()) == {"text-lines", "message-archive"}
    assert isinstance(get_source_reader_for_path("book.txt"), TextLineReader)
    assert isinstance(get_source_reader_for_path("export.json"), MessageArchiveReader)
    with pytest.raises(UnsupportedSourceError, match="'csv' file type"):
        get_source_reader_for_path("table.csv")


def test_text_reader_drops_short_lines(tmp_path):
    """
    Lines with fewer than the minimum number of tokens are ignored.
    """
    path = tmp_path / "book.txt"
    path.write_text(
        "one two three four five\nshort line\n\n  six   seven eight nine ten eleven \n",
        encoding="utf-8",
    )
    chains = list(TextLineReader().read_chains(path, config=ReaderConfig()))
    assert chains == [
        ["one", "two", "three", "four", "five"],
        ["six", "seven", "eight", "nine", "ten", "eleven"],
    ]


def test_text_reader_honours_minimum(tmp_path):
    """
    Lowering the minimum admits shorter lines but never empty ones.
    """
    path = tmp_path / "book.txt"
    path.write_text("hi\n\n   \nhello there\n", encoding="utf-8")
    chains = list(TextLineReader().read_chains(path, config=ReaderConfig(min_tokens=0)))
    assert chains == [["hi"], ["hello", "there"]]


def test_message_archive_reader_uses_string_texts(tmp_path):
    """
    Only records with a plain string text payload are read.
    """
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps(
            {
                "name": "chat",
                "messages": [
                    {"id": 1, "text": "we should meet for lunch tomorrow then"},
                    {"id": 2, "text": ["rich ", {"type": "bold", "text": "text"}]},
                    {"id": 3, "text": "ok"},
                    {"id": 4},
                    "not a record",
                    {"id": 5, "text": "see you at the usual place"},
                ],
            }
        ),
        encoding="utf-8",
    )
    chains = list(MessageArchiveReader().read_chains(path, config=ReaderConfig()))
    assert chains == [
        ["we", "should", "meet", "for", "lunch", "tomorrow", "then"],
        ["see", "you", "at", "the", "usual", "place"],
    ]


def test_message_archive_reader_custom_fields(tmp_path):
    """
    The record array and payload field names are configurable.
    """
    path = tmp_path / "posts.json"
    path.write_text(
        json.dumps({"posts": [{"body": "alpha beta gamma"}]}),
        encoding="utf-8",
    )
    config = ReaderConfig(min_tokens=3, messages_field="posts", text_field="body")
    assert list(MessageArchiveReader().read_chains(path, config=config)) == [
        ["alpha", "beta", "gamma"]
    ]


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ("{not json", "Parsing failed"),
        ("[1, 2, 3]", "root must be an object"),
        ('{"messages": {"text": "x"}}', "'messages' must be an array"),
        ("{}", "'messages' must be an array"),
    ],
)
def test_message_archive_reader_rejects_malformed_documents(tmp_path, payload, message):
    """
    Documents that are not message archives raise a malformed source error.
    """
    path = tmp_path / "broken.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(MalformedSourceError, match=message):
        list(MessageArchiveReader().read_chains(path, config=ReaderConfig()))
