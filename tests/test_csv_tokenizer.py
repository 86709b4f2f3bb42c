"""Tests for the line-oriented CSV tokenizer."""
from src.zander.services.csv_tokenizer import parse_csv_line, split_lines, tokenize_csv


def test_quoted_comma_stays_in_field():
    assert parse_csv_line('Widget,"foo, bar",5.00') == ["Widget", "foo, bar", "5.00"]


def test_plain_line_splits_on_commas():
    assert parse_csv_line("a,b,c") == ["a", "b", "c"]


def test_empty_fields_are_kept():
    assert parse_csv_line("a,,c,") == ["a", "", "c", ""]


def test_quote_characters_are_not_emitted():
    assert parse_csv_line('"Widget","19.99"') == ["Widget", "19.99"]


def test_unbalanced_quote_runs_to_end_of_line():
    """An unterminated quote swallows the remaining separators."""
    assert parse_csv_line('Widget,"foo, bar,5.00') == ["Widget", "foo, bar,5.00"]


def test_whitespace_is_not_trimmed_by_tokenizer():
    assert parse_csv_line(' a , b ') == [" a ", " b "]


def test_split_lines_drops_blank_lines():
    text = "name,sku\n\n   \nWidget,W-1\n"
    assert split_lines(text) == ["name,sku", "Widget,W-1"]


def test_tokenize_requires_header_and_data():
    assert tokenize_csv("") == []
    assert tokenize_csv("name,sku\n") == []
    assert tokenize_csv("\n\nname,sku\n\n") == []


def test_tokenize_returns_all_lines():
    rows = tokenize_csv("name,price\nWidget,1\nGadget,2\n")
    assert rows == [["name", "price"], ["Widget", "1"], ["Gadget", "2"]]


def test_tokenize_handles_crlf_line_endings():
    rows = tokenize_csv("name,price\r\nWidget,1\r\n")
    assert len(rows) == 2
    assert rows[1][1].strip() == "1"
