import io

import pytest

import streamcsv
from streamcsv import Properties, RowSep, dumps_rows, format_field, format_row, write_rows

PROPS = Properties()


def test_plain_fields_are_not_quoted():
    assert format_field("abc", PROPS) == "abc"
    assert format_field("", PROPS) == ""


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        ("cr\ronly", '"cr\ronly"'),
    ],
)
def test_fields_needing_quotes(text, expected):
    assert format_field(text, PROPS) == expected


def test_custom_quote_and_separator():
    props = Properties(quote="'", field_sep=";")
    assert format_field("a;b", props) == "'a;b'"
    assert format_field("it's", props) == "'it''s'"
    assert format_field("a,b", props) == "a,b"


def test_row_endings_follow_row_sep():
    assert format_row(["a", "b"], PROPS) == "a,b\n"
    assert format_row(["a", "b"], PROPS.replace(row_sep=RowSep.CRLF)) == "a,b\r\n"
    assert format_row(["a"], PROPS.replace(row_sep=RowSep.CR)) == "a\r"


def test_lone_empty_field_is_quoted():
    assert format_row([""], PROPS) == '""\n'
    assert format_row([], PROPS) == "\n"
    assert format_row(["", ""], PROPS) == ",\n"


def test_write_rows_writes_once():
    f = io.StringIO()
    n = write_rows(f, [["a", "b,c"], ["1", "2"]], row_sep="\r\n")
    assert f.getvalue() == 'a,"b,c"\r\n1,2\r\n'
    assert n == len(f.getvalue())


def test_quoting_invariant_round_trip():
    rows = [["a,b", 'q"q', "line\r\nbreak", "", "plain"], ["x"]]
    text = dumps_rows(rows)
    assert streamcsv.row_reader(text).collect() == rows
