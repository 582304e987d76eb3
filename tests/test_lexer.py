import io

import pytest

import streamcsv
from streamcsv import END_OF_ROW, FieldLexer, RowAssembler


def read_rows(text, **kwargs):
    return list(RowAssembler(text, **kwargs))


def read_tokens(text, **kwargs):
    return list(FieldLexer(text, **kwargs))


def test_scenario_a_simple_rows():
    assert read_rows("a,b,c\n1,2,3\n") == [["a", "b", "c"], ["1", "2", "3"]]


def test_scenario_b_separator_inside_quotes():
    assert read_rows('"x,y",z\n') == [["x,y", "z"]]


def test_scenario_c_escaped_quotes():
    assert read_rows('"he said ""hi""",ok\n') == [['he said "hi"', "ok"]]


def test_scenario_d_unterminated_quote():
    with pytest.raises(streamcsv.UnterminatedQuoteError) as exc:
        read_rows('"unterminated,ok\n')
    err = exc.value
    assert err.offset == 0
    assert err.line == 1
    assert err.row == 0
    assert err.col == 0


def test_tokens_include_end_of_row_marker():
    assert read_tokens("a,b\nc\n") == ["a", "b", END_OF_ROW, "c", END_OF_ROW]


def test_field_equal_to_newline_is_not_end_of_row():
    tokens = read_tokens('"\n",x\n')
    assert tokens == ["\n", "x", END_OF_ROW]
    assert tokens[0] is not END_OF_ROW


def test_embedded_line_breaks_kept_verbatim():
    assert read_rows('"one\r\ntwo",b\n') == [["one\r\ntwo", "b"]]
    assert read_rows('"a\rb"\n') == [["a\rb"]]


def test_crlf_cr_and_lf_line_endings():
    assert read_rows("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]
    assert read_rows("a,b\rc,d\r") == [["a", "b"], ["c", "d"]]
    assert read_rows("a\r\nb\nc\rd") == [["a"], ["b"], ["c"], ["d"]]


def test_trailing_line_break_does_not_add_a_row():
    assert read_rows("a,b\n") == [["a", "b"]]
    assert read_rows("a,b") == [["a", "b"]]
    assert read_rows("a,b\r\n") == [["a", "b"]]


def test_blank_lines_are_empty_rows():
    assert read_rows("a\n\nb\n") == [["a"], [], ["b"]]
    assert read_rows("a\n\n") == [["a"], []]
    assert read_rows("\n") == [[]]


def test_empty_input_has_no_rows():
    assert read_rows("") == []
    lexer = FieldLexer("")
    assert not lexer.has_next()


def test_empty_fields():
    assert read_rows(",\n") == [["", ""]]
    assert read_rows("a,") == [["a", ""]]
    assert read_rows('"",x\n') == [["", "x"]]
    assert read_rows("a,,b\n") == [["a", "", "b"]]


def test_closing_quote_then_line_break():
    assert read_rows('"a"\r\n"b"') == [["a"], ["b"]]


def test_unexpected_quote_in_unquoted_field():
    with pytest.raises(streamcsv.UnexpectedQuoteError) as exc:
        read_rows('x,ab"c\n')
    err = exc.value
    assert err.offset == 4
    assert err.row == 0
    assert err.col == 1
    assert "non-quoted" in err.reason


def test_unescaped_quote_in_quoted_field():
    with pytest.raises(streamcsv.UnescapedQuoteError) as exc:
        read_rows('ok\n"ab"c,d\n')
    err = exc.value
    assert err.line == 2
    assert err.row == 1
    assert err.col == 0
    assert err.offset == 7


def test_syntax_errors_are_value_errors_with_context_message():
    with pytest.raises(ValueError) as exc:
        read_rows('a"b')
    assert "row=0" in str(exc.value)
    assert "col=0" in str(exc.value)


def test_custom_separator_and_quote():
    rows = read_rows("'a;b';c\n", field_sep=";", quote="'")
    assert rows == [["a;b", "c"]]
    assert read_rows("a\tb\n", field_sep="\t") == [["a", "b"]]


def test_exhaustion_contract_for_lexer():
    lexer = FieldLexer("a\n")
    assert lexer.next() == "a"
    assert lexer.next() is END_OF_ROW
    assert not lexer.has_next()
    with pytest.raises(streamcsv.ExhaustedInputError):
        lexer.next()
    with pytest.raises(streamcsv.ExhaustedInputError):
        lexer.next()


def test_exhaustion_contract_for_rows():
    rows = RowAssembler("a\n")
    assert rows.next() == ["a"]
    assert not rows.has_next()
    with pytest.raises(streamcsv.ExhaustedReaderError):
        rows.next()


def test_row_assembler_wraps_existing_lexer():
    lexer = FieldLexer("a,b\nc\n")
    rows = RowAssembler(lexer)
    assert rows.lexer is lexer
    assert rows.collect() == [["a", "b"], ["c"]]


def test_binary_file_and_chunked_sources():
    data = 'name,note\n"Zoë","x,y"\n'.encode("utf-8")
    assert read_rows(io.BytesIO(data)) == [["name", "note"], ["Zoë", "x,y"]]
    # chunk boundaries inside a multi-byte character and a CRLF
    chunks = [data[:13], data[13:14], data[14:]]
    assert read_rows(chunks) == [["name", "note"], ["Zoë", "x,y"]]
    assert read_rows(["a,b\r", "\nc,d"]) == [["a", "b"], ["c", "d"]]


def test_text_file_source():
    f = io.StringIO("a,b\n1,2\n")
    assert read_rows(f) == [["a", "b"], ["1", "2"]]


def test_char_source_tracks_offset_and_line():
    src = streamcsv.CharSource.of("a\r\nb\nc")
    taken = [src.take() for _ in range(4)]
    assert taken == ["a", "\r", "\n", "b"]
    assert src.offset == 4
    assert src.line == 2
    src.take()
    assert src.line == 3
    assert src.peek() == "c"
    src.take()
    assert not src.has_next()
    with pytest.raises(EOFError):
        src.take()


def test_undecodable_bytes_raise_csv_error():
    with pytest.raises(streamcsv.CSVDecodeError) as exc:
        read_rows(b"a,\xff\n")
    assert isinstance(exc.value, streamcsv.CSVError)
    assert exc.value.offset == 2
    assert exc.value.encoding == "utf-8"
    assert "offset=2" in str(exc.value)


def test_decode_error_offset_spans_chunks():
    # \xc3 opens a two-byte sequence that the next chunk does not complete
    chunks = [b"ab\xc3", b"(\n"]
    with pytest.raises(streamcsv.CSVDecodeError) as exc:
        read_rows(chunks)
    assert exc.value.offset == 2


def test_unsupported_source_type():
    with pytest.raises(TypeError):
        FieldLexer(42)


def test_load_is_idempotent_over_independent_lexers():
    text = 'a,"b\nc"\r\n1,2\n'
    assert read_rows(text) == read_rows(text)
