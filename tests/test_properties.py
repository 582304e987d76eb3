import dataclasses

import pytest

import streamcsv
from streamcsv import Properties, RowSep


def test_defaults():
    p = Properties()
    assert p.quote == '"'
    assert p.field_sep == ","
    assert p.row_sep is RowSep.LF
    assert not p.has_header
    assert not p.has_row_label
    assert p.file_path is None


def test_properties_are_immutable():
    p = Properties()
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.quote = "'"
    q = p.replace(quote="'")
    assert q.quote == "'"
    assert p.quote == '"'


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"quote": ""}, "single character"),
        ({"field_sep": ";;"}, "single character"),
        ({"field_sep": "\n"}, "line break"),
        ({"quote": ","}, "must differ"),
    ],
)
def test_invalid_properties(kwargs, message):
    with pytest.raises(streamcsv.PropertiesError) as exc:
        Properties(**kwargs)
    assert message in str(exc.value)


def test_row_sep_parsing():
    assert Properties(row_sep="CRLF").row_sep is RowSep.CRLF
    assert Properties(row_sep="\r").row_sep is RowSep.CR
    assert Properties(row_sep="lf").row_sep is RowSep.LF
    assert RowSep.CRLF.text == "\r\n"
    with pytest.raises(streamcsv.PropertiesError):
        RowSep.parse("\n\n")


def test_from_mapping_accepts_option_names():
    p = Properties.from_mapping(
        {"fieldSep": ";", "rowSep": "CRLF", "hasHeader": True, "has_row_label": True, "filePath": "x.csv"}
    )
    assert p == Properties(field_sep=";", row_sep=RowSep.CRLF, has_header=True, has_row_label=True, file_path="x.csv")


def test_from_mapping_rejects_unknown_and_repeated_options():
    with pytest.raises(streamcsv.PropertiesError):
        Properties.from_mapping({"delimiter": ";"})
    with pytest.raises(streamcsv.PropertiesError):
        Properties.from_mapping({"fieldSep": ";", "field_sep": ","})
