"""Splitting of delimited label files."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dmglicense.enums import Delimiter
from dmglicense.labels import delimiter_bytes, split_delimited


class TestSplitDelimited:
    """split_delimited behavior."""

    def test_single_delimiter(self) -> None:
        assert split_delimited(b"a\tb\tc", ["tab"]) == [b"a", b"b", b"c"]

    def test_trailing_delimiter_adds_no_piece(self) -> None:
        assert split_delimited(b"a\nb\n", ["lf"]) == [b"a", b"b"]

    def test_leading_and_doubled_delimiters_keep_empty_pieces(self) -> None:
        assert split_delimited(b"\ta\t\tb", ["tab"]) == [b"", b"a", b"", b"b"]

    def test_eol_consumes_crlf_whole(self) -> None:
        assert split_delimited(b"a\r\nb\rc\nd", ["eol"]) == [b"a", b"b", b"c", b"d"]

    def test_earliest_match_wins(self) -> None:
        assert split_delimited(b"a\nb\tc", ["tab", "lf"]) == [b"a", b"b", b"c"]

    def test_tie_goes_to_first_listed(self) -> None:
        assert split_delimited(b"a\r\nb", ["cr", "crlf"]) == [b"a", b"\nb"]
        assert split_delimited(b"a\r\nb", ["crlf", "cr"]) == [b"a", b"b"]

    def test_literal_delimiter(self) -> None:
        assert split_delimited(b"a||b||c", [b"||"]) == [b"a", b"b", b"c"]

    def test_enum_members(self) -> None:
        assert split_delimited(b"a\x00b", [Delimiter.NUL]) == [b"a", b"b"]

    def test_no_delimiter_found(self) -> None:
        assert split_delimited(b"abc", ["tab"]) == [b"abc"]

    def test_empty_input(self) -> None:
        assert split_delimited(b"", ["tab"]) == []

    def test_empty_literal_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            split_delimited(b"abc", [b""])

    def test_unknown_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            delimiter_bytes(["semicolon"])

    def test_eol_expansion_order(self) -> None:
        assert delimiter_bytes(["eol"]) == [b"\r\n", b"\r", b"\n"]

    @given(pieces=st.lists(st.binary(max_size=20).filter(lambda b: b"\t" not in b), min_size=1))
    def test_join_then_split(self, pieces: list[bytes]) -> None:
        joined = b"\t".join(pieces)
        result = split_delimited(joined, ["tab"])
        # A trailing empty piece disappears with the trailing delimiter.
        expected = pieces[:-1] if pieces[-1] == b"" else pieces
        if joined == b"":
            expected = []
        assert result == expected
