"""Tests for list encoding and identifier helpers."""

from orpheus_common.utils import decode_list, encode_list, generate_id, normalize_key


def test_encode_list_joins_and_strips():
    assert encode_list([" winter ", "mountains", "", "  "]) == "winter,mountains"


def test_encode_list_none_stays_none():
    assert encode_list(None) is None


def test_items_with_commas_survive_encoding():
    authors = ["Orpheus D.", "Smith, J.", "Back\\slash"]
    assert decode_list(encode_list(authors)) == authors


def test_legacy_plain_text_decodes():
    assert decode_list("winter, mountains,,snow") == ["winter", "mountains", "snow"]


def test_decode_empty_values():
    assert decode_list(None) == []
    assert decode_list("") == []


def test_generate_id_is_url_safe():
    value = generate_id()
    assert len(value) == 21
    assert all(char.isalnum() or char in "-_" for char in value)
    assert len(generate_id(7)) == 7


def test_normalize_key_strips_leading_slashes():
    assert normalize_key("//images/a.jpg") == "images/a.jpg"
    assert normalize_key("pdfs/b.pdf") == "pdfs/b.pdf"
