from __future__ import annotations

import pytest

from pulverizer.services.format_sniffer import (
    CLOSING_DETAIL,
    INVALID_ENCODING_DETAIL,
    JSON_DETAIL,
    MARKDOWN_DETAIL,
    MAX_CLASSIFY_BYTES,
    NO_MARKUP_DETAIL,
    OVERSIZE_MESSAGE,
    XML_DETAIL,
    PayloadTooLargeError,
    classify,
    looks_like_json,
    looks_like_markdown,
    looks_like_xml,
)


def test_json_object_is_json_but_not_xml():
    report = classify(b'{"a":1}')

    assert report.is_json is True
    assert report.is_xml is False
    assert report.details[0] == JSON_DETAIL
    assert report.details[-1] == CLOSING_DETAIL


def test_balanced_tags_are_xml():
    report = classify(b"<a></a>")

    assert report.is_xml is True
    assert report.is_json is False
    assert XML_DETAIL in report.details


def test_invalid_utf8_short_circuits_every_check():
    report = classify(bytes([0xFF, 0xFE]))

    assert (report.is_json, report.is_xml, report.is_markdown) == (False, False, False)
    assert report.details == (INVALID_ENCODING_DETAIL,)


def test_payload_one_byte_over_limit_is_refused():
    with pytest.raises(PayloadTooLargeError) as exc_info:
        classify(b"x" * (MAX_CLASSIFY_BYTES + 1))

    assert str(exc_info.value) == OVERSIZE_MESSAGE
    assert exc_info.value.size == MAX_CLASSIFY_BYTES + 1
    assert exc_info.value.limit == MAX_CLASSIFY_BYTES


def test_oversize_is_refused_even_when_not_utf8():
    with pytest.raises(PayloadTooLargeError):
        classify(b"\xff" * (MAX_CLASSIFY_BYTES + 1))


def test_payload_at_limit_is_classified():
    report = classify(b"a" * MAX_CLASSIFY_BYTES)

    assert report.is_markdown is True


def test_custom_limit_is_respected():
    with pytest.raises(PayloadTooLargeError):
        classify(b"12345", max_size=4)


@pytest.mark.parametrize(
    "text",
    [
        "null",
        "true",
        "42",
        "-1.5e3",
        '"quoted"',
        "[1, 2, 3]",
        '  {"nested": {"k": [null]}}\n',
        "1" * 5000,
        "[" + "9" * 4301 + "]",
        "-" + "7" * 6000 + ".5e" + "3" * 5000,
    ],
)
def test_any_single_json_value_is_json(text):
    assert looks_like_json(text) is True


@pytest.mark.parametrize(
    "text",
    ['{"a":1} trailing', "[1, 2", "{'a': 1}", "NaN", "[Infinity]", "", "1 2"],
)
def test_non_json_is_rejected(text):
    assert looks_like_json(text) is False


def test_deeply_nested_json_does_not_raise():
    assert looks_like_json("[" * 60000) is False


@pytest.mark.parametrize(
    "text",
    [
        "<a></a>",
        "<root><child attr='1'>text</child><empty/></root>",
        '<?xml version="1.0"?>\n<doc>&amp;</doc>',
        "<a><!-- note --><![CDATA[<raw>]]></a>",
    ],
)
def test_well_formed_xml(text):
    assert looks_like_xml(text) is True


@pytest.mark.parametrize(
    "text",
    ["<a>", "<a></b>", "<a><b></a></b>", "plain words", "<a></a><b></b>", "", "<a attr=1></a>", "<a>&bogus;</a>"],
)
def test_malformed_xml(text):
    assert looks_like_xml(text) is False


def test_large_xml_document_spanning_chunks():
    text = "<items>" + "<item>value</item>" * 2000 + "</items>"

    assert looks_like_xml(text) is True


def test_markdown_is_permissive_for_plain_text():
    assert looks_like_markdown("just a sentence") is True
    assert looks_like_markdown("# Heading\n\n- item") is True
    assert looks_like_markdown("<a></a>") is True


def test_blank_text_is_not_markdown():
    assert looks_like_markdown("") is False
    assert looks_like_markdown("   \n\n") is False


def test_empty_payload_reports_no_markup():
    report = classify(b"")

    assert (report.is_json, report.is_xml, report.is_markdown) == (False, False, False)
    assert report.details == (NO_MARKUP_DETAIL, CLOSING_DETAIL)


def test_details_follow_check_order():
    report = classify(b"<note>hi</note>")

    assert report.details == (XML_DETAIL, MARKDOWN_DETAIL, CLOSING_DETAIL)


def test_json_that_is_also_markdown():
    report = classify(b'{"a": 1}')

    assert report.is_markdown is True
    assert report.details == (JSON_DETAIL, MARKDOWN_DETAIL, CLOSING_DETAIL)


def test_classification_is_deterministic():
    payload = "# Title\n\n<b>bold</b> and {\"k\": 1}".encode("utf-8")

    assert classify(payload) == classify(payload)
    assert classify(payload).to_dict() == classify(payload).to_dict()


def test_to_dict_shape():
    body = classify(b"[]").to_dict()

    assert set(body) == {"is_json", "is_xml", "is_markdown", "details"}
    assert isinstance(body["details"], list)


def test_long_integer_payload_is_classified_as_json():
    report = classify(b"[" + b"9" * 4301 + b"]")

    assert report.is_json is True
    assert report.details[0] == JSON_DETAIL
