from __future__ import annotations

from simweather.tags import TagScanner, extract_tag


def test_extract_returns_value_and_points_at_closing_tag() -> None:
    value, pos = extract_tag("<tag>VALUE</tag>", "<tag>", 0)

    assert value == "VALUE"
    assert pos == 10
    assert "<tag>VALUE</tag>"[pos:] == "</tag>"


def test_missing_tag_resets_cursor() -> None:
    value, pos = extract_tag("<a>1</a><b>2</b>", "<c>", 5)

    assert value == ""
    assert pos == 0


def test_tag_without_following_boundary_resets_cursor() -> None:
    value, pos = extract_tag("<a>1</a><b>dangling", "<b>", 0)

    assert value == ""
    assert pos == 0


def test_empty_element_yields_empty_value() -> None:
    value, pos = extract_tag("<error></error><x>1</x>", "<error>", 0)

    assert value == ""
    assert pos == 7


def test_scanner_reads_fields_in_document_order() -> None:
    scanner = TagScanner("<id>KL18</id><lat>33.35</lat><lon>-117.25</lon>")

    assert scanner.extract("<id>") == "KL18"
    assert scanner.extract("<lat>") == "33.35"
    assert scanner.extract("<lon>") == "-117.25"


def test_scanner_needs_reset_for_earlier_fields() -> None:
    scanner = TagScanner("<id>KL18</id><lat>33.35</lat>")

    assert scanner.extract("<lat>") == "33.35"
    assert scanner.extract("<id>") == ""
    # the failed lookup already rewound the cursor
    assert scanner.pos == 0
    assert scanner.extract("<id>") == "KL18"

    scanner.extract("<lat>")
    scanner.reset()
    assert scanner.extract("<id>") == "KL18"
