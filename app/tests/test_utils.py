from app.utils.pagination import paginate
from app.utils.sanitizer import sanitize_html
from app.utils.text import (
    display_name,
    format_phone,
    is_valid_phone,
    reading_time,
    slugify,
    split_list,
)
from app.utils.query import escape_like, to_snake


def test_paginate_middle_page():
    p = paginate(page=2, limit=10, total=35)
    assert p.current_page == 2
    assert p.total_pages == 4
    assert p.skip == 10
    assert p.has_next and p.has_prev
    assert p.next_page == 3
    assert p.prev_page == 1


def test_paginate_clamps_bad_input():
    p = paginate(page=0, limit=0, total=3)
    assert p.current_page == 1
    assert p.items_per_page == 1
    assert p.skip == 0
    assert p.prev_page is None

    p = paginate(page=-5, limit=10, total=0)
    assert p.current_page == 1
    assert p.total_pages == 0
    assert not p.has_next
    assert p.next_page is None


def test_paginate_last_page():
    p = paginate(page=4, limit=10, total=35)
    assert not p.has_next
    assert p.has_prev
    assert p.to_dict()["total"] == 35


def test_slugify():
    assert slugify("Hello, World!") == "hello-world"
    assert slugify("  Multiple   spaces -- and dashes ") == "multiple-spaces-and-dashes"
    assert slugify("Café 2024") == "caf-2024"
    assert slugify("---") == ""


def test_reading_time():
    assert reading_time("") == 1
    assert reading_time("word " * 200) == 1
    assert reading_time("word " * 201) == 2
    assert reading_time("word " * 1000) == 5


def test_phone_validation_and_format():
    assert is_valid_phone("(555) 123-4567")
    assert is_valid_phone("+1 555 123 4567")
    assert not is_valid_phone("12345")
    assert not is_valid_phone("2 555 123 4567")
    assert not is_valid_phone(None)

    assert format_phone("5551234567") == "(555) 123-4567"
    assert format_phone("15551234567") == "+1 (555) 123-4567"
    assert format_phone("12345") == "12345"
    assert format_phone(None) is None


def test_display_name_and_split_list():
    assert display_name("market-trends") == "Market Trends"
    assert split_list(" pool, gym ,,garage ") == ["pool", "gym", "garage"]
    assert split_list(["a", " ", "b "]) == ["a", "b"]
    assert split_list(None) == []


def test_to_snake():
    assert to_snake("createdAt") == "created_at"
    assert to_snake("price") == "price"


def test_sanitizer_strips_scripts_and_handlers():
    html = (
        '<p onclick="steal()">Hi <strong>there</strong></p>'
        "<script>alert(1)</script>"
        '<a href="javascript:alert(1)">bad</a>'
        '<a href="https://example.com" target="_blank" rel="x">good</a>'
    )
    cleaned = sanitize_html(html)
    assert "<script" not in cleaned
    assert "alert(1)" not in cleaned
    assert "onclick" not in cleaned
    assert "javascript:" not in cleaned
    assert "<strong>there</strong>" in cleaned
    assert 'href="https://example.com"' in cleaned
    assert "rel=" not in cleaned


def test_sanitizer_unwraps_unknown_tags_and_keeps_text():
    cleaned = sanitize_html("<div><span>kept</span></div><!-- note -->")
    assert cleaned == "kept"


def test_sanitizer_image_schemes():
    cleaned = sanitize_html(
        '<img src="data:image/png;base64,AAAA" alt="a">'
        '<img src="vbscript:x" alt="b">'
    )
    assert 'src="data:image/png;base64,AAAA"' in cleaned
    assert "vbscript" not in cleaned
    assert sanitize_html(None) == ""


def test_escape_like():
    assert escape_like("50%_off") == "50\\%\\_off"
    assert escape_like("a\\b") == "a\\\\b"
    assert escape_like("plain") == "plain"
