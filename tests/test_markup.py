from __future__ import annotations

from neonpump.markup import header_html, tip_html


def test_header_escapes_plan_text() -> None:
    markup = header_html("<img src=x onerror=alert(1)>", "Leg & <b>day</b>")

    assert "<img" not in markup
    assert "&lt;img src=x onerror=alert(1)&gt;" in markup
    assert "Leg &amp; &lt;b&gt;day&lt;/b&gt;" in markup
    assert markup.startswith("<h1 class='neon-title'>")


def test_tip_escapes_notes() -> None:
    markup = tip_html("<script>alert('x')</script>")

    assert "<script>" not in markup
    assert markup == "<p class='tip'>&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;</p>"
