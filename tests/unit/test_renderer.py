"""Unit tests for richcells.renderer."""

from __future__ import annotations

import html
import re

import pytest

from richcells.errors import StyledTextError
from richcells.models.styled import Run, SpannedText, StyledSpan, TextStyle
from richcells.renderer import (
    ConversionFailed,
    Converted,
    convert_styled,
    escape_attr,
    escape_body,
    render,
    sanitize_color,
)
from richcells.segmenter import segment

A_ATTRS = 'target="_blank" rel="noopener noreferrer"'


def _strip(markup: str) -> str:
    return html.unescape(re.sub(r"<[^>]+>", "", markup.replace("<br>", "\n")))


class TestEscaping:
    def test_body_escapes_angle_brackets_and_ampersand_only(self) -> None:
        assert escape_body('a & <b> "q" \'s\'') == "a &amp; &lt;b&gt; \"q\" 's'"

    def test_attr_escapes_quote_but_not_gt(self) -> None:
        assert escape_attr('x?a=1&b="2"<>') == "x?a=1&amp;b=&quot;2&quot;&lt;>"

    def test_sanitize_color_strips_breakout(self) -> None:
        assert sanitize_color('red"; background:url(x)') == "red backgroundurl(x)"
        assert sanitize_color("rgb(1, 2, 3)") == "rgb(1, 2, 3)"
        assert sanitize_color("#a1B2c3") == "#a1B2c3"


class TestRender:
    def test_mixed_run_example(self) -> None:
        runs = [Run(0, 1, link="http://x", bold=True), Run(1, 2)]
        assert render(runs, "AB") == f'<a href="http://x" {A_ATTRS}><strong>A</strong></a>B'

    def test_nesting_order(self) -> None:
        runs = [
            Run(0, 1, link="https://l", bold=True, italic=True, underline=True, color="blue")
        ]
        assert render(runs, "x") == (
            f'<a href="https://l" {A_ATTRS}>'
            '<span style="color:blue"><strong><em><u>x</u></em></strong></span></a>'
        )

    def test_blank_color_after_sanitizing_emits_no_span(self) -> None:
        assert render([Run(0, 1, color='";')], "x") == "x"

    def test_href_is_attribute_escaped(self) -> None:
        out = render([Run(0, 1, link='https://e.com/?a=1&b="x"')], "y")
        assert out == f'<a href="https://e.com/?a=1&amp;b=&quot;x&quot;" {A_ATTRS}>y</a>'

    def test_newlines_become_br_across_runs(self) -> None:
        runs = [Run(0, 2, bold=True), Run(2, 4)]
        assert render(runs, "a\nb\n") == "<strong>a<br></strong>b<br>"

    def test_body_text_is_escaped(self) -> None:
        assert render([Run(0, 8)], "<b>&</b>") == "&lt;b&gt;&amp;&lt;/b&gt;"

    def test_empty(self) -> None:
        assert render([], "") == ""

    def test_run_outside_text_raises(self) -> None:
        with pytest.raises(StyledTextError):
            render([Run(0, 5)], "abc")

    @pytest.mark.parametrize(
        "text",
        [
            "plain",
            'quotes " and \' stay',
            "<script>alert('x')</script> & more",
            "line one\nline two\n\nend",
            "a&amp;b already looks escaped",
        ],
    )
    def test_escaping_round_trip(self, text: str) -> None:
        styled = SpannedText(
            text,
            (
                StyledSpan(0, 3, TextStyle(bold=True, color="#123456"), link="https://x.org"),
                StyledSpan(3, len(text) // 2, TextStyle(italic=True, underline=True)),
            ),
        )
        assert _strip(render(segment(styled), text)) == text


class TestConvertStyled:
    def test_success(self) -> None:
        styled = SpannedText("hi", (StyledSpan(0, 2, TextStyle(italic=True)),))
        assert convert_styled(styled) == Converted("<em>hi</em>")

    def test_adapter_exception_is_a_failure_value(self) -> None:
        class Exploding:
            text = "abc"

            def style_at(self, index: int) -> TextStyle:
                raise RuntimeError("backend went away")

            def link_at(self, index: int) -> str | None:
                return None

        result = convert_styled(Exploding())
        assert isinstance(result, ConversionFailed)
        assert "backend went away" in result.reason

    def test_out_of_range_lookup_is_a_failure_value(self) -> None:
        class Short:
            # Claims three characters but only styles two.
            text = "abc"

            def style_at(self, index: int) -> TextStyle:
                if index > 1:
                    raise IndexError(index)
                return TextStyle()

            def link_at(self, index: int) -> str | None:
                return None

        assert isinstance(convert_styled(Short()), ConversionFailed)
