"""Tests for the contrast evaluator."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from _snapshots import el, page
from pai.engine.contrast import (
    AA_LARGE,
    AA_NORMAL,
    ContrastEvaluator,
    parse_font_size,
    parse_font_weight,
    required_contrast_ratio,
)


def _evaluate(style: dict[str, str], evaluator: ContrastEvaluator | None = None):
    snap = page(el("p", "Sample text", style=style))
    return (evaluator or ContrastEvaluator()).evaluate(snap.query_all("p")[0])


class TestRequiredRatio:
    @pytest.mark.parametrize(
        "size, weight, expected",
        [
            (16, 400, AA_NORMAL),
            (16, 700, AA_NORMAL),
            (18.66, 400, AA_NORMAL),
            (18.66, 700, AA_LARGE),
            (20, 700, AA_LARGE),
            (24, 400, AA_LARGE),
            (25, 100, AA_LARGE),
        ],
    )
    def test_large_text_classification(self, size: float, weight: int, expected: float) -> None:
        assert required_contrast_ratio(size, weight) == expected


class TestParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [("16px", 16.0), ("18.66px", 18.66), ("12pt", 16.0), ("1.5rem", 24.0), ("", None), ("large", None)],
    )
    def test_font_size(self, value: str, expected: float | None) -> None:
        assert parse_font_size(value) == (pytest.approx(expected) if expected else None)

    @pytest.mark.parametrize(
        "value, expected",
        [("400", 400), ("700", 700), ("bold", 700), ("normal", 400), ("", 400), ("0", 400)],
    )
    def test_font_weight(self, value: str, expected: int) -> None:
        assert parse_font_weight(value) == expected


class TestContrastEvaluator:
    def test_black_on_white(self) -> None:
        result = _evaluate({"color": "rgb(0, 0, 0)"})
        assert result.ratio == pytest.approx(21.0, abs=0.01)
        assert result.meets_aa and result.meets_aaa
        assert result.background == "rgb(255, 255, 255)"
        assert result.suggestions == []
        with pytest.raises(ValidationError):
            result.ratio = 1.0

    def test_black_on_white_large_text(self) -> None:
        result = _evaluate({"color": "rgb(0, 0, 0)", "font-size": "30px"})
        assert result.meets_aa is True
        assert result.required_aa == AA_LARGE

    def test_normal_text_below_threshold_fails(self) -> None:
        # rgb(120, 120, 120) on white is ~4.4:1
        result = _evaluate({"color": "rgb(120, 120, 120)", "font-size": "16px"})
        assert 4.3 < result.ratio < 4.5
        assert result.required_aa == 4.5
        assert result.required_aaa == 7
        assert result.meets_aa is False
        assert result.meets_aaa is False
        assert result.suggestions

    def test_same_colors_pass_as_large_text(self) -> None:
        result = _evaluate({"color": "rgb(120, 120, 120)", "font-size": "25px"})
        assert result.required_aa == 3
        assert result.required_aaa == 4.5
        assert result.meets_aa is True
        assert result.meets_aaa is False

    def test_uses_resolved_background(self) -> None:
        snap = page(el("div", el("p", "x", style={"color": "rgb(255, 255, 255)"}),
                       style={"background-color": "rgb(0, 0, 0)"}))
        result = ContrastEvaluator().evaluate(snap.query_all("p")[0])
        assert result.background == "rgb(0, 0, 0)"
        assert result.meets_aa is True

    def test_injected_resolver(self) -> None:
        evaluator = ContrastEvaluator(resolver=lambda _el: "rgb(0, 0, 0)")
        result = _evaluate({"color": "rgb(0, 0, 0)"}, evaluator)
        assert result.ratio == pytest.approx(1.0)
        assert result.meets_aa is False

    def test_missing_color_is_skipped(self) -> None:
        assert _evaluate({"color": ""}) is None

    def test_missing_background_is_skipped(self) -> None:
        evaluator = ContrastEvaluator(resolver=lambda _el: "")
        assert _evaluate({"color": "rgb(0, 0, 0)"}, evaluator) is None

    def test_unparseable_color_is_skipped(self) -> None:
        assert _evaluate({"color": "color(display-p3 1 0 0)"}) is None

    def test_missing_font_size_is_skipped(self) -> None:
        assert _evaluate({"color": "rgb(0, 0, 0)", "font-size": ""}) is None
