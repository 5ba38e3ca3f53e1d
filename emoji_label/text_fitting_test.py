import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth

from emoji_label.text_fitting import ReportLabTextMeasurer, get_font_line_height
from emoji_label.text_processing import StyledRun


@pytest.fixture
def measurer():
    return ReportLabTextMeasurer()


def test_width_matches_reportlab(measurer):
    assert measurer.text_width(StyledRun(), "Hello") == stringWidth("Hello", "Helvetica", 12)


def test_bold_runs_use_bold_face(measurer):
    run = StyledRun(strong=True, font_size=10)
    assert measurer.text_width(run, "Hello") == stringWidth("Hello", "Helvetica-Bold", 10)


def test_letter_spacing_is_added_per_grapheme(measurer):
    plain = measurer.text_width(StyledRun(), "abc")
    spaced = measurer.text_width(StyledRun(letter_spacing=2), "abc")
    assert spaced == pytest.approx(plain + 6)


def test_unregistered_font_width_is_estimated(measurer):
    run = StyledRun(font_name="NoSuchFont", font_size=10)
    assert measurer.text_width(run, "abcd") == pytest.approx(20)


def test_line_height_from_font_metrics():
    # Helvetica: ascent 718, descent -207
    assert get_font_line_height("Helvetica", 12) == pytest.approx(925 * 12 / 1000 + 2)


def test_line_height_of_unknown_font_falls_back_to_factor():
    assert get_font_line_height("NoSuchFont", 10) == pytest.approx(12)


def test_run_line_height_override_wins(measurer):
    assert measurer.line_height(StyledRun(line_height=30)) == 30
    assert measurer.line_height(StyledRun()) == pytest.approx(13.1)
