import pytest

from emoji_label.text_processing import (
    COLOR_MAP,
    TRANSPARENT,
    StyledRun,
    as_styled_run,
    get_color_rgb,
)


@pytest.mark.parametrize(
    "color, expected",
    [
        ("red", (1, 0, 0)),
        (" Navy ", (0, 0, 0.5)),
        ("#0000FF", (0, 0, 1)),
        ("00ff00", (0, 1, 0)),
        ("rgb(255, 0, 0)", (1, 0, 0)),
        ("255,255,255", (1, 1, 1)),
        ("not a color", (0, 0, 0)),
        (None, (0, 0, 0)),
    ],
)
def test_get_color_rgb(color, expected):
    assert get_color_rgb(color) == pytest.approx(expected)


def test_with_text_keeps_every_other_attribute():
    run = StyledRun("old", font_size=20, color="red", underline=True, letter_spacing=1)
    copy = run.with_text("new")
    assert copy.text == "new"
    assert copy == StyledRun("new", font_size=20, color="red", underline=True, letter_spacing=1)
    assert run.text == "old"


def test_builders_return_modified_copies():
    run = StyledRun("x").bold().italic().colored(TRANSPARENT).size(9)
    assert run.strong and run.italics
    assert run.is_transparent
    assert run.font_size == 9


@pytest.mark.parametrize(
    "run, expected",
    [
        (StyledRun(), "Helvetica"),
        (StyledRun(strong=True), "Helvetica-Bold"),
        (StyledRun(strong=True, italics=True), "Helvetica-BoldOblique"),
        (StyledRun(code=True), "Courier"),
        (StyledRun(font_name="Times-Roman", italics=True), "Times-Italic"),
        (StyledRun(font_name="Times-Bold", italics=True), "Times-BoldItalic"),
        (StyledRun(font_name="MyFont", strong=True), "MyFont"),
    ],
)
def test_effective_font_name(run, expected):
    assert run.effective_font_name() == expected


def test_weak_runs_are_gray_by_default():
    assert StyledRun(weak=True).rgb() == COLOR_MAP["gray"]
    assert StyledRun(weak=True, color="red").rgb() == (1, 0, 0)


def test_as_styled_run_inherits_base_style():
    base = StyledRun(color="blue", font_size=14)
    assert as_styled_run("hi", base=base) == StyledRun("hi", color="blue", font_size=14)
    assert as_styled_run("hi") == StyledRun("hi")

    run = StyledRun("own", color="red")
    assert as_styled_run(run, base=base) is run
