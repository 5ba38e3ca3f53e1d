import pytest

from emoji_label.conftest import GLYPH_WIDTH, LINE_HEIGHT
from emoji_label.emoji_handler import AssetBackend, PictogramAssetStore
from emoji_label.geometry import EMPTY_RECT, Rect, union_all
from emoji_label.layout import LayoutMode, LayoutParams, WrapPolicy, layout
from emoji_label.segmentation import segment_text
from emoji_label.text_processing import TRANSPARENT, StyledRun


def run_layout(text, measurer, assets, **params):
    run = StyledRun(text)
    return layout(segment_text(run), LayoutParams(**params), measurer, assets, base_run=run)


def row_texts(result):
    return ["".join(item.text for item in row.items if item.kind == "text") for row in result.rows]


def test_single_row_places_text_and_pictogram(measurer, assets):
    result = run_layout("Hello😤world", measurer, assets)

    (row,) = result.rows
    kinds = [item.kind for item in row.items]
    assert kinds == ["text", "pictogram", "text"]
    assert [item.rect for item in row.items] == [
        Rect(0, 0, 50, LINE_HEIGHT),
        Rect(50, 0, LINE_HEIGHT, LINE_HEIGHT),
        Rect(50 + LINE_HEIGHT, 0, 50, LINE_HEIGHT),
    ]
    assert row.items[1].asset is assets.lookup("😤")
    assert result.rect == Rect(0, 0, 100 + LINE_HEIGHT, LINE_HEIGHT)
    assert result.full_text == "Hello😤world"
    assert not result.truncated


def test_wrap_breaks_after_whitespace(measurer, assets):
    result = run_layout("aaa bbb ccc", measurer, assets, available_width=65, wrap_policy=WrapPolicy.WRAP)

    assert row_texts(result) == ["aaa ", "bbb ", "ccc"]
    assert [row.rect.y for row in result.rows] == [0, LINE_HEIGHT, 2 * LINE_HEIGHT]


def test_word_longer_than_row_breaks_between_graphemes(measurer, assets):
    result = run_layout("abcdefgh", measurer, assets, available_width=35)
    assert row_texts(result) == ["abc", "def", "gh"]


def test_no_wrap_ignores_available_width(measurer, assets):
    result = run_layout("aaa bbb ccc", measurer, assets, available_width=20, wrap_policy=WrapPolicy.NO_WRAP)
    assert row_texts(result) == ["aaa bbb ccc"]
    assert result.rect.width == 11 * GLYPH_WIDTH


def test_row_height_uses_tallest_item(measurer, assets):
    result = run_layout("ab😤cd", measurer, assets, pictogram_size=20)

    (row,) = result.rows
    text, pictogram, _ = row.items
    assert row.rect.height == 20
    assert pictogram.rect == Rect(20, 0, 20, 20)
    # Text is centered in the taller band
    assert text.rect == Rect(0, 4, 20, LINE_HEIGHT)


def test_pictogram_box_defaults_to_line_height(measurer, assets):
    run = StyledRun("a😤", line_height=18)
    result = layout(segment_text(run), LayoutParams(), measurer, assets, base_run=run)
    assert result.rows[0].items[1].rect.width == 18


def test_truncate_cuts_long_text_to_one_row_with_marker(measurer, assets):
    text = "The quick brown fox"
    result = run_layout(text, measurer, assets, available_width=60, wrap_policy=WrapPolicy.TRUNCATE)

    (row,) = result.rows
    assert [item.kind for item in row.items] == ["text", "ellipsis"]
    assert row.items[0].text == "The q"
    assert row.items[1].rect == Rect(50, 0, GLYPH_WIDTH, LINE_HEIGHT)
    assert row.items[1].text_start == 5
    assert result.truncated
    assert result.disclosure_text == text
    assert result.rect.right <= 60


def test_truncate_without_overflow_keeps_everything(measurer, assets):
    result = run_layout("short", measurer, assets, available_width=100, wrap_policy=WrapPolicy.TRUNCATE)
    assert row_texts(result) == ["short"]
    assert not result.truncated
    assert result.disclosure_text is None


def test_truncate_stops_at_newline(measurer, assets):
    result = run_layout("ab\ncd", measurer, assets, wrap_policy=WrapPolicy.TRUNCATE)
    assert len(result.rows) == 1
    assert [item.kind for item in result.rows[0].items] == ["text", "ellipsis"]
    assert result.truncated


def test_truncate_never_splits_a_pictogram(measurer, assets):
    result = run_layout("abc😤def", measurer, assets, available_width=45, wrap_policy=WrapPolicy.TRUNCATE)
    kinds = [item.kind for item in result.rows[0].items]
    assert kinds == ["text", "ellipsis"]
    assert result.rows[0].items[0].text == "abc"


def test_newlines_start_new_rows(measurer, assets):
    result = run_layout("ab\ncd", measurer, assets)

    first, second = result.rows
    assert row_texts(result) == ["ab", "cd"]
    assert first.text_end == 3
    assert second.text_start == 3


def test_trailing_newline_leaves_empty_row(measurer, assets):
    result = run_layout("ab\n", measurer, assets)
    assert len(result.rows) == 2
    assert result.rows[1].items == ()
    assert result.rows[1].rect.height == LINE_HEIGHT


def test_missing_asset_is_skipped_but_kept_in_text(measurer):
    result = run_layout("a😤b", measurer, PictogramAssetStore(AssetBackend.PNG))

    items = list(result.items())
    assert [item.text for item in items] == ["a", "b"]
    assert items[1].rect.x == GLYPH_WIDTH
    assert items[1].text_start == 2
    assert result.full_text == "a😤b"


def test_layout_without_asset_store_skips_all_pictograms(measurer):
    result = run_layout("😤😤", measurer, None)
    assert list(result.items()) == []
    assert result.rect == EMPTY_RECT


def test_empty_input_has_no_rows(measurer, assets):
    result = run_layout("", measurer, assets)
    assert result.rows == []
    assert result.rect == EMPTY_RECT
    assert result.interact_rects == []


@pytest.mark.parametrize("policy", list(WrapPolicy))
def test_width_smaller_than_a_glyph_degrades(measurer, assets, policy):
    result = run_layout("abc", measurer, assets, available_width=5, wrap_policy=policy)
    assert result.rows
    if policy is WrapPolicy.WRAP:
        assert row_texts(result) == ["a", "b", "c"]
    elif policy is WrapPolicy.TRUNCATE:
        assert [item.kind for item in result.items()] == ["ellipsis"]


def test_block_mode_breaks_only_at_whitespace(measurer, assets):
    result = run_layout("abc😤def", measurer, assets, available_width=70)

    assert result.mode is LayoutMode.BLOCK
    first, second = result.rows
    assert [item.kind for item in first.items] == ["text", "pictogram", "text"]
    assert first.items[2].text == "de"
    assert second.items[0].text == "f"


def test_flow_mode_breaks_between_segments(measurer, assets):
    result = run_layout("abc😤def", measurer, assets, available_width=70, treat_as_inline_flow=True)

    assert result.mode is LayoutMode.FLOW
    first, second = result.rows
    assert [item.kind for item in first.items] == ["text", "pictogram"]
    assert second.items[0].text == "def"


def test_flow_mode_pairs_pictograms_with_transparent_placeholders(measurer, assets):
    result = run_layout("Hi 😤 there", measurer, assets, treat_as_inline_flow=True)

    pictogram = next(item for item in result.items() if item.kind == "pictogram")
    assert pictogram.placeholder.text == "😤"
    assert pictogram.placeholder.color == TRANSPARENT
    assert result.interact_rects == [item.rect for item in result.items()]


def test_block_mode_has_one_interactive_rect_per_row(measurer, assets):
    result = run_layout("aaa bbb ccc", measurer, assets, available_width=65)

    assert result.interact_rects == [row.rect for row in result.rows]
    assert all(item.placeholder is None for item in result.items())


def test_aggregate_rect_is_union_of_items(measurer, assets):
    result = run_layout("one 🐦 two ⭐ three", measurer, assets, available_width=50, origin=(5, 7))
    assert result.rect == union_all(item.rect for item in result.items())
    assert result.rect.x == 5
    assert result.rect.y == 7


def test_items_follow_segment_order(measurer, assets):
    result = run_layout("x 🐦 y ⭐ z ✨", measurer, assets, available_width=40)
    starts = [item.text_start for item in result.items()]
    assert starts == sorted(starts)
    for row in result.rows:
        xs = [item.rect.x for item in row.items]
        assert xs == sorted(xs)


def test_text_items_keep_segment_styling(measurer, assets):
    run = StyledRun("red 🐦 text", color="red")
    result = layout(segment_text(run), LayoutParams(), measurer, assets, base_run=run)
    assert all(item.run.color == "red" for item in result.items() if item.kind == "text")


def test_carets_mark_grapheme_boundaries(measurer, assets):
    result = run_layout("cafe\u0301", measurer, assets)
    (item,) = result.rows[0].items
    assert item.carets == ((0, 0), (10, 1), (20, 2), (30, 3), (40, 5))


def test_negative_width_is_rejected():
    with pytest.raises(ValueError):
        LayoutParams(available_width=-1)


def test_truncate_applies_in_flow_mode(measurer, assets):
    text = "abc 😤 defgh ijk"
    result = run_layout(
        text,
        measurer,
        assets,
        available_width=70,
        wrap_policy=WrapPolicy.TRUNCATE,
        treat_as_inline_flow=True,
    )

    (row,) = result.rows
    assert [item.kind for item in row.items] == ["text", "pictogram", "ellipsis"]
    assert row.items[0].text == "abc "
    assert row.items[2].rect.x == 4 * GLYPH_WIDTH + LINE_HEIGHT
    assert result.truncated
    assert result.disclosure_text == text
