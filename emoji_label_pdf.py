import argparse
import logging
from io import BytesIO

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from emoji_label import (
    AssetBackend,
    EmojiLabel,
    LabelContext,
    StyledRun,
    WrapPolicy,
    create_asset_store,
)
from emoji_label.text_fitting import ELLIPSIS, LINE_PADDING

_LOGGER = logging.getLogger(__name__)

LABEL_SPACING = 4  # points between stacked labels

_warned_vector_assets = False


def _baseline(rect, run):
    """Baseline y (top-down) of a run centered in ``rect``."""
    try:
        descent = pdfmetrics.getDescent(run.effective_font_name(), run.font_size)
    except KeyError:
        descent = -0.2 * run.font_size
    return rect.bottom - LINE_PADDING / 2 + descent


def _draw_text(c, item, page_height, text):
    run = item.run
    rect = item.rect
    if run.background:
        c.setFillColorRGB(*StyledRun(color=run.background).rgb())
        c.rect(rect.x, page_height - rect.bottom, rect.width, rect.height, stroke=0, fill=1)

    baseline = page_height - _baseline(rect, run)
    if run.raised:
        baseline += run.font_size * 0.3
    c.setFont(run.effective_font_name(), run.font_size)
    c.setFillColorRGB(*run.rgb())
    if run.letter_spacing:
        c.drawString(rect.x, baseline, text, charSpace=run.letter_spacing)
    else:
        c.drawString(rect.x, baseline, text)

    c.setStrokeColorRGB(*run.rgb())
    c.setLineWidth(max(run.font_size / 20, 0.5))
    if run.underline:
        c.line(rect.x, baseline - 1.5, rect.right, baseline - 1.5)
    if run.strikethrough:
        middle = baseline + run.font_size * 0.3
        c.line(rect.x, middle, rect.right, middle)


def _draw_pictogram(c, item, page_height):
    global _warned_vector_assets
    rect = item.rect
    y = page_height - rect.bottom
    if item.asset.backend is AssetBackend.PNG:
        image = Image.open(BytesIO(item.asset.data))
        c.drawImage(ImageReader(image), rect.x, y, rect.width, rect.height, mask="auto")
        return

    if not _warned_vector_assets:
        _LOGGER.warning("Vector emoji assets cannot be painted into PDF; drawing outlines instead")
        _warned_vector_assets = True
    c.setStrokeColorRGB(0.5, 0.5, 0.5)
    c.setLineWidth(0.5)
    c.rect(rect.x, y, rect.width, rect.height, stroke=1, fill=0)


def draw_layout(c, result, page_height, show_debug_lines=False):
    """
    Paint a laid-out label onto a ReportLab canvas.

    Layout coordinates are top-down; ``page_height`` flips them into PDF space.
    Transparent selection placeholders are never painted.

    :param c: ReportLab canvas object
    :param result: LayoutResult from EmojiLabel.show
    :param page_height: Height of the page in points
    :param show_debug_lines: Outline rows and placed items
    """
    for item in result.items():
        if item.kind == "text":
            _draw_text(c, item, page_height, item.text)
        elif item.kind == "ellipsis":
            _draw_text(c, item, page_height, ELLIPSIS)
        elif item.kind == "pictogram":
            _draw_pictogram(c, item, page_height)

    if show_debug_lines:
        _draw_debug_lines(c, result, page_height)

    c.setStrokeColorRGB(0, 0, 0)
    c.setFillColorRGB(0, 0, 0)


def _draw_debug_lines(c, result, page_height):
    """
    Draw row (red) and item (blue) boundaries.

    :param c: ReportLab canvas object
    :param result: LayoutResult to outline
    :param page_height: Height of the page in points
    """
    c.setLineWidth(0.3)
    c.setStrokeColorRGB(1, 0, 0)
    for row in result.rows:
        c.rect(row.rect.x, page_height - row.rect.bottom, row.rect.width, row.rect.height)

    c.setStrokeColorRGB(0, 0, 1)
    for item in result.items():
        c.rect(item.rect.x, page_height - item.rect.bottom, item.rect.width, item.rect.height)

    if result.truncated:
        c.setFont("Helvetica", 5)
        c.setFillColorRGB(1, 0, 0)
        c.drawString(result.rect.right + 2, page_height - result.rect.bottom, "truncated")


def render_labels_to_pdf(
    lines,
    output_path,
    width,
    font_size=12,
    wrap_policy=WrapPolicy.WRAP,
    inline=False,
    backend=AssetBackend.PNG,
    cache_dir=None,
    show_debug_lines=False,
):
    """
    Render each line of text as an emoji label, stacked top to bottom on A4 pages.

    :param lines: Label texts
    :param output_path: Path of the PDF to write
    :param width: Available label width in points
    :param font_size: Font size in points
    :param wrap_policy: WrapPolicy for every label
    :param inline: Lay labels out as inline flow instead of shaped blocks
    :param backend: Twemoji asset backend
    :param cache_dir: Directory for downloaded emoji images
    :param show_debug_lines: Outline rows and items
    :return: Number of pages written
    """
    page_width, page_height = A4
    margin = 10 * mm
    assets = create_asset_store(backend, cache_dir=cache_dir)
    ctx = LabelContext(assets=assets, wrap_policy=wrap_policy, body_style=StyledRun(font_size=font_size))

    c = canvas.Canvas(output_path, pagesize=A4)
    pages = 1
    top = margin
    for text in lines:
        # Pre-load all emoji images before layout
        assets.precache(text)
        label = EmojiLabel(text)
        result = label.show(ctx, available_width=min(width, page_width - 2 * margin), horizontal=inline, origin=(margin, top))
        if result.rect.bottom > page_height - margin and top > margin:
            c.showPage()
            pages += 1
            top = margin
            result = label.show(ctx, available_width=min(width, page_width - 2 * margin), horizontal=inline, origin=(margin, top))

        draw_layout(c, result, page_height, show_debug_lines)
        if result.truncated:
            _LOGGER.info("Label truncated, full text: %s", result.disclosure_text)
        top = max(result.rect.bottom, top) + LABEL_SPACING

    c.save()
    _LOGGER.info("Wrote %d label(s) on %d page(s) to %s", len(lines), pages, output_path)
    return pages


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render emoji labels into a PDF")
    parser.add_argument("output_path", help="Path to output PDF file")
    parser.add_argument("text", nargs="*", help="Label texts (one label each)")
    parser.add_argument("--input-file", help="Read label texts from a UTF-8 file, one per line")
    parser.add_argument(
        "--width", type=float, default=90, help="Available label width in mm (default: 90)"
    )
    parser.add_argument(
        "--font-size", type=float, default=12, help="Font size in points (default: 12)"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--truncate", action="store_true", help="Truncate labels to one row")
    mode.add_argument("--no-wrap", action="store_true", help="Never wrap labels")
    parser.add_argument(
        "--inline", action="store_true", help="Lay labels out as inline flow items"
    )
    parser.add_argument(
        "--backend",
        choices=[b.value for b in AssetBackend],
        default=AssetBackend.PNG.value,
        help="Twemoji asset format (default: png)",
    )
    parser.add_argument("--cache-dir", help="Directory for downloaded emoji images")
    parser.add_argument(
        "--debug-lines", action="store_true", help="Outline rows and placed items"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    lines = list(args.text)
    if args.input_file:
        with open(args.input_file, "r", encoding="utf-8") as f:
            lines.extend(line.rstrip("\n") for line in f)
    if not lines:
        parser.error("no label text given")
    if args.width <= 0:
        parser.error("--width must be positive")

    if args.truncate:
        policy = WrapPolicy.TRUNCATE
    elif args.no_wrap:
        policy = WrapPolicy.NO_WRAP
    else:
        policy = WrapPolicy.WRAP

    render_labels_to_pdf(
        lines,
        args.output_path,
        args.width * mm,
        font_size=args.font_size,
        wrap_policy=policy,
        inline=args.inline,
        backend=AssetBackend(args.backend),
        cache_dir=args.cache_dir,
        show_debug_lines=args.debug_lines,
    )
