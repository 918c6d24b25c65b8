"""
Layout policies for the two output kinds.

Both policies consume the same section stream (title, prose, optional
image) and drive a renderer's incremental build API. They keep no state
across sections beyond the renderer's own page/slide cursor.

PAGINATED DOCUMENT (A4, millimetres, origin top-left):
- Every section starts on a new page: title, then image at a fixed offset
- Prose is wrapped to the content width and packed greedily line by line
- When the cursor passes the bottom threshold a new page starts and the
  cursor returns to the top margin. No look-ahead, no widow/orphan control.

SLIDE DECK (inches, 16:9):
- One title slide, then one slide per section
- With an image: image left, prose right cut to 450 characters
- Without: full-width prose cut to 800 characters
- Cuts are hard character cuts followed by an ellipsis
"""
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

# ============================================================================
# Paginated document geometry
# ============================================================================

PAGE_WIDTH = 210
PAGE_HEIGHT = 297
MARGIN_LEFT = 20
CONTENT_WIDTH = 170
TOP_MARGIN = 20
BOTTOM_THRESHOLD = 275
LINE_HEIGHT = 5.5

TITLE_Y = 30
IMAGE_Y = 45
IMAGE_WIDTH = 170
IMAGE_HEIGHT = 90
TEXT_Y_WITH_IMAGE = 145
TEXT_Y_WITHOUT_IMAGE = 45

TITLE_SIZE = 22
BODY_SIZE = 10.5

COVER_BACKGROUND = (15, 23, 42)
COVER_TITLE_COLOR = (255, 255, 255)
COVER_TITLE_SIZE = 26
COVER_TITLE_Y = 50
COVER_TITLE_WIDTH = 180
COVER_TITLE_LEADING = 10.5
COVER_IMAGE = (15, 80, 180, 100)
TEXT_COLOR = (15, 23, 42)

# ============================================================================
# Slide deck geometry
# ============================================================================

DECK_BACKGROUND = "0F172A"
DECK_TITLE_COLOR = "FFFFFF"
SLIDE_TITLE_BOX = (0.5, 0.5, 9, 0.8)
SLIDE_IMAGE_BOX = (0.5, 1.5, 4.5, 3)
SLIDE_SIDE_TEXT_BOX = (5.2, 1.5, 4.3, 3.2)
SLIDE_FULL_TEXT_BOX = (0.5, 1.5, 9, 3.2)
TITLE_SLIDE_BOX = (1, 2, 8, 2)

SIDE_TEXT_BUDGET = 450
FULL_TEXT_BUDGET = 800
ELLIPSIS = "..."


class PageBuilder(Protocol):
    """Incremental build API of the paginated document renderer."""

    def add_page(self, background: Optional[Tuple[int, int, int]] = None) -> None: ...

    def add_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        color: Tuple[int, int, int] = TEXT_COLOR,
        align: str = "left",
    ) -> None: ...

    def add_image(self, image: bytes, x: float, y: float, w: float, h: float) -> None: ...

    def split_text(self, text: str, width: float, size: float) -> List[str]: ...


class SlideBuilder(Protocol):
    """Incremental build API of the slide deck renderer."""

    def add_slide(self, background: Optional[str] = None) -> None: ...

    def add_text(
        self,
        text: str,
        box: Tuple[float, float, float, float],
        size: int,
        bold: bool = False,
        color: Optional[str] = None,
        align: str = "left",
    ) -> None: ...

    def add_image(self, image: bytes, box: Tuple[float, float, float, float]) -> None: ...


# ============================================================================
# Paginated document policy
# ============================================================================

def paginate_lines(
    lines: List[str],
    start_y: float,
    top: float = TOP_MARGIN,
    bottom: float = BOTTOM_THRESHOLD,
    line_height: float = LINE_HEIGHT,
) -> List[List[Tuple[str, float]]]:
    """Greedy single-pass line packing.

    Returns one list of (line, y) placements per page, first page first.
    Every input line lands on exactly one page, in order.
    """
    pages: List[List[Tuple[str, float]]] = [[]]
    y = start_y
    for line in lines:
        if y > bottom:
            pages.append([])
            y = top
        pages[-1].append((line, y))
        y += line_height
    return pages


def layout_cover(builder: PageBuilder, subject: str, image: Optional[bytes]) -> None:
    """Cover page: dark background, optional image, uppercased subject."""
    builder.add_page(background=COVER_BACKGROUND)
    if image:
        x, y, w, h = COVER_IMAGE
        builder.add_image(image, x, y, w, h)

    title_lines = builder.split_text(subject.upper(), COVER_TITLE_WIDTH, COVER_TITLE_SIZE)
    y = COVER_TITLE_Y
    for line in title_lines:
        builder.add_text(line, PAGE_WIDTH / 2, y, COVER_TITLE_SIZE, color=COVER_TITLE_COLOR, align="center")
        y += COVER_TITLE_LEADING


def layout_document_section(builder: PageBuilder, title: str, prose: str, image: Optional[bytes]) -> int:
    """Lay one section out from a fresh page. Returns the pages used."""
    builder.add_page()
    builder.add_text(title, MARGIN_LEFT, TITLE_Y, TITLE_SIZE)
    if image:
        builder.add_image(image, MARGIN_LEFT, IMAGE_Y, IMAGE_WIDTH, IMAGE_HEIGHT)

    lines = builder.split_text(prose, CONTENT_WIDTH, BODY_SIZE)
    start_y = TEXT_Y_WITH_IMAGE if image else TEXT_Y_WITHOUT_IMAGE
    pages = paginate_lines(lines, start_y)

    for page_number, placements in enumerate(pages):
        if page_number > 0:
            builder.add_page()
        for line, y in placements:
            builder.add_text(line, MARGIN_LEFT, y, BODY_SIZE)
    return len(pages)


# ============================================================================
# Slide deck policy
# ============================================================================

def truncate(text: str, budget: int) -> str:
    """Hard character cut with an ellipsis. Not word-boundary aware."""
    return text[:budget] + ELLIPSIS


@dataclass(frozen=True)
class SlidePlan:
    """Resolved layout of one content slide."""
    two_column: bool
    text: str
    text_box: Tuple[float, float, float, float]
    text_size: int
    image_box: Optional[Tuple[float, float, float, float]] = None


def plan_slide(prose: str, has_image: bool) -> SlidePlan:
    if has_image:
        return SlidePlan(
            two_column=True,
            text=truncate(prose, SIDE_TEXT_BUDGET),
            text_box=SLIDE_SIDE_TEXT_BOX,
            text_size=12,
            image_box=SLIDE_IMAGE_BOX,
        )
    return SlidePlan(
        two_column=False,
        text=truncate(prose, FULL_TEXT_BUDGET),
        text_box=SLIDE_FULL_TEXT_BOX,
        text_size=14,
    )


def layout_title_slide(builder: SlideBuilder, subject: str) -> None:
    builder.add_slide(background=DECK_BACKGROUND)
    builder.add_text(subject.upper(), TITLE_SLIDE_BOX, 36, bold=True, color=DECK_TITLE_COLOR, align="center")


def layout_deck_slide(builder: SlideBuilder, title: str, prose: str, image: Optional[bytes]) -> SlidePlan:
    plan = plan_slide(prose, bool(image))
    builder.add_slide()
    builder.add_text(title, SLIDE_TITLE_BOX, 24, bold=True)
    if plan.two_column:
        builder.add_image(image, plan.image_box)
    builder.add_text(plan.text, plan.text_box, plan.text_size)
    return plan
