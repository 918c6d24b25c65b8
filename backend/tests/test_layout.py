"""
Unit tests for the pagination and slide layout policies.
"""
import pytest

from genia.services import layout


class RecordingPageBuilder:
    """Page builder double. Text is wrapped one line per newline."""

    def __init__(self):
        self.ops = []

    def add_page(self, background=None):
        self.ops.append(("page", background))

    def add_text(self, text, x, y, size, color=layout.TEXT_COLOR, align="left"):
        self.ops.append(("text", text, x, y, size))

    def add_image(self, image, x, y, w, h):
        self.ops.append(("image", x, y, w, h))

    def split_text(self, text, width, size):
        return text.split("\n")

    def pages(self):
        """Text ops grouped per page."""
        grouped = []
        for op in self.ops:
            if op[0] == "page":
                grouped.append([])
            else:
                grouped[-1].append(op)
        return grouped


class RecordingSlideBuilder:
    def __init__(self):
        self.ops = []

    def add_slide(self, background=None):
        self.ops.append(("slide", background))

    def add_text(self, text, box, size, bold=False, color=None, align="left"):
        self.ops.append(("text", text, box, size))

    def add_image(self, image, box):
        self.ops.append(("image", box))


def numbered_lines(count):
    return [f"line {i}" for i in range(count)]


class TestPaginateLines:
    def test_every_line_once_in_order(self):
        lines = numbered_lines(100)
        pages = layout.paginate_lines(lines, start_y=145)
        assert len(pages) >= 2
        flattened = [line for page in pages for line, _ in page]
        assert flattened == lines

    def test_page_capacity(self):
        pages = layout.paginate_lines(numbered_lines(100), start_y=145)
        # 145 .. 271.5 on the first page, then 20 .. 273 on full pages
        assert len(pages[0]) == 24
        assert len(pages[1]) == 47
        assert pages[1][0][1] == layout.TOP_MARGIN

    def test_cursor_never_passes_threshold(self):
        pages = layout.paginate_lines(numbered_lines(300), start_y=45)
        for page in pages:
            ys = [y for _, y in page]
            assert ys == sorted(ys)
            assert all(y <= layout.BOTTOM_THRESHOLD for y in ys)

    def test_short_text_single_page(self):
        pages = layout.paginate_lines(numbered_lines(5), start_y=45)
        assert len(pages) == 1
        assert [y for _, y in pages[0]] == [45, 50.5, 56, 61.5, 67]

    def test_no_lines(self):
        assert layout.paginate_lines([], start_y=45) == [[]]


class TestDocumentSection:
    def test_section_with_image(self, png_bytes):
        builder = RecordingPageBuilder()
        prose = "\n".join(numbered_lines(60))
        pages_used = layout.layout_document_section(builder, "Titre", prose, png_bytes)

        assert builder.ops[0] == ("page", None)
        assert builder.ops[1] == ("text", "Titre", layout.MARGIN_LEFT, layout.TITLE_Y, layout.TITLE_SIZE)
        assert builder.ops[2] == (
            "image", layout.MARGIN_LEFT, layout.IMAGE_Y, layout.IMAGE_WIDTH, layout.IMAGE_HEIGHT
        )
        first_body = builder.ops[3]
        assert first_body[3] == layout.TEXT_Y_WITH_IMAGE
        assert pages_used == 2
        assert len(builder.pages()) == 2

        body = [op[1] for op in builder.ops if op[0] == "text" and op[1] != "Titre"]
        assert body == numbered_lines(60)

    def test_section_without_image_starts_below_title(self):
        builder = RecordingPageBuilder()
        layout.layout_document_section(builder, "Titre", "one\ntwo", None)
        assert not any(op[0] == "image" for op in builder.ops)
        body = [op for op in builder.ops if op[0] == "text" and op[1] != "Titre"]
        assert body[0][3] == layout.TEXT_Y_WITHOUT_IMAGE
        assert len(builder.pages()) == 1

    def test_cover(self, png_bytes):
        builder = RecordingPageBuilder()
        layout.layout_cover(builder, "finance", png_bytes)
        assert builder.ops[0] == ("page", layout.COVER_BACKGROUND)
        assert builder.ops[1][0] == "image"
        assert builder.ops[2][1] == "FINANCE"


class TestSlidePolicy:
    def test_truncate_is_hard_cut(self):
        text = "word " * 200
        assert layout.truncate(text, 450) == text[:450] + "..."
        assert len(layout.truncate(text, 450)) == 453

    def test_truncate_short_text_keeps_ellipsis(self):
        assert layout.truncate("abc", 450) == "abc..."

    def test_plan_with_image_is_two_column(self):
        plan = layout.plan_slide("x" * 1000, has_image=True)
        assert plan.two_column is True
        assert plan.image_box == layout.SLIDE_IMAGE_BOX
        assert plan.text_box == layout.SLIDE_SIDE_TEXT_BOX
        assert len(plan.text) == layout.SIDE_TEXT_BUDGET + 3

    def test_plan_without_image_is_full_width(self):
        plan = layout.plan_slide("x" * 1000, has_image=False)
        assert plan.two_column is False
        assert plan.image_box is None
        assert plan.text_box == layout.SLIDE_FULL_TEXT_BOX
        assert len(plan.text) == layout.FULL_TEXT_BUDGET + 3

    @pytest.mark.parametrize("image", [None, b""])
    def test_deck_slide_without_image(self, image):
        builder = RecordingSlideBuilder()
        layout.layout_deck_slide(builder, "Titre", "contenu", image)
        assert builder.ops[0] == ("slide", None)
        assert not any(op[0] == "image" for op in builder.ops)

    def test_deck_slide_with_image(self, png_bytes):
        builder = RecordingSlideBuilder()
        layout.layout_deck_slide(builder, "Titre", "contenu", png_bytes)
        kinds = [op[0] for op in builder.ops]
        assert kinds == ["slide", "text", "image", "text"]
        assert builder.ops[2] == ("image", layout.SLIDE_IMAGE_BOX)
        assert builder.ops[3][1] == "contenu..."

    def test_title_slide(self):
        builder = RecordingSlideBuilder()
        layout.layout_title_slide(builder, "finance")
        assert builder.ops[0] == ("slide", layout.DECK_BACKGROUND)
        assert builder.ops[1][1] == "FINANCE"
