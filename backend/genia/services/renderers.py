"""
Document renderers - PDF via reportlab, PPTX via python-pptx.

Both expose an incremental build API (pages/slides, text, images) and an
`export()` that finalizes the file into bytes. Layout decisions live in
`genia.services.layout`; renderers only translate coordinates.
"""
import io
import logging
from typing import List, Optional, Tuple

# PDF generation
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

# PPTX generation
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import PP_ALIGN
from pptx.util import Inches, Pt

# Image validation
from PIL import Image

from genia.models.generation import OutputKind
from genia.services.layout import TEXT_COLOR

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

BODY_FONT = "Helvetica"
TITLE_FONT = "Helvetica-Bold"

# Raster formats both reportlab and python-pptx can place
SUPPORTED_IMAGE_FORMATS = {"PNG", "JPEG", "GIF", "BMP", "TIFF"}


class PdfDocumentBuilder:
    """
    A4 PDF builder on a reportlab canvas.
    Coordinates come in millimetres from the top-left corner, text y is the
    baseline and image y is the top edge.
    """

    media_type = PDF_MEDIA_TYPE
    extension = "pdf"

    def __init__(self, title: Optional[str] = None):
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=A4)
        if title:
            self._canvas.setTitle(title)
        self._width, self._height = A4
        self.page_count = 0

    def add_page(self, background: Optional[Tuple[int, int, int]] = None) -> None:
        if self.page_count > 0:
            self._canvas.showPage()
        self.page_count += 1
        if background:
            self._canvas.saveState()
            self._canvas.setFillColorRGB(*[c / 255 for c in background])
            self._canvas.rect(0, 0, self._width, self._height, fill=1, stroke=0)
            self._canvas.restoreState()

    def add_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        color: Tuple[int, int, int] = TEXT_COLOR,
        align: str = "left",
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setFont(TITLE_FONT if size >= 20 else BODY_FONT, size)
        c.setFillColorRGB(*[v / 255 for v in color])
        px, py = x * mm, self._height - y * mm
        if align == "center":
            c.drawCentredString(px, py, text)
        elif align == "right":
            c.drawRightString(px, py, text)
        else:
            c.drawString(px, py, text)
        c.restoreState()

    def add_image(self, image: bytes, x: float, y: float, w: float, h: float) -> None:
        reader = ImageReader(io.BytesIO(image))
        self._canvas.drawImage(
            reader,
            x * mm,
            self._height - (y + h) * mm,
            width=w * mm,
            height=h * mm,
            mask="auto",
        )

    def split_text(self, text: str, width: float, size: float) -> List[str]:
        font = TITLE_FONT if size >= 20 else BODY_FONT
        return simpleSplit(text, font, size, width * mm)

    def export(self) -> bytes:
        self._canvas.save()
        return self._buffer.getvalue()


class PptxDeckBuilder:
    """
    16:9 slide deck builder on python-pptx.
    Boxes are (x, y, w, h) in inches.
    """

    media_type = PPTX_MEDIA_TYPE
    extension = "pptx"

    def __init__(self, title: Optional[str] = None):
        self._prs = Presentation()
        self._prs.slide_width = Inches(10)
        self._prs.slide_height = Inches(5.625)
        if title:
            self._prs.core_properties.title = title
        self._blank_layout = self._prs.slide_layouts[6]
        self._slide = None

    @property
    def slide_count(self) -> int:
        return len(self._prs.slides)

    def add_slide(self, background: Optional[str] = None) -> None:
        self._slide = self._prs.slides.add_slide(self._blank_layout)
        if background:
            fill = self._slide.background.fill
            fill.solid()
            fill.fore_color.rgb = RGBColor.from_string(background)

    def add_text(
        self,
        text: str,
        box: Tuple[float, float, float, float],
        size: int,
        bold: bool = False,
        color: Optional[str] = None,
        align: str = "left",
    ) -> None:
        x, y, w, h = box
        shape = self._slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
        frame = shape.text_frame
        frame.word_wrap = True
        paragraph = frame.paragraphs[0]
        paragraph.text = text
        paragraph.font.size = Pt(size)
        paragraph.font.bold = bold
        if color:
            paragraph.font.color.rgb = RGBColor.from_string(color)
        if align == "center":
            paragraph.alignment = PP_ALIGN.CENTER

    def add_image(self, image: bytes, box: Tuple[float, float, float, float]) -> None:
        x, y, w, h = box
        self._slide.shapes.add_picture(io.BytesIO(image), Inches(x), Inches(y), Inches(w), Inches(h))

    def export(self) -> bytes:
        buffer = io.BytesIO()
        self._prs.save(buffer)
        return buffer.getvalue()


def builder_for(kind: OutputKind, title: Optional[str] = None):
    """New renderer for an output kind."""
    if kind == OutputKind.DOCUMENT:
        return PdfDocumentBuilder(title=title)
    return PptxDeckBuilder(title=title)


def export_filename(kind: OutputKind, subject: str) -> str:
    if kind == OutputKind.DOCUMENT:
        return f"{subject}.pdf"
    return f"PPT_{subject}.pptx"


def is_placeable_image(data: bytes) -> bool:
    """True when the bytes decode to a raster format both renderers accept."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
            img.verify()
    except (OSError, ValueError, SyntaxError) as e:
        logger.debug(f"Image rejected: {e}")
        return False
    return image_format in SUPPORTED_IMAGE_FORMATS
