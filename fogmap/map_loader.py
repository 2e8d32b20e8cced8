from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
import structlog
from PIL import Image, ImageOps, UnidentifiedImageError
from PyQt6.QtGui import QImage

from .exceptions import MapLoadError

log = structlog.get_logger(__name__)


@dataclass
class LoadedMap:
    qimage: QImage
    source_path: str
    is_pdf: bool = False
    pdf_page: int = 0
    dpi: int = 150

    @property
    def width(self) -> int:
        return self.qimage.width()

    @property
    def height(self) -> int:
        return self.qimage.height()

    @property
    def map_id(self) -> str:
        """Stable name used to namespace this map's saved fog."""
        name = Path(self.source_path).name
        return f"{name}#p{self.pdf_page}" if self.is_pdf else name


def pil_to_qimage(im: Image.Image) -> QImage:
    if im.mode not in ("RGBA", "RGB"):
        im = im.convert("RGBA")
    w, h = im.size
    if im.mode == "RGB":
        data = im.tobytes("raw", "RGB")
        return QImage(data, w, h, 3 * w, QImage.Format.Format_RGB888).copy()
    data = im.tobytes("raw", "RGBA")
    return QImage(data, w, h, 4 * w, QImage.Format.Format_RGBA8888).copy()


def load_image(path: str) -> QImage:
    try:
        with Image.open(path) as im:
            im = ImageOps.exif_transpose(im)
            return pil_to_qimage(im)
    except (OSError, UnidentifiedImageError) as e:
        raise MapLoadError(path, str(e)) from e


def render_pdf_page(path: str, page_index: int = 0, dpi: int = 150) -> QImage:
    try:
        doc = fitz.open(path)
    except (RuntimeError, ValueError) as e:  # fitz.FileDataError subclasses RuntimeError
        raise MapLoadError(path, str(e)) from e
    try:
        page_index = max(0, min(page_index, len(doc) - 1))
        page = doc.load_page(page_index)
        zoom = dpi / 72.0
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=True)
        return QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format.Format_RGBA8888).copy()
    finally:
        doc.close()


def load_map(path: str, pdf_page: int = 0, pdf_dpi: int = 150) -> LoadedMap:
    src = str(Path(path).resolve())
    if Path(path).suffix.lower() == ".pdf":
        qimg = render_pdf_page(path, pdf_page, pdf_dpi)
        loaded = LoadedMap(qimage=qimg, source_path=src, is_pdf=True, pdf_page=pdf_page, dpi=pdf_dpi)
    else:
        loaded = LoadedMap(qimage=load_image(path), source_path=src)
    log.info("Map loaded", path=src, width=loaded.width, height=loaded.height, pdf=loaded.is_pdf)
    return loaded
