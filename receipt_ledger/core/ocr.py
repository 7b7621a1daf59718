"""
Text extraction for stored receipt images and PDFs.

Images go through Tesseract; PDFs are read from their embedded text layer
with PyMuPDF. Both calls block until the engine returns.
"""

from pathlib import Path
from typing import Callable, Dict, Optional

from .exceptions import ExtractionFailed
from .logger import setup_logger
from .models import ExtractedText
from .utils import PDF_EXTS

logger = setup_logger(__name__)

ProgressSink = Callable[[Dict], None]


def _lazy_import_ocr_deps():
    """Lazy import heavy OCR dependencies."""
    global pytesseract, PIL_Image, fitz
    import importlib
    pytesseract = importlib.import_module("pytesseract")
    PIL_Image = importlib.import_module("PIL.Image")
    fitz = importlib.import_module("fitz")  # pymupdf


# Initialize on first use
pytesseract = None
PIL_Image = None
fitz = None


def _emit(progress: Optional[ProgressSink], status: str, value: float):
    """Send a progress event; a failing sink never interrupts extraction."""
    if progress is None:
        return
    try:
        progress({"status": status, "progress": value})
    except Exception as e:
        logger.debug(f"Progress sink raised {e!r}; ignoring")


class ImageSource:
    """OCR over a receipt image."""

    kind = "image"

    def __init__(self, language: str = "eng"):
        self.language = language

    def extract(self, path: Path, progress: Optional[ProgressSink] = None) -> str:
        """OCR an image file to text."""
        if pytesseract is None:
            _lazy_import_ocr_deps()

        _emit(progress, "loading image", 0.0)
        try:
            with PIL_Image.open(path) as img:
                # Tesseract does better on grayscale
                gray = img.convert("L") if img.mode != "L" else img.copy()
            _emit(progress, "recognizing text", 0.5)
            text = pytesseract.image_to_string(gray, lang=self.language)
        except Exception as e:
            raise ExtractionFailed(
                "Failed to extract text from image",
                {"file": Path(path).name, "error": str(e)},
            ) from e
        _emit(progress, "done", 1.0)
        return text


class PdfSource:
    """Embedded text layer of a receipt PDF."""

    kind = "pdf"

    def extract(self, path: Path, progress: Optional[ProgressSink] = None) -> str:
        """Extract text from a searchable PDF using PyMuPDF."""
        if fitz is None:
            _lazy_import_ocr_deps()

        _emit(progress, "loading pdf", 0.0)
        try:
            data = Path(path).read_bytes()
            doc = fitz.open(stream=data, filetype="pdf")
            try:
                total = doc.page_count
                chunks = []
                for i, page in enumerate(doc, 1):
                    _emit(progress, f"reading page {i}/{total}", (i - 1) / total)
                    chunks.append(page.get_text())
            finally:
                doc.close()
        except Exception as e:
            raise ExtractionFailed(
                "Failed to extract text from PDF",
                {"file": Path(path).name, "error": str(e)},
            ) from e
        _emit(progress, "done", 1.0)
        return "\n".join(chunks)


class TextExtractor:
    """Picks the extraction strategy from the file extension."""

    def __init__(self, language: str = "eng"):
        self.image_source = ImageSource(language)
        self.pdf_source = PdfSource()

    def source_for(self, path: Path):
        """PdfSource for .pdf (any case), ImageSource for everything else."""
        if Path(path).suffix.lower() in PDF_EXTS:
            return self.pdf_source
        return self.image_source

    def extract(self, path: Path, progress: Optional[ProgressSink] = None) -> ExtractedText:
        """
        Extract raw text from a stored receipt.

        One attempt only; engine errors surface as ExtractionFailed.

        Args:
            path: Stored receipt file
            progress: Optional callable receiving {"status", "progress"} events

        Returns:
            ExtractedText
        """
        path = Path(path)
        source = self.source_for(path)
        logger.info(f"Extracting text from {path.name} ({source.kind})")
        text = source.extract(path, progress=progress)
        logger.debug(f"Extracted {len(text)} characters from {path.name}")
        return ExtractedText(raw_text=text, source=path)
