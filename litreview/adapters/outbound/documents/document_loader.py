"""Loads source documents (PDF or plain text) into a single text string."""

import logging
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ....core.domain.exceptions import DocumentLoadError, EmptyDocumentError
from ....core.domain.utils import clean_text, collapse_whitespace

logger = logging.getLogger(__name__)

# Below this many characters a PDF is treated as image-only (no OCR layer)
MIN_DOCUMENT_CHARS = 50

TEXT_SUFFIXES = {".txt", ".md", ".text"}


def extract_pdf_text(path: Path) -> str:
    """Extract the text of every page of a PDF, whitespace collapsed.

    Raises:
        DocumentLoadError: The file could not be parsed.
        EmptyDocumentError: The PDF has no selectable text.
    """
    try:
        reader = PdfReader(path)
        pages = [page.extract_text() or "" for page in reader.pages]
    except (OSError, PdfReadError) as e:
        raise DocumentLoadError(
            f"No se pudo leer el PDF: {path.name}", cause=e, context={"path": str(path)}
        ) from e

    text = collapse_whitespace(clean_text("\n\n".join(pages)))
    if len(text) < MIN_DOCUMENT_CHARS:
        raise EmptyDocumentError(
            "El PDF parece estar vacío o ser solo imágenes escaneadas sin OCR. "
            "Intenta usar un PDF con texto seleccionable.",
            context={"path": str(path), "chars": len(text)},
        )

    logger.info(f"PDF processed: {path.name}, {len(reader.pages)} pages, {len(text)} chars")
    return text


def load_document(path: str | Path) -> str:
    """Load a document's text.

    PDFs go through :func:`extract_pdf_text`. Plain-text files keep their
    paragraph structure so the paragraph-aware segmenter can use it.

    Raises:
        DocumentLoadError: Unsupported or unreadable file.
        EmptyDocumentError: The document has no usable text.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".pdf":
        return extract_pdf_text(path)

    if suffix not in TEXT_SUFFIXES:
        raise DocumentLoadError(
            f"Tipo de documento no admitido: {suffix or '<ninguno>'}",
            context={"path": str(path), "supported": sorted(TEXT_SUFFIXES | {".pdf"})},
        )

    try:
        text = clean_text(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(
            f"No se pudo leer el archivo: {path.name}", cause=e, context={"path": str(path)}
        ) from e

    if not text.strip():
        raise EmptyDocumentError(
            f"El documento está vacío: {path.name}", context={"path": str(path)}
        )
    return text
