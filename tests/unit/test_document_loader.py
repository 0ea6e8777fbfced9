"""Unit tests for document loading."""

from unittest.mock import MagicMock, patch

import pytest

from litreview.adapters.outbound.documents.document_loader import (
    extract_pdf_text,
    load_document,
)
from litreview.core.domain.exceptions import DocumentLoadError, EmptyDocumentError

pytestmark = pytest.mark.unit

READER_PATH = "litreview.adapters.outbound.documents.document_loader.PdfReader"


def fake_reader(*page_texts):
    reader = MagicMock()
    reader.pages = [MagicMock(**{"extract_text.return_value": text}) for text in page_texts]
    return reader


def test_text_file_keeps_paragraphs(tmp_path):
    path = tmp_path / "articulo.txt"
    path.write_text("\ufeffPrimer parrafo.\n\nSegundo parrafo.", encoding="utf-8")

    assert load_document(path) == "Primer parrafo.\n\nSegundo parrafo."


def test_empty_text_file_raises(tmp_path):
    path = tmp_path / "vacio.md"
    path.write_text("  \n ", encoding="utf-8")

    with pytest.raises(EmptyDocumentError):
        load_document(path)


def test_unsupported_suffix_raises(tmp_path):
    path = tmp_path / "imagen.png"
    path.write_bytes(b"\x89PNG")

    with pytest.raises(DocumentLoadError, match="no admitido"):
        load_document(path)


def test_missing_text_file_raises(tmp_path):
    with pytest.raises(DocumentLoadError):
        load_document(tmp_path / "no_existe.txt")


def test_pdf_pages_are_joined_and_collapsed(tmp_path):
    path = tmp_path / "estudio.pdf"
    pages = ("Pagina uno  con\ntexto suficiente", None, "Pagina tres con mas texto del estudio")

    with patch(READER_PATH, return_value=fake_reader(*pages)):
        text = load_document(path)

    assert text == "Pagina uno con texto suficiente Pagina tres con mas texto del estudio"


def test_scanned_pdf_raises_empty_document(tmp_path):
    with patch(READER_PATH, return_value=fake_reader("  ", "12")):
        with pytest.raises(EmptyDocumentError, match="escaneadas"):
            extract_pdf_text(tmp_path / "escaneado.pdf")


def test_unreadable_pdf_raises(tmp_path):
    with patch(READER_PATH, side_effect=OSError("no such file")):
        with pytest.raises(DocumentLoadError, match="No se pudo leer el PDF"):
            extract_pdf_text(tmp_path / "roto.pdf")


def test_empty_text_file_message_names_the_file(tmp_path):
    path = tmp_path / "vacio.txt"
    path.write_text("", encoding="utf-8")

    with pytest.raises(EmptyDocumentError, match="El documento está vacío: vacio.txt"):
        load_document(path)
