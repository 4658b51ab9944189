from io import BytesIO
from pathlib import Path
from typing import Optional, Protocol
import re

from docx import Document
import PyPDF2
from PyPDF2.errors import PdfReadError

from cago.utils.errors import UnsupportedMediaError, ValidationError

TEXT_EXTENSIONS = {'.txt', '.md', '.vtt', '.srt'}
MAX_TITLE_LENGTH = 80


class DocumentTextExtractor(Protocol):
    def extract_text(self, filename: str, data: bytes, content_type: Optional[str] = None) -> str:
        ...


class FileTextExtractor:
    """Extract raw text from uploaded meeting notes (PDF, DOCX or plain text)"""

    def detect_kind(self, filename: str, content_type: Optional[str] = None) -> str:
        file_ext = Path(filename or '').suffix.lower()
        content_type = (content_type or '').lower()

        if file_ext == '.pdf' or content_type == 'application/pdf':
            return 'pdf'
        if file_ext == '.docx' or content_type == 'application/vnd.openxmlformats-officedocument.wordprocessingml.document':
            return 'docx'
        if file_ext in TEXT_EXTENSIONS or content_type.startswith('text/'):
            return 'text'
        raise UnsupportedMediaError(
            f"Unsupported file type. Upload a PDF, DOCX or text file ({', '.join(sorted(TEXT_EXTENSIONS))})"
        )

    def extract_text(self, filename: str, data: bytes, content_type: Optional[str] = None) -> str:
        kind = self.detect_kind(filename, content_type)

        if kind == 'pdf':
            return self.parse_pdf(data)
        elif kind == 'docx':
            return self.parse_docx(data)
        return self.parse_text(data)

    def parse_pdf(self, data: bytes) -> str:
        try:
            reader = PyPDF2.PdfReader(BytesIO(data))
            pages = [page.extract_text() or '' for page in reader.pages]
        except PdfReadError as e:
            raise ValidationError(f"Could not read PDF: {e}")
        return '\n'.join(pages).strip()

    def parse_docx(self, data: bytes) -> str:
        try:
            doc = Document(BytesIO(data))
        except Exception as e:
            # python-docx raises zipfile/KeyError/ValueError variants on corrupt input
            raise ValidationError(f"Could not read DOCX: {e}")
        return '\n'.join(para.text for para in doc.paragraphs if para.text.strip())

    def parse_text(self, data: bytes) -> str:
        try:
            return data.decode('utf-8-sig').strip()
        except UnicodeDecodeError:
            return data.decode('latin-1').strip()


def infer_title(text: str, filename: str) -> str:
    """First non-empty line when short enough, otherwise the file stem"""
    for line in text.splitlines():
        line = line.strip().lstrip('#').strip()
        if line:
            if len(line) <= MAX_TITLE_LENGTH:
                return line
            break

    stem = Path(filename or '').stem
    stem = re.sub(r'[_\-]+', ' ', stem).strip()
    return stem or 'Uploaded notes'
