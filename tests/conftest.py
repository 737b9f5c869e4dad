"""
Shared fixtures: a stand-in PDF engine and row builders

The fake engine mimics the slice of pdfplumber the extractor uses:
pdfplumber.open(stream) -> context manager with .pages, each page with
.height and .extract_words() returning dicts with 'text', 'x0' and 'bottom'
(distance from the top of the page).
"""

import pytest

PAGE_HEIGHT = 792
LINE_SPACING = 14
WORD_SPACING = 60


class FakePage:
    def __init__(self, words, height=PAGE_HEIGHT):
        self.height = height
        self._words = words

    def extract_words(self):
        return list(self._words)


class FakePDF:
    def __init__(self, pages):
        self.pages = pages
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True
        return False


def page_from_lines(lines, height=PAGE_HEIGHT, top=40):
    """One word per whitespace-separated token, one visual line per string"""
    words = []
    for line_number, line in enumerate(lines):
        bottom = top + line_number * LINE_SPACING
        for position, text in enumerate(line.split()):
            words.append({'text': text, 'x0': 20 + position * WORD_SPACING, 'bottom': bottom})
    return FakePage(words, height)


def opener_for(*pages):
    """pdfplumber.open replacement serving the given pages"""
    opened = []

    def opener(stream):
        pdf = FakePDF(list(pages))
        opened.append(pdf)
        return pdf

    opener.opened = opened
    return opener


def rows_from_lines(lines):
    """Rows as PositionedTextExtractor.extract_rows() would return them"""
    rows = []
    for line_number, line in enumerate(lines):
        y = PAGE_HEIGHT - 40 - line_number * LINE_SPACING
        items = [{'text': text, 'x': 20 + position * WORD_SPACING, 'y': y}
                 for position, text in enumerate(line.split())]
        rows.append({'y': y, 'items': items})
    return rows


@pytest.fixture
def make_page():
    return page_from_lines


@pytest.fixture
def make_opener():
    return opener_for


@pytest.fixture
def make_rows():
    return rows_from_lines


@pytest.fixture
def blank_page():
    """A scanned page: no text layer at all"""
    return FakePage([])


def pdf_from_lines(lines, height=PAGE_HEIGHT, left=72, top=700, spacing=20):
    """
    A real single-page PDF with one Helvetica text line per string

    Baselines start at `top` (PDF user space) and step down by `spacing`.
    """
    commands = []
    for line_number, line in enumerate(lines):
        text = line.replace('\\', '\\\\').replace('(', '\\(').replace(')', '\\)')
        y = top - line_number * spacing
        commands.append(f"BT /F1 12 Tf {left} {y} Td ({text}) Tj ET")
    stream = '\n'.join(commands).encode('latin-1')

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        (f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 {height}] "
         f"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>").encode('ascii'),
        b"<< /Length " + str(len(stream)).encode('ascii') + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode('ascii') + body + b"\nendobj\n"

    xref_offset = len(output)
    output += f"xref\n0 {len(objects) + 1}\n".encode('ascii')
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode('ascii')
    output += (f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
               f"startxref\n{xref_offset}\n%%EOF\n").encode('ascii')
    return bytes(output)


@pytest.fixture
def make_pdf():
    return pdf_from_lines
