import base64

import pytest

from conftest import FakePage
from parsers.pdf_extractor import (PositionedTextExtractor, StatementParseError,
                                   decode_data_url, row_text)


def texts(row):
    return [item['text'] for item in row['items']]


def test_tokens_within_tolerance_share_a_row(make_opener):
    page = FakePage([
        {'text': '15.99', 'x0': 400, 'bottom': 100},
        {'text': 'Netflix', 'x0': 80, 'bottom': 102},
        {'text': 'Other', 'x0': 20, 'bottom': 120},
    ])
    extractor = PositionedTextExtractor(opener=make_opener(page))

    rows = extractor.extract_rows(b'%PDF-fake')

    assert len(rows) == 2
    assert texts(rows[0]) == ['Netflix', '15.99']
    assert texts(rows[1]) == ['Other']
    assert rows[0]['y'] > rows[1]['y']


def test_tokens_beyond_tolerance_split_rows(make_opener):
    page = FakePage([
        {'text': 'first', 'x0': 20, 'bottom': 100},
        {'text': 'second', 'x0': 20, 'bottom': 104},
    ])
    extractor = PositionedTextExtractor(opener=make_opener(page))

    rows = extractor.extract_rows(b'%PDF-fake')

    assert [texts(row) for row in rows] == [['first'], ['second']]


def test_items_within_row_sorted_by_x(make_opener):
    page = FakePage([
        {'text': 'c', 'x0': 300, 'bottom': 50},
        {'text': 'a', 'x0': 10, 'bottom': 50},
        {'text': 'b', 'x0': 150, 'bottom': 51},
    ])
    rows = PositionedTextExtractor(opener=make_opener(page)).extract_rows(b'%PDF-fake')

    assert row_text(rows[0]) == 'a b c'


def test_pages_are_read_in_document_order(make_opener, make_page):
    first = make_page(['page one top', 'page one bottom'])
    # Second page text sits higher on its page than anything on page one
    second = make_page(['page two'], top=10)
    extractor = PositionedTextExtractor(opener=make_opener(first, second))

    rows = extractor.extract_rows(b'%PDF-fake')

    assert [row_text(row) for row in rows] == ['page one top', 'page one bottom', 'page two']
    assert extractor.page_count == 2


def test_document_is_closed_after_extraction(make_opener, make_page):
    opener = make_opener(make_page(['hello world']))
    PositionedTextExtractor(opener=opener).extract_rows(b'%PDF-fake')

    assert opener.opened[0].closed


def test_scanned_pdf_yields_no_rows(make_opener, blank_page):
    extractor = PositionedTextExtractor(opener=make_opener(blank_page))

    assert extractor.extract_rows(b'%PDF-fake') == []


def test_empty_bytes_rejected():
    with pytest.raises(StatementParseError) as excinfo:
        PositionedTextExtractor().extract_rows(b'')
    assert str(excinfo.value) == 'failed to parse PDF: empty file'


def test_engine_failure_wrapped():
    def broken_opener(stream):
        raise OSError('bad xref table')

    with pytest.raises(StatementParseError) as excinfo:
        PositionedTextExtractor(opener=broken_opener).extract_rows(b'%PDF-fake')

    assert str(excinfo.value).startswith('failed to parse PDF: ')
    assert 'bad xref table' in str(excinfo.value)


def test_malformed_bytes_with_pdfplumber():
    with pytest.raises(StatementParseError):
        PositionedTextExtractor().extract_rows(b'this is not a pdf at all')


def test_decode_data_url():
    payload = base64.b64encode(b'%PDF-1.4 content').decode('ascii')

    mime_type, content = decode_data_url(f'data:application/pdf;base64,{payload}')

    assert mime_type == 'application/pdf'
    assert content == b'%PDF-1.4 content'


@pytest.mark.parametrize('data_url', [
    '',
    'no comma here',
    'application/pdf;base64,JVBERi0=',
    'data:application/pdf,JVBERi0=',
    'data:application/pdf;base64,!!!not-base64!!!',
    'data:application/pdf;base64,',
])
def test_decode_data_url_rejects_malformed(data_url):
    with pytest.raises(StatementParseError):
        decode_data_url(data_url)


def test_real_pdf_text_layer(make_pdf):
    pdf_bytes = make_pdf(['March 1 Netflix 15.99', 'March 2 Random Shop 42.00'], top=700, spacing=20)

    rows = PositionedTextExtractor().extract_rows(pdf_bytes)

    assert [texts(row) for row in rows] == [
        ['March', '1', 'Netflix', '15.99'],
        ['March', '2', 'Random', 'Shop', '42.00'],
    ]
    assert rows[0]['y'] > rows[1]['y']
    assert abs(rows[0]['y'] - 700) <= 3
    assert abs(rows[1]['y'] - 680) <= 3
    assert rows[0]['items'][0]['x'] == 72
