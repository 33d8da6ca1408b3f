"""Parsing uploaded word tables."""
import io

import pandas as pd
import pytest

from wordmem_app.modules.wordbooks.logics.word_table import (
    WordTableError,
    extract_word_rows,
    is_supported_filename,
    read_word_table,
)


def test_supported_extensions():
    assert is_supported_filename('list.CSV')
    assert is_supported_filename('list.xlsx')
    assert not is_supported_filename('list.xls')
    assert not is_supported_filename('')


def test_localized_headers_map_to_fields():
    frame = pd.DataFrame({'单词': ['sun'], '意思': ['太阳'], '例子': ['The sun rises.'], '发音': ['/sʌn/']})

    assert extract_word_rows(frame) == [{
        'word': 'sun',
        'definition': '太阳',
        'example_sentence': 'The sun rises.',
        'pronunciation_us': '/sʌn/',
    }]


def test_header_match_is_case_insensitive():
    frame = pd.DataFrame({'WORD': ['moon'], 'DEFINITION': ['natural satellite']})

    rows = extract_word_rows(frame)

    assert rows[0]['word'] == 'moon'
    assert rows[0]['definition'] == 'natural satellite'


def test_csv_keeps_literal_strings():
    source = io.BytesIO('\ufeffword,definition\nnull,empty value\nNA,not applicable\n'.encode('utf-8'))

    rows = extract_word_rows(read_word_table(source, 'words.csv'))

    assert [row['word'] for row in rows] == ['null', 'NA']


def test_unknown_extension_is_rejected():
    with pytest.raises(WordTableError):
        read_word_table(io.BytesIO(b''), 'words.json')


def test_empty_csv_gives_no_rows():
    assert extract_word_rows(read_word_table(io.BytesIO(b''), 'empty.csv')) == []
