"""
Word table parsing - turns an uploaded CSV / Excel sheet into word rows.

This module contains ONLY pure Python + pandas logic.
NO database, NO Flask dependencies allowed.
"""
from __future__ import annotations

import os
from typing import IO, Dict, List, Union

import pandas as pd

# Accepted header names per field, in priority order
HEADER_ALIASES: Dict[str, tuple] = {
    'word': ('word', 'Word', '单词'),
    'definition': ('definition', 'Definition', '释义', '意思'),
    'example_sentence': ('example', 'Example', '例句', '例子'),
    'pronunciation_us': ('pronunciation', 'Pronunciation', '发音'),
}

SUPPORTED_EXTENSIONS = ('.csv', '.xlsx')


class WordTableError(ValueError):
    """The uploaded table cannot be read."""


def is_supported_filename(filename: str) -> bool:
    return os.path.splitext(filename or '')[1].lower() in SUPPORTED_EXTENSIONS


def read_word_table(source: Union[str, IO], filename: str) -> pd.DataFrame:
    """Load a CSV or XLSX file as an all-string DataFrame."""
    extension = os.path.splitext(filename or '')[1].lower()
    try:
        if extension == '.xlsx':
            frame = pd.read_excel(source, dtype=str, engine='openpyxl')
        elif extension == '.csv':
            frame = pd.read_csv(source, dtype=str, keep_default_na=False, encoding='utf-8-sig')
        else:
            raise WordTableError('Only CSV or XLSX files are allowed')
    except WordTableError:
        raise
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (ValueError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise WordTableError(f'Could not read {filename}: {exc}') from exc

    frame = frame.fillna('')
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame


def _pick(row: Dict[str, str], aliases: tuple) -> str:
    for alias in aliases:
        value = row.get(alias)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return ''


def extract_word_rows(frame: pd.DataFrame) -> List[Dict[str, str]]:
    """
    Map table rows onto word fields using ``HEADER_ALIASES``.

    Rows without a word are dropped. Header matching falls back to a
    case-insensitive comparison for the English names.
    """
    if frame is None or frame.empty:
        return []

    lowered = {column.lower(): column for column in frame.columns}
    resolved_aliases = {}
    for field, aliases in HEADER_ALIASES.items():
        columns = [alias for alias in aliases if alias in frame.columns]
        columns += [lowered[alias.lower()] for alias in aliases
                    if alias.lower() in lowered and lowered[alias.lower()] not in columns]
        resolved_aliases[field] = tuple(columns)

    rows = []
    for record in frame.to_dict(orient='records'):
        entry = {field: _pick(record, columns) for field, columns in resolved_aliases.items()}
        if entry['word']:
            rows.append(entry)
    return rows
