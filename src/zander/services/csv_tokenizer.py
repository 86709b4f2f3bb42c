"""Line-oriented CSV tokenizer for product uploads.

Only basic comma/quote handling is supported: a double quote toggles
quoted mode, and a comma separates fields only outside quotes. Quote
characters are never emitted and unbalanced quotes are not rejected.
"""
from typing import List


def split_lines(text: str) -> List[str]:
    """Split text on newlines and drop lines that are blank after trim."""
    return [line for line in text.split("\n") if line.strip()]


def parse_csv_line(line: str) -> List[str]:
    """Split one line into raw fields, honouring double-quoted sections."""
    fields: List[str] = []
    current = ""
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append(current)
            current = ""
        else:
            current += char

    # An unterminated quote just runs to the end of the line
    fields.append(current)
    return fields


def tokenize_csv(text: str) -> List[List[str]]:
    """Tokenize a whole file into rows of raw (untrimmed) fields.

    Returns an empty list when there is no header or no data line.
    """
    lines = split_lines(text)
    if len(lines) < 2:
        return []
    return [parse_csv_line(line) for line in lines]
