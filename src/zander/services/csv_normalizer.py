"""CSV header normalization and row building for product imports"""
import unicodedata
from typing import Dict, List

from src.zander.services.csv_tokenizer import tokenize_csv

ImportRow = Dict[str, str]

CANONICAL_FIELDS = [
    "name",
    "description",
    "sku",
    "category",
    "type",
    "status",
    "basePrice",
    "unit",
    "costOfGoods",
    "pricingModel",
]

HEADER_ALIASES: Dict[str, List[str]] = {
    "name": ["name", "product name", "productname", "title"],
    "description": ["description", "desc"],
    "sku": ["sku", "product sku", "code"],
    "category": ["category"],
    "type": ["type", "product type", "producttype"],
    "status": ["status"],
    "basePrice": ["price", "baseprice", "base price", "unit price", "unitprice"],
    "unit": ["unit", "uom"],
    "costOfGoods": ["cost", "costofgoods", "cost of goods", "cogs"],
    "pricingModel": ["pricingmodel", "pricing model", "pricing"],
}

# alias spelling -> canonical field
HEADER_MAP: Dict[str, str] = {
    alias: canonical
    for canonical, aliases in HEADER_ALIASES.items()
    for alias in aliases
}

TEMPLATE_CSV = (
    "name,sku,type,basePrice,unit,category,status,description\n"
    'Sample Product,SKU-001,PHYSICAL,99.99,each,General,ACTIVE,"A sample product, for reference"\n'
)

TEMPLATE_FILENAME = "product_import_template.csv"


def template_csv() -> str:
    return TEMPLATE_CSV


def decode_csv_content(content: bytes) -> str:
    encodings = ["utf-8-sig", "cp1252", "latin-1"]
    for encoding in encodings:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    raise ValueError("Unable to decode CSV file. Supported encodings: UTF-8, Windows-1252, Latin-1")


def normalize_header_key(raw: str) -> str:
    key = unicodedata.normalize("NFKC", raw).strip().lower()
    return key.replace('"', "")


def normalize_header(raw: str) -> str:
    """Map a header spelling to its canonical field.

    Unknown headers are passed through as written (trimmed) so their
    values still reach the server under the original column name.
    """
    return HEADER_MAP.get(normalize_header_key(raw), raw.strip())


def normalize_headers(headers: List[str]) -> List[str]:
    return [normalize_header(h) for h in headers]


def unmapped_headers(headers: List[str]) -> List[str]:
    return [h.strip() for h in headers if normalize_header_key(h) not in HEADER_MAP]


def build_import_rows(data_rows: List[List[str]], headers: List[str]) -> List[ImportRow]:
    """Pair each data row with the normalized headers.

    Ragged rows are truncated to the shorter of the two sequences without
    any diagnostic, and rows without a name are dropped.
    """
    rows: List[ImportRow] = []
    for values in data_rows:
        row: ImportRow = {}
        for header, value in zip(headers, values):
            row[header] = value.strip()
        if row.get("name", "").strip():
            rows.append(row)
    return rows


def parse_import_file(text: str) -> List[ImportRow]:
    """Tokenize, normalize headers and build rows. An empty list means no valid data."""
    tokens = tokenize_csv(text)
    if not tokens:
        return []
    headers = normalize_headers(tokens[0])
    return build_import_rows(tokens[1:], headers)
