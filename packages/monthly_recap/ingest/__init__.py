"""Bulk upload ingest: tokenizer, amount parser, fuzzy matcher, validators, pipeline."""

from .amounts import format_rupiah, parse_amount, try_parse_amount
from .fuzzy import DEFAULT_THRESHOLD, FuzzyMatcher, best_match, is_corrected
from .pipeline import (
    decode_upload,
    importable_products,
    importable_transactions,
    parse_products_text,
    parse_transactions_text,
    read_upload,
)
from .templates import product_template, transaction_template
from .tokenizer import tokenize_line
from .validators import parse_date, validate_product_row, validate_transaction_row

__all__ = [
    "DEFAULT_THRESHOLD",
    "FuzzyMatcher",
    "best_match",
    "decode_upload",
    "format_rupiah",
    "importable_products",
    "importable_transactions",
    "is_corrected",
    "parse_amount",
    "parse_date",
    "parse_products_text",
    "parse_transactions_text",
    "product_template",
    "read_upload",
    "tokenize_line",
    "transaction_template",
    "try_parse_amount",
    "validate_product_row",
    "validate_transaction_row",
]
