"""Bulk export / import surfaces."""

from faqdesk.export.interchange import dumps_records, loads_records
from faqdesk.export.tabular import HEADERS, to_csv_text

__all__ = ["HEADERS", "dumps_records", "loads_records", "to_csv_text"]
