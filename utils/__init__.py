"""
Utils module for the InsightBoard client
"""

from .helpers import export_csv, format_date, format_file_size, table_from_dataframe, table_to_dataframe

__all__ = ["export_csv", "format_date", "format_file_size", "table_from_dataframe", "table_to_dataframe"]
