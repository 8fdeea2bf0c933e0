"""
Экспорт данных административной панели в электронные таблицы.
"""

from .datagrid import ColumnDescriptor, ProductDataGrid
from .product_export import ExportContext, PreloadState, ProductDataGridExport, sanitize
from .writer import MEDIA_TYPES, write_csv, write_export, write_xlsx

__all__ = [
    "ColumnDescriptor",
    "ProductDataGrid",
    "ExportContext",
    "PreloadState",
    "ProductDataGridExport",
    "sanitize",
    "MEDIA_TYPES",
    "write_csv",
    "write_export",
    "write_xlsx",
]
