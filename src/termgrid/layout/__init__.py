"""Column width allocation."""

from termgrid.layout.columns import (
    AllocatedColumn,
    AllocationKind,
    ColumnLayout,
    ColumnLayoutConfig,
    ColumnWidthCache,
    calculate_column_widths,
    calculate_minimum_width,
    can_fit_columns,
    default_column_config,
    header_minimum,
)

__all__ = [
    "AllocatedColumn",
    "AllocationKind",
    "ColumnLayout",
    "ColumnLayoutConfig",
    "ColumnWidthCache",
    "calculate_column_widths",
    "calculate_minimum_width",
    "can_fit_columns",
    "default_column_config",
    "header_minimum",
]
