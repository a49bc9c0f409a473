from .csv_table import CSVParseError, parse_points, read_points, write_points
from .dataset import Dataset
from .validation import validate_dataset, validate_points

__all__ = [
    "CSVParseError",
    "parse_points",
    "read_points",
    "write_points",
    "Dataset",
    "validate_dataset",
    "validate_points",
]
