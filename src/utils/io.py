"""File I/O utilities for CSV and XLSX."""
import pandas as pd
from pathlib import Path
from typing import Union
import logging

logger = logging.getLogger(__name__)


def read_data_file(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read CSV or XLSX file into DataFrame.

    Args:
        file_path: Path to CSV or XLSX file

    Returns:
        DataFrame with file contents

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()

    if suffix == ".csv":
        # Keep zip codes and ids as text
        df = pd.read_csv(file_path, dtype={"zip": str, "id": str}, low_memory=False)
    elif suffix == ".xlsx":
        df = pd.read_excel(file_path, engine="openpyxl", dtype={"zip": str, "id": str})
    else:
        raise ValueError(f"Unsupported file format: {suffix}")

    logger.info(f"Loaded {len(df)} rows from {file_path}")
    return df


def write_csv(df: pd.DataFrame, output_path: Union[str, Path]) -> Path:
    """
    Write a DataFrame to CSV, creating parent directories.

    Args:
        df: DataFrame to write
        output_path: Output file path

    Returns:
        Path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df.to_csv(output_path, index=False, encoding="utf-8")
    logger.info(f"Wrote {len(df)} rows to {output_path}")
    return output_path
