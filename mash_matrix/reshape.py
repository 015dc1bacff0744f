"""
Turn a `mash dist -t` table into the matrix and long-form views.

Input (tab-separated, one row per query, one column per reference):

  #query          /data/g1.faa   /data/g2.faa
  /data/g1.faa    0              0.0421
  /data/g2.faa    0.0421         0

Output:
  matrix  square float DataFrame, index == columns == file basenames
  table   long form with columns Source, Target, Dist (n*n rows)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import MashParams, PathLike
from .errors import DistanceTableError
from .log import get_logger

LOGGER = get_logger("reshape")

QUERY_COL = "query"
LONG_COLUMNS = ["Source", "Target", "Dist"]

@dataclass(frozen=True, eq=False)
class MashResult:
    """Distances for one genome set: matrix view, long-form view and provenance."""
    matrix: pd.DataFrame
    table: pd.DataFrame
    path: Path
    params: Optional[MashParams] = None
    sketch_reused: bool = False
    mash_version: Optional[str] = None

    @property
    def genomes(self) -> List[str]:
        return list(self.matrix.index)

    def __len__(self):
        return len(self.matrix)

    def to_files(self, out_dir: PathLike, fmt: str = "tsv") -> List[Path]:
        """Write matrix.tsv and table.<fmt> ('tsv' or 'parquet') into `out_dir`."""
        if fmt not in ("tsv", "parquet"):
            raise ValueError(f"Unsupported output format: {fmt}")
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        matrix_path = out_dir / "matrix.tsv"
        self.matrix.to_csv(matrix_path, sep="\t", index_label="Genome")
        table_path = out_dir / f"table.{fmt}"
        if fmt == "parquet":
            self.table.to_parquet(table_path, engine="pyarrow", index=False)
        else:
            self.table.to_csv(table_path, sep="\t", index=False)
        LOGGER.info("Wrote %s and %s", matrix_path, table_path)
        return [matrix_path, table_path]

def read_distance_table(path: PathLike) -> pd.DataFrame:
    """
    Parse Dist.tab. Returns a DataFrame with a 'query' column (file paths)
    followed by one float column per reference path.
    """
    path = Path(path)
    if not path.exists():
        raise DistanceTableError(f"Distance table not found: {path}")
    try:
        df = pd.read_csv(path, sep="\t", dtype=str)
    except pd.errors.EmptyDataError as e:
        raise DistanceTableError(f"Distance table is empty: {path}") from e
    except pd.errors.ParserError as e:
        raise DistanceTableError(f"Cannot parse distance table {path}: {e}") from e

    # only the first header cell carries the comment marker
    df.columns = [str(df.columns[0]).lstrip("#").strip()] + [str(c) for c in df.columns[1:]]
    if QUERY_COL not in df.columns:
        raise DistanceTableError(f"No '{QUERY_COL}' column in header of {path}")
    if df.empty:
        raise DistanceTableError(f"Distance table has a header but no rows: {path}")

    refs = [c for c in df.columns if c != QUERY_COL]
    try:
        df[refs] = df[refs].apply(pd.to_numeric, errors="raise")
    except (ValueError, TypeError) as e:
        raise DistanceTableError(f"Non-numeric distance in {path}: {e}") from e
    if df[refs].isna().any().any():
        raise DistanceTableError(f"Missing distance values in {path}")
    if len(refs) != len(df):
        raise DistanceTableError(
            f"Distance table is not square: {len(df)} queries x {len(refs)} references"
        )
    return df[[QUERY_COL] + refs]

def _basenames(values) -> List[str]:
    return [os.path.basename(str(v)) for v in values]

def to_matrix(df: pd.DataFrame) -> pd.DataFrame:
    """Square genome x genome matrix labelled by basename on both axes."""
    refs = [c for c in df.columns if c != QUERY_COL]
    mat = df[refs].to_numpy(dtype=float)
    names = _basenames(df[QUERY_COL])
    if len(set(names)) != len(names):
        raise DistanceTableError("Genome basenames in the distance table are not unique")
    if set(_basenames(refs)) != set(names):
        raise DistanceTableError("Query and reference genomes of the distance table differ")
    out = pd.DataFrame(mat, index=names, columns=_basenames(refs))
    # mash orders references like queries, but do not rely on it
    out = out.loc[names, names]
    out.index.name = None
    out.columns.name = None
    return out

def to_long(matrix: pd.DataFrame) -> pd.DataFrame:
    """Melt the matrix into Source/Target/Dist rows, one per ordered pair."""
    long = (matrix.rename_axis(index="Source")
                  .reset_index()
                  .melt(id_vars="Source", var_name="Target", value_name="Dist"))
    return long[LONG_COLUMNS].reset_index(drop=True)

def order_by(matrix: pd.DataFrame, names: Sequence[str]) -> pd.DataFrame:
    """Reorder rows and columns to `names` (the caller's input order)."""
    names = list(names)
    if set(names) != set(matrix.index) or len(names) != len(matrix):
        missing = sorted(set(names) - set(matrix.index))
        extra = sorted(set(matrix.index) - set(names))
        raise DistanceTableError(
            f"Distance table genomes do not match the inputs (missing: {missing}, unexpected: {extra})"
        )
    return matrix.loc[names, names]

def check_symmetric(matrix: pd.DataFrame, atol: float = 1e-9) -> bool:
    values = matrix.to_numpy(dtype=float)
    ok = np.allclose(values, values.T, atol=atol) and np.allclose(np.diag(values), 0.0, atol=atol)
    if not ok:
        LOGGER.warning("Distance matrix is not symmetric with a zero diagonal.")
    return ok

def build_result(table_file: PathLike, workspace: PathLike,
                 names: Optional[Sequence[str]] = None, **provenance) -> MashResult:
    """Parse `table_file` and package both views with the workspace path."""
    df = read_distance_table(table_file)
    matrix = to_matrix(df)
    if names is not None:
        matrix = order_by(matrix, names)
    check_symmetric(matrix)
    return MashResult(matrix=matrix, table=to_long(matrix), path=Path(workspace), **provenance)
