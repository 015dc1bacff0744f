"""
Resolve caller input into the ordered list of genome files handed to mash.

Two shapes are accepted:
  - a flat collection of paths (list/tuple, pandas Series or DataFrame whose
    first column holds paths, a text file with one path per line, or a
    single FASTA file);
  - a GenomeDirectory, i.e. a directory with per-genome files split by
    sequence type:

      root/
        faa/   protein multi-FASTA      (seq_type 'prot')
        ffn/   gene nucleotide FASTA    (seq_type 'nucl')
        fna/   whole-genome FASTA       (seq_type 'wgs')
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from .config import SeqType
from .errors import ConfigurationError, InputError
from .log import get_logger

LOGGER = get_logger("inputs")

FASTA_SUFFIXES = {".fa", ".fasta", ".fas", ".faa", ".fna", ".ffn"}

@dataclass(frozen=True)
class GenomeDirectory:
    """Directory of per-genome files categorized by sequence type."""
    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path).expanduser())

    def subdir(self, seq_type) -> Path:
        return self.path / SeqType.parse(seq_type).subdir

    def files(self, seq_type) -> List[Path]:
        d = self.subdir(seq_type)
        if not d.is_dir():
            raise InputError(f"Genome directory has no '{d.name}' subdirectory: {self.path}")
        # sorted by name, hidden files skipped
        return sorted(p for p in d.iterdir() if p.is_file() and not p.name.startswith("."))

def is_fasta(path: Path) -> bool:
    """True for a FASTA file (by extension, or a leading '>' record marker)."""
    name = path.name.lower()
    if name.endswith(".gz"):
        name = name[:-3]
    if os.path.splitext(name)[1] in FASTA_SUFFIXES:
        return True
    if path.name.lower().endswith(".gz"):
        return False
    with open(path, "rb") as fh:
        head = fh.read(4096).lstrip()
    return head.startswith(b">")

def read_list_file(path: Path) -> List[str]:
    with open(path) as fh:
        return [line.strip() for line in fh if line.strip()]

def _flatten(file_list) -> List[str]:
    if isinstance(file_list, pd.DataFrame):
        if file_list.shape[1] == 0:
            return []
        return [str(x) for x in file_list.iloc[:, 0].dropna()]
    if isinstance(file_list, pd.Series):
        return [str(x) for x in file_list.dropna()]
    if isinstance(file_list, (str, os.PathLike)):
        p = Path(file_list)
        if p.is_dir():
            raise InputError(
                f"{p} is a directory; wrap it in GenomeDirectory to select files by type"
            )
        if not p.is_file():
            raise InputError(f"Input list file not found: {p}")
        if is_fasta(p):
            return [os.fspath(file_list)]
        return read_list_file(p)
    if isinstance(file_list, Iterable):
        return [os.fspath(x) for x in file_list]
    raise InputError(f"Cannot interpret {type(file_list).__name__} as a list of genome files")

def check_inputs(paths: List[Path]) -> List[Path]:
    """Fail before any subprocess if the list is empty, incomplete or has name clashes."""
    if not paths:
        raise InputError("No genome files to compare.")
    missing = [str(p) for p in paths if not p.is_file()]
    if missing:
        shown = ", ".join(missing[:5])
        more = f" (+{len(missing) - 5} more)" if len(missing) > 5 else ""
        raise InputError(f"{len(missing)} input file(s) not found: {shown}{more}")
    seen = {}
    dups = []
    for p in paths:
        if p.name in seen and p.name not in dups:
            dups.append(p.name)
        seen.setdefault(p.name, p)
    if dups:
        raise InputError(
            "Genome basenames must be unique (they label the matrix); duplicated: "
            + ", ".join(dups)
        )
    return paths

def resolve_inputs(file_list, seq_type: Optional[str] = None) -> List[Path]:
    """
    Normalize `file_list` into absolute paths, keeping the caller's order.

    A GenomeDirectory requires `seq_type`; without it a ConfigurationError is
    raised before anything touches the filesystem.
    """
    if isinstance(file_list, GenomeDirectory):
        if seq_type is None:
            raise ConfigurationError("seq_type must be declared for GenomeDirectory inputs")
        st = SeqType.parse(seq_type)
        raw = file_list.files(st)
        LOGGER.info("Found %d %s file(s) in %s", len(raw), st.subdir, file_list.subdir(st))
    else:
        if seq_type is not None:
            SeqType.parse(seq_type)
        raw = _flatten(file_list)
    # absolute but unresolved: a symlink keeps its own name as the label
    paths = [Path(os.path.abspath(os.path.expanduser(os.fspath(p)))) for p in raw]
    return check_inputs(paths)
