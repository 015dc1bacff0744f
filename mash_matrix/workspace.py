"""
Per-input-set working directory that caches the mash sketch.

Layout:

  <root>/<key>_mash/
    input_mash.txt     # genome paths, one per line (mash sketch -l)
    all.msh            # sketch of every genome (cache)
    sketch_meta.json   # key, parameters and input fingerprints of all.msh
    Dist.tab           # mash dist -t output

<key> is the md5 of the sorted absolute input paths plus the parameters that
change the sketch, so the same genome set in a different order maps to the same
directory. The sketch is reused only while sketch_meta.json still matches the
inputs' size and mtime. Nothing here locks the directory: two processes working
on the same genome set at once can race on all.msh.
"""

from __future__ import annotations

import hashlib
import json
import shutil
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import (LIST_FILE, META_FILE, SKETCH_FILE, TABLE_FILE,
                     WORKSPACE_SUFFIX, MashParams, PathLike)
from .log import get_logger

LOGGER = get_logger("workspace")

@dataclass
class SketchMeta:
    key: str
    params: Dict
    inputs: List[Dict] = field(default_factory=list)
    mash_version: Optional[str] = None
    version: int = 1

def _fingerprint(p: Path) -> Dict:
    st = p.stat()
    return {"path": str(p), "size": st.st_size, "mtime_ns": st.st_mtime_ns}

def cache_key(paths: Sequence[Path], params: MashParams) -> str:
    """md5 hex digest of the order-independent genome set plus sketch parameters."""
    canonical = {
        "inputs": sorted(str(Path(p).resolve()) for p in paths),
        "params": params.cache_fields(),
    }
    blob = json.dumps(canonical, sort_keys=True).encode("utf-8")
    return hashlib.md5(blob).hexdigest()

class Workspace:
    def __init__(self, path: Path, key: str, params: MashParams):
        self.path = Path(path)
        self.key = key
        self.params = params

    @property
    def list_file(self) -> Path:
        return self.path / LIST_FILE

    @property
    def sketch_file(self) -> Path:
        return self.path / SKETCH_FILE

    @property
    def table_file(self) -> Path:
        return self.path / TABLE_FILE

    @property
    def meta_file(self) -> Path:
        return self.path / META_FILE

    @classmethod
    def create(cls, paths: Sequence[Path], params: MashParams,
               root: Optional[PathLike] = None) -> "Workspace":
        """Create (or reopen) the workspace for `paths` and write the list file."""
        key = cache_key(paths, params)
        base = Path(root) if root is not None else Path.cwd()
        ws = cls(base / f"{key}{WORKSPACE_SUFFIX}", key, params)
        ws.path.mkdir(parents=True, exist_ok=True)
        ws.write_list(paths)
        LOGGER.debug("Workspace: %s", ws.path)
        return ws

    def write_list(self, paths: Sequence[Path]):
        with open(self.list_file, "w") as fh:
            for p in paths:
                fh.write(f"{p}\n")

    def read_meta(self) -> Optional[SketchMeta]:
        if not self.meta_file.exists():
            return None
        try:
            with open(self.meta_file) as fh:
                return SketchMeta(**json.load(fh))
        except (ValueError, TypeError) as e:
            LOGGER.warning("Ignoring unreadable %s: %s", self.meta_file, e)
            return None

    def sketch_is_fresh(self, paths: Sequence[Path]) -> bool:
        """True when all.msh exists and was built from exactly these inputs."""
        if not self.sketch_file.exists():
            return False
        meta = self.read_meta()
        if meta is None:
            LOGGER.info("No sketch metadata in %s; sketch will be rebuilt.", self.path)
            return False
        if meta.key != self.key:
            return False
        current = sorted((_fingerprint(Path(p)) for p in paths), key=lambda d: d["path"])
        recorded = sorted(meta.inputs, key=lambda d: d["path"])
        if current != recorded:
            LOGGER.info("Input files changed since %s was built.", self.sketch_file.name)
            return False
        return True

    def record_sketch(self, paths: Sequence[Path], mash_version: Optional[str] = None):
        meta = SketchMeta(
            key=self.key,
            params=self.params.cache_fields(),
            inputs=[_fingerprint(Path(p)) for p in paths],
            mash_version=mash_version,
        )
        with open(self.meta_file, "w") as f:
            json.dump(asdict(meta), f, indent=2)

    def invalidate(self):
        """Drop the cached sketch and its metadata."""
        for p in (self.sketch_file, self.meta_file):
            if p.exists():
                p.unlink()

    def clean(self):
        if self.path.exists():
            shutil.rmtree(self.path)
            LOGGER.info("Removed workspace %s", self.path)

    def __repr__(self):
        return f"Workspace({str(self.path)!r})"
