"""
Global configuration and constants for the Mash distance wrapper.
"""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigurationError

# mash sketch defaults: threads, hashes per sketch, k-mer size
DEFAULT_CORES = 4
DEFAULT_SKETCH_SIZE = 1000
DEFAULT_KMER = 21
# mash stores 64-bit hashes; k above 32 is rejected by `mash sketch`
MAX_KMER = 32

# Workspace layout: <root>/<md5>_mash/{input_mash.txt, all.msh, Dist.tab}
WORKSPACE_SUFFIX = "_mash"
LIST_FILE = "input_mash.txt"
SKETCH_FILE = "all.msh"
TABLE_FILE = "Dist.tab"
META_FILE = "sketch_meta.json"

MASH_EXECUTABLE = "mash"

PathLike = Union[str, os.PathLike]


class SeqType(str, Enum):
    PROT = "prot"
    NUCL = "nucl"
    WGS = "wgs"

    @property
    def subdir(self) -> str:
        """Subdirectory of a genome directory holding files of this type."""
        return {"prot": "faa", "nucl": "ffn", "wgs": "fna"}[self.value]

    @property
    def amino_acid(self) -> bool:
        return self is SeqType.PROT

    @classmethod
    def parse(cls, value) -> "SeqType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise ConfigurationError(
                f"Unsupported sequence type {value!r}; expected one of: {allowed}"
            ) from None


class Platform(str, Enum):
    LINUX = "linux"
    MACOS = "macos"

    @property
    def binary_name(self) -> str:
        """Name of the bundled mash build for this platform."""
        return "mash" if self is Platform.LINUX else "mash.macos"

    @classmethod
    def parse(cls, value) -> "Platform":
        """
        Accepts enum values, sys.platform strings and target triples such as
        'x86_64-pc-linux-gnu' or 'aarch64-apple-darwin20'.
        """
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower()
        if "linux" in s:
            return cls.LINUX
        if "apple" in s or "darwin" in s or s in ("macos", "osx"):
            return cls.MACOS
        raise ConfigurationError(f"Operating system not supported: {value!r}")

    @classmethod
    def current(cls) -> "Platform":
        return cls.parse(sys.platform)


@dataclass(frozen=True)
class MashParams:
    """Parameters forwarded to `mash sketch` / `mash dist`."""
    n_cores: int = DEFAULT_CORES
    sketch_size: int = DEFAULT_SKETCH_SIZE
    kmer: int = DEFAULT_KMER
    seq_type: SeqType = SeqType.PROT

    def __post_init__(self):
        object.__setattr__(self, "seq_type", SeqType.parse(self.seq_type))
        self.validate()

    def validate(self):
        errors = []
        for name in ("n_cores", "sketch_size", "kmer"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")
        if errors:
            raise ConfigurationError("; ".join(errors))
        if self.n_cores < 1:
            errors.append("n_cores must be >= 1")
        if self.sketch_size < 1:
            errors.append("sketch_size must be >= 1")
        if not 1 <= self.kmer <= MAX_KMER:
            errors.append(f"kmer must be between 1 and {MAX_KMER}")
        if errors:
            raise ConfigurationError("Invalid mash parameters: " + "; ".join(errors))

    def cache_fields(self) -> dict:
        """Parameters that change the sketch; n_cores only changes speed."""
        d = asdict(self)
        d.pop("n_cores")
        d["seq_type"] = self.seq_type.value
        return d


def resolve_mash_binary(binary: Optional[PathLike] = None,
                        platform: Optional[Union[str, Platform]] = None,
                        bundle_dir: Optional[PathLike] = None) -> Path:
    """
    Pick the mash executable.

    An explicit `binary` wins. With `bundle_dir`, the platform-specific build
    inside it is used ('mash' on Linux, 'mash.macos' on macOS); `platform`
    defaults to the running interpreter's. Otherwise `mash` is looked up on PATH.
    """
    if binary is not None:
        path = Path(binary).expanduser()
        if not path.is_file():
            found = shutil.which(str(binary))
            if found is None:
                raise ConfigurationError(f"mash binary not found: {binary}")
            path = Path(found)
        return path

    if bundle_dir is not None:
        plat = Platform.parse(platform) if platform is not None else Platform.current()
        path = Path(bundle_dir).expanduser() / plat.binary_name
        if not path.is_file():
            raise ConfigurationError(f"Bundled mash for {plat.value} not found: {path}")
        return path

    if platform is not None:
        # validate even when PATH lookup is used
        Platform.parse(platform)
    found = shutil.which(MASH_EXECUTABLE)
    if found is None:
        raise ConfigurationError(
            "mash not found on PATH; install it (conda install -c bioconda mash) "
            "or pass the binary path explicitly."
        )
    return Path(found)
