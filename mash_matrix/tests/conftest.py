"""
Shared fixtures: a stand-in mash executable and small genome files.

The fake mash honours the parts of the CLI this package relies on:
  mash --version
  mash sketch ... -l <list> [-a] -o <out.msh>   (writes the listed paths to out)
  mash dist -p N -t <sketch> <sketch>           (prints a symmetric table)
Each call is appended to calls.log next to the script. Setting
FAKE_MASH_FAIL=<subcommand> makes that subcommand exit 2 with an error on
stderr; FAKE_MASH_GARBAGE=1 makes dist print an unparseable table.
"""

import os
import stat
import sys
from pathlib import Path

import pytest

FAKE_MASH = '''#!{python}
import os
import sys

here = os.path.dirname(os.path.abspath(__file__))
args = sys.argv[1:]
with open(os.path.join(here, "calls.log"), "a") as fh:
    fh.write(" ".join(args) + "\\n")

if args and os.environ.get("FAKE_MASH_FAIL") == args[0]:
    sys.stderr.write("ERROR: simulated " + args[0] + " failure\\n")
    sys.exit(2)

if args[0] == "--version":
    print("2.3")
elif args[0] == "sketch":
    lst = args[args.index("-l") + 1]
    out = args[args.index("-o") + 1]
    if not out.endswith(".msh"):
        out += ".msh"
    with open(lst) as fh:
        paths = [l.strip() for l in fh if l.strip()]
    with open(out, "w") as fh:
        fh.write("\\n".join(paths) + "\\n")
    sys.stderr.write("Sketching %d file(s)...\\n" % len(paths))
elif args[0] == "dist":
    if os.environ.get("FAKE_MASH_GARBAGE"):
        print("this is not a table")
        sys.exit(0)
    with open(args[-1]) as fh:
        paths = [l.strip() for l in fh if l.strip()]
    print("\\t".join(["#query"] + paths))
    for a in paths:
        row = [a]
        for b in paths:
            if a == b:
                row.append("0")
            else:
                na, nb = os.path.basename(a), os.path.basename(b)
                row.append(str(round(0.05 + 0.01 * abs(len(na) - len(nb)), 4)))
        print("\\t".join(row))
else:
    sys.stderr.write("unknown command\\n")
    sys.exit(1)
'''

class FakeMash:
    def __init__(self, root: Path):
        self.root = root
        self.path = root / "mash"
        self.log = root / "calls.log"

    def calls(self, subcommand=None):
        if not self.log.exists():
            return []
        lines = [l.split() for l in self.log.read_text().splitlines() if l.strip()]
        if subcommand is None:
            return lines
        return [l for l in lines if l[0] == subcommand]

@pytest.fixture
def fake_mash(tmp_path: Path) -> FakeMash:
    root = tmp_path / "bin"
    root.mkdir()
    fake = FakeMash(root)
    fake.path.write_text(FAKE_MASH.format(python=sys.executable))
    fake.path.chmod(fake.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return fake

@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    d = tmp_path / "work"
    d.mkdir()
    return d

def write_fasta(path: Path, name: str, seq: str = "MKVLAAGIVGLLLASCSSQ") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f">{name}\n{seq}\n")
    return path

@pytest.fixture
def genomes(tmp_path: Path):
    """Four protein files with distinct basenames (and basename lengths)."""
    d = tmp_path / "genomes"
    names = ["a.faa", "bb.faa", "ccc.faa", "dddd.faa"]
    return [write_fasta(d / n, n.split(".")[0]) for n in names]

@pytest.fixture
def genome_dir(tmp_path: Path) -> Path:
    root = tmp_path / "annotation"
    for sub, ext, seq in (("faa", "faa", "MKVLAAG"), ("ffn", "ffn", "ATGAAAGTG"), ("fna", "fna", "ACGTACGTAC")):
        for g in ("g2", "g1", "g3"):
            write_fasta(root / sub / f"{g}.{ext}", g, seq)
    return root

@pytest.fixture(autouse=True)
def _clean_fake_env(monkeypatch):
    for var in ("FAKE_MASH_FAIL", "FAKE_MASH_GARBAGE"):
        monkeypatch.delenv(var, raising=False)
    yield
