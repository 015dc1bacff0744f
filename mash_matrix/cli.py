"""
Command-line interface for Mash all-vs-all distances.

Examples:

# 1) Protein files given directly; outputs written to ./mash_out
python -m mash_matrix.cli dist /data/faa/*.faa --cores 8 --out-dir mash_out

# 2) Whole genomes from an annotation directory (root/{faa,ffn,fna}/)
python -m mash_matrix.cli dist --genome-dir /data/annotation --type wgs \
  --kmer 21 --sketch 1000 --format parquet --out-dir mash_out

# 3) Reshape an existing workspace without running mash
python -m mash_matrix.cli reshape ./3f2a..._mash --out-dir mash_out

# 4) Remove a workspace (cached sketch included)
python -m mash_matrix.cli clean ./3f2a..._mash
"""

from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from .config import (DEFAULT_CORES, DEFAULT_KMER, DEFAULT_SKETCH_SIZE,
                     LIST_FILE, TABLE_FILE, SeqType)
from .errors import MashMatrixError
from .inputs import GenomeDirectory, read_list_file
from .log import get_logger, set_verbosity
from .pipeline import mash
from .reshape import build_result

LOGGER = get_logger("cli")

def _confirm(msg: str) -> bool:
    return input(f"{msg} [y/N] ").strip().lower() == "y"

def _confirm_overwrite(paths: List[Path], yes: bool) -> bool:
    existing = [p for p in paths if p.exists()]
    if yes or not existing:
        return True
    return _confirm(f"[confirm] {', '.join(map(str, existing))} exist(s); overwrite?")

def _outputs(out_dir: Path, fmt: str) -> List[Path]:
    return [out_dir / "matrix.tsv", out_dir / f"table.{fmt}"]

def cmd_dist(args):
    if args.genome_dir:
        if args.inputs:
            raise SystemExit("Give either genome files or --genome-dir, not both.")
        file_list = GenomeDirectory(Path(args.genome_dir))
    elif len(args.inputs) == 1 and args.inputs[0].endswith(".txt"):
        # a single .txt argument is a list file, one genome path per line
        file_list = Path(args.inputs[0])
    elif args.inputs:
        file_list = args.inputs
    else:
        raise SystemExit("No genome files given.")

    out_dir = Path(args.out_dir)
    if not _confirm_overwrite(_outputs(out_dir, args.format), args.overwrite):
        raise SystemExit("User declined overwrite.")

    res = mash(
        file_list,
        n_cores=args.cores,
        sketch=args.sketch,
        kmer=args.kmer,
        seq_type=args.type,
        mash_binary=args.mash,
        platform=args.platform,
        bundle_dir=args.bundle_dir,
        workdir=args.workdir,
        force=args.force,
        timeout=args.timeout,
    )
    for p in res.to_files(out_dir, fmt=args.format):
        LOGGER.info("Wrote: %s", p)
    LOGGER.info("Workspace: %s (sketch %s)", res.path,
                "reused" if res.sketch_reused else "built")

def cmd_reshape(args):
    src = Path(args.table)
    table = src / TABLE_FILE if src.is_dir() else src
    names = None
    list_file = table.parent / LIST_FILE
    if list_file.exists():
        names = [Path(p).name for p in read_list_file(list_file)]
    out_dir = Path(args.out_dir)
    if not _confirm_overwrite(_outputs(out_dir, args.format), args.overwrite):
        raise SystemExit("User declined overwrite.")
    res = build_result(table, table.parent, names=names)
    for p in res.to_files(out_dir, fmt=args.format):
        LOGGER.info("Wrote: %s", p)

def cmd_clean(args):
    ws = Path(args.workspace)
    if not ws.is_dir():
        LOGGER.warning("Not a directory: %s", ws)
        return
    if not (ws / LIST_FILE).exists():
        raise SystemExit(f"{ws} does not look like a mash workspace (no {LIST_FILE}).")
    if not args.yes and not _confirm(f"Remove {ws}?"):
        return
    shutil.rmtree(ws)
    LOGGER.info("Removed: %s", ws)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mash-matrix")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging (includes mash stderr).")
    ap.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_dist = sub.add_parser("dist", help="Sketch genomes and compute all-vs-all Mash distances.")
    ap_dist.add_argument("inputs", nargs="*", help="Genome/proteome FASTA files, or one .txt list file.")
    ap_dist.add_argument("--genome-dir", help="Directory with faa/, ffn/ and fna/ subdirectories (requires --type).")
    ap_dist.add_argument("--type", choices=[t.value for t in SeqType], default=None,
                         help="Sequence type: prot (amino acids), nucl or wgs. Default prot for file lists.")
    ap_dist.add_argument("--cores", type=int, default=DEFAULT_CORES, help=f"mash -p (default {DEFAULT_CORES}).")
    ap_dist.add_argument("--sketch", type=int, default=DEFAULT_SKETCH_SIZE, help=f"mash -s (default {DEFAULT_SKETCH_SIZE}).")
    ap_dist.add_argument("--kmer", type=int, default=DEFAULT_KMER, help=f"mash -k (default {DEFAULT_KMER}).")
    ap_dist.add_argument("--mash", help="Path to the mash executable.")
    ap_dist.add_argument("--bundle-dir", help="Directory holding platform builds 'mash' and 'mash.macos'.")
    ap_dist.add_argument("--platform", help="Platform of the bundled build (linux/macos); default: this machine.")
    ap_dist.add_argument("--workdir", help="Where <md5>_mash workspaces live (default: current directory).")
    ap_dist.add_argument("--force", action="store_true", help="Re-sketch even if a cached sketch matches.")
    ap_dist.add_argument("--timeout", type=float, default=None, help="Seconds allowed per mash call.")
    ap_dist.add_argument("--out-dir", default="mash_out", help="Output directory for matrix and table.")
    ap_dist.add_argument("--format", choices=["tsv", "parquet"], default="tsv", help="Long-form table format.")
    ap_dist.add_argument("--overwrite", action="store_true", help="Overwrite outputs without asking.")
    ap_dist.set_defaults(func=cmd_dist)

    ap_re = sub.add_parser("reshape", help="Reshape an existing Dist.tab (or workspace) without running mash.")
    ap_re.add_argument("table", help="Dist.tab file or <md5>_mash workspace directory.")
    ap_re.add_argument("--out-dir", default="mash_out", help="Output directory for matrix and table.")
    ap_re.add_argument("--format", choices=["tsv", "parquet"], default="tsv", help="Long-form table format.")
    ap_re.add_argument("--overwrite", action="store_true", help="Overwrite outputs without asking.")
    ap_re.set_defaults(func=cmd_reshape)

    ap_clean = sub.add_parser("clean", help="Delete a workspace directory and its cached sketch.")
    ap_clean.add_argument("workspace", help="<md5>_mash directory.")
    ap_clean.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")
    ap_clean.set_defaults(func=cmd_clean)
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbosity(verbose=args.verbose, quiet=args.quiet)
    try:
        args.func(args)
    except MashMatrixError as e:
        LOGGER.error("%s", e)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
