"""
Thin wrapper around the mash command line (sketch, dist, --version).

Every call is synchronous; `n_cores` is only passed through to mash (-p).
A non-zero exit status, a timeout or a missing output file raises
MashExecutionError carrying the command and mash's stderr.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional

from .config import MashParams, PathLike, SeqType
from .errors import ConfigurationError, MashExecutionError
from .log import get_logger

LOGGER = get_logger("runner")

class MashRunner:
    def __init__(self, binary: PathLike, timeout: Optional[float] = None):
        self.binary = Path(binary)
        self.timeout = timeout

    def _run(self, args: List[str], stdout_path: Optional[Path] = None) -> subprocess.CompletedProcess:
        cmd = [str(self.binary)] + [str(a) for a in args]
        printable = " ".join(cmd) + (f" > {stdout_path}" if stdout_path else "")
        LOGGER.info("Running: %s", printable)
        if stdout_path is not None:
            try:
                out = open(stdout_path, "w")
            except OSError as e:
                raise MashExecutionError(
                    f"Cannot write mash {args[0]} output to {stdout_path}: {e}", cmd=cmd
                ) from e
            with out:
                proc = self._call(cmd, args[0], stdout=out)
        else:
            proc = self._call(cmd, args[0], stdout=subprocess.PIPE)
        if proc.stderr:
            LOGGER.debug("mash %s stderr:\n%s", args[0], proc.stderr.rstrip())
        if proc.returncode != 0:
            raise MashExecutionError(f"mash {args[0]} failed", cmd=cmd,
                                     returncode=proc.returncode, stderr=proc.stderr)
        return proc

    def _call(self, cmd: List[str], subcommand: str, stdout) -> subprocess.CompletedProcess:
        """subprocess.run with launch failures mapped to package errors."""
        try:
            return subprocess.run(cmd, stdout=stdout, stderr=subprocess.PIPE,
                                  text=True, timeout=self.timeout)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Cannot execute mash binary {self.binary}: {e}") from e
        except PermissionError as e:
            raise ConfigurationError(f"mash binary is not executable: {self.binary}") from e
        except subprocess.TimeoutExpired as e:
            raise MashExecutionError(
                f"mash {subcommand} timed out after {self.timeout}s", cmd=cmd,
                stderr=e.stderr if isinstance(e.stderr, str) else "",
            ) from e

    def version(self) -> Optional[str]:
        """Version reported by `mash --version`, or None if it cannot be read."""
        try:
            proc = self._run(["--version"])
        except MashExecutionError as e:
            LOGGER.warning("Could not read mash version: %s", e)
            return None
        line = (proc.stdout or "").strip() or (proc.stderr or "").strip()
        return line or None

    @staticmethod
    def sketch_args(list_file: Path, out_file: Path, params: MashParams) -> List[str]:
        seq_type = SeqType.parse(params.seq_type)
        args = ["sketch",
                "-p", str(params.n_cores),
                "-s", str(params.sketch_size),
                "-k", str(params.kmer),
                "-l", str(list_file)]
        if seq_type.amino_acid:
            args.append("-a")
        args += ["-o", str(out_file)]
        return args

    def sketch(self, list_file: Path, out_file: Path, params: MashParams) -> Path:
        """Sketch every genome listed in `list_file` into `out_file` (.msh)."""
        args = self.sketch_args(list_file, out_file, params)
        self._run(args)
        # mash appends .msh to -o when it is missing
        produced = out_file if out_file.suffix == ".msh" else out_file.with_name(out_file.name + ".msh")
        if not produced.exists():
            raise MashExecutionError(f"mash sketch did not produce {produced}", cmd=args)
        return produced

    def dist(self, sketch_file: Path, table_file: Path, n_cores: int) -> Path:
        """All-vs-all distances of `sketch_file` against itself, as a table."""
        args = ["dist", "-p", str(n_cores), "-t", str(sketch_file), str(sketch_file)]
        self._run(args, stdout_path=table_file)
        if not table_file.exists() or table_file.stat().st_size == 0:
            raise MashExecutionError(f"mash dist wrote no output to {table_file}", cmd=args)
        return table_file
