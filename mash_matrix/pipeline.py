"""
Caller-facing entry point: genome files in, MashResult out.

    from mash_matrix.inputs import GenomeDirectory
    from mash_matrix.pipeline import mash

    res = mash(["/data/g1.faa", "/data/g2.faa"], n_cores=8)
    res.matrix     # 2x2 DataFrame
    res.table      # Source / Target / Dist
    res.path       # ./<md5>_mash

    res = mash(GenomeDirectory("/data/annotation"), seq_type="wgs")
"""

from __future__ import annotations

from typing import Optional, Union

from .config import (DEFAULT_CORES, DEFAULT_KMER, DEFAULT_SKETCH_SIZE,
                     MashParams, PathLike, Platform, SeqType, resolve_mash_binary)
from .errors import ConfigurationError
from .inputs import GenomeDirectory, resolve_inputs
from .log import get_logger
from .reshape import MashResult, build_result
from .runner import MashRunner
from .workspace import Workspace

LOGGER = get_logger("pipeline")

def mash(file_list,
         n_cores: int = DEFAULT_CORES,
         sketch: int = DEFAULT_SKETCH_SIZE,
         kmer: int = DEFAULT_KMER,
         seq_type: Optional[Union[str, SeqType]] = None,
         *,
         mash_binary: Optional[PathLike] = None,
         platform: Optional[Union[str, Platform]] = None,
         bundle_dir: Optional[PathLike] = None,
         workdir: Optional[PathLike] = None,
         force: bool = False,
         timeout: Optional[float] = None) -> MashResult:
    """
    Estimate all-vs-all Mash distances between genome files.

    file_list: paths (list, pandas Series/DataFrame, list file) or a
        GenomeDirectory; the latter requires `seq_type`.
    seq_type: 'prot' (amino-acid sketches), 'nucl' or 'wgs'. Defaults to
        'prot' for plain path lists.
    mash_binary / platform / bundle_dir: see config.resolve_mash_binary.
    workdir: parent of the <md5>_mash workspace (default: current directory).
    force: re-sketch even if a matching all.msh is cached.
    """
    if isinstance(file_list, GenomeDirectory) and seq_type is None:
        raise ConfigurationError("seq_type must be declared for GenomeDirectory inputs")
    params = MashParams(n_cores=n_cores, sketch_size=sketch, kmer=kmer,
                        seq_type=seq_type if seq_type is not None else SeqType.PROT)

    paths = resolve_inputs(file_list, params.seq_type)
    binary = resolve_mash_binary(mash_binary, platform=platform, bundle_dir=bundle_dir)
    runner = MashRunner(binary, timeout=timeout)

    ws = Workspace.create(paths, params, root=workdir)
    LOGGER.info("Comparing %d genome(s) [%s, k=%d, s=%d] in %s",
                len(paths), params.seq_type.value, params.kmer, params.sketch_size, ws.path)

    version = runner.version()
    reused = not force and ws.sketch_is_fresh(paths)
    if reused:
        LOGGER.info("Reusing cached sketch %s", ws.sketch_file)
    else:
        ws.invalidate()
        runner.sketch(ws.list_file, ws.sketch_file, params)
        ws.record_sketch(paths, mash_version=version)

    runner.dist(ws.sketch_file, ws.table_file, params.n_cores)

    result = build_result(ws.table_file, ws.path, names=[p.name for p in paths],
                          params=params, sketch_reused=reused, mash_version=version)
    LOGGER.info("Distance matrix: %d x %d", *result.matrix.shape)
    return result
