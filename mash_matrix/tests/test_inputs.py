from pathlib import Path

import pandas as pd
import pytest

from mash_matrix.errors import ConfigurationError, InputError
from mash_matrix.inputs import GenomeDirectory, resolve_inputs

def test_list_keeps_order(genomes):
    order = [genomes[3], genomes[0], genomes[1]]
    assert resolve_inputs([str(p) for p in order]) == order

def test_dataframe_uses_first_column(genomes):
    df = pd.DataFrame({"file": [str(p) for p in genomes], "note": list("wxyz")})
    assert resolve_inputs(df) == list(genomes)
    assert resolve_inputs(df["file"]) == list(genomes)

def test_list_file(genomes, tmp_path):
    lst = tmp_path / "genomes.txt"
    lst.write_text("\n".join(str(p) for p in genomes) + "\n\n")
    assert resolve_inputs(lst) == list(genomes)
    assert resolve_inputs(str(lst)) == list(genomes)

def test_plain_directory_is_rejected(genomes):
    with pytest.raises(InputError, match="GenomeDirectory"):
        resolve_inputs(genomes[0].parent)

def test_empty_and_missing(tmp_path):
    with pytest.raises(InputError, match="No genome files"):
        resolve_inputs([])
    with pytest.raises(InputError, match="not found"):
        resolve_inputs([tmp_path / "x.faa"])
    with pytest.raises(InputError, match="not found"):
        resolve_inputs(tmp_path / "list.txt")

def test_duplicate_basenames(tmp_path):
    a = tmp_path / "one" / "g.faa"
    b = tmp_path / "two" / "g.faa"
    for p in (a, b):
        p.parent.mkdir()
        p.write_text(">g\nMK\n")
    with pytest.raises(InputError, match="g.faa"):
        resolve_inputs([a, b])

def test_flat_list_rejects_unknown_type(genomes):
    with pytest.raises(ConfigurationError):
        resolve_inputs(genomes, "dna")

def test_genome_directory_listing(genome_dir):
    gd = GenomeDirectory(genome_dir)
    (genome_dir / "ffn" / ".hidden").write_text("x")
    assert [p.name for p in gd.files("nucl")] == ["g1.ffn", "g2.ffn", "g3.ffn"]
    assert resolve_inputs(gd, "wgs") == [genome_dir / "fna" / f"g{i}.fna" for i in (1, 2, 3)]

def test_genome_directory_type_required(genome_dir):
    with pytest.raises(ConfigurationError, match="seq_type"):
        resolve_inputs(GenomeDirectory(genome_dir))

def test_genome_directory_unknown_type_is_an_error(genome_dir):
    with pytest.raises(ConfigurationError, match="Unsupported sequence type"):
        resolve_inputs(GenomeDirectory(genome_dir), "gff")

def test_genome_directory_missing_subdir(tmp_path):
    (tmp_path / "faa").mkdir()
    gd = GenomeDirectory(tmp_path)
    with pytest.raises(InputError, match="'fna'"):
        resolve_inputs(gd, "wgs")
    with pytest.raises(InputError, match="No genome files"):
        resolve_inputs(gd, "prot")

def test_single_fasta_file_is_one_genome(genomes, tmp_path):
    assert resolve_inputs(genomes[0]) == [genomes[0]]
    assert resolve_inputs(str(genomes[1])) == [genomes[1]]
    # no FASTA extension, recognised by its first record
    odd = tmp_path / "genome.seq"
    odd.write_text("\n>contig1\nACGT\n")
    assert resolve_inputs(odd) == [odd]

def test_symlink_keeps_link_name(tmp_path):
    target = tmp_path / "store" / "GCF_0001.faa"
    target.parent.mkdir()
    target.write_text(">x\nMK\n")
    link = tmp_path / "ecoli.faa"
    link.symlink_to(target)
    (resolved,) = resolve_inputs([link])
    assert resolved == link
    assert resolved.name == "ecoli.faa"
