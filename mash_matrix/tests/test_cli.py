import pandas as pd

from mash_matrix.cli import main

def _dist_args(fake, workdir, out):
    return ["dist", "--mash", str(fake.path), "--workdir", str(workdir),
            "--out-dir", str(out), "--overwrite"]

def test_dist_writes_outputs(fake_mash, workdir, genomes, tmp_path):
    out = tmp_path / "out"
    rc = main(_dist_args(fake_mash, workdir, out) + [str(p) for p in genomes])
    assert rc == 0
    m = pd.read_csv(out / "matrix.tsv", sep="\t", index_col=0)
    assert list(m.index) == [p.name for p in genomes]
    t = pd.read_csv(out / "table.tsv", sep="\t")
    assert len(t) == len(genomes) ** 2

def test_dist_from_list_file_parquet(fake_mash, workdir, genomes, tmp_path):
    lst = tmp_path / "genomes.txt"
    lst.write_text("\n".join(str(p) for p in genomes) + "\n")
    out = tmp_path / "out"
    rc = main(_dist_args(fake_mash, workdir, out) + ["--format", "parquet", "--type", "nucl", str(lst)])
    assert rc == 0
    assert len(pd.read_parquet(out / "table.parquet")) == 16
    (sketch,) = fake_mash.calls("sketch")
    assert "-a" not in sketch

def test_dist_genome_dir_without_type_fails(fake_mash, workdir, genome_dir, tmp_path):
    rc = main(_dist_args(fake_mash, workdir, tmp_path / "out") + ["--genome-dir", str(genome_dir)])
    assert rc == 1
    assert fake_mash.calls() == []

def test_dist_reports_mash_failure(fake_mash, workdir, genomes, tmp_path, monkeypatch):
    monkeypatch.setenv("FAKE_MASH_FAIL", "dist")
    rc = main(_dist_args(fake_mash, workdir, tmp_path / "out") + [str(p) for p in genomes])
    assert rc == 1
    assert not (tmp_path / "out" / "matrix.tsv").exists()

def test_reshape_and_clean(fake_mash, workdir, genomes, tmp_path):
    assert main(_dist_args(fake_mash, workdir, tmp_path / "first") + [str(p) for p in genomes]) == 0
    (ws,) = [d for d in workdir.iterdir() if d.name.endswith("_mash")]

    out = tmp_path / "again"
    assert main(["reshape", str(ws), "--out-dir", str(out), "--overwrite"]) == 0
    first = pd.read_csv(tmp_path / "first" / "matrix.tsv", sep="\t", index_col=0)
    again = pd.read_csv(out / "matrix.tsv", sep="\t", index_col=0)
    pd.testing.assert_frame_equal(first, again)

    assert main(["clean", str(ws), "--yes"]) == 0
    assert not ws.exists()
