from __future__ import annotations

import gzip
import io
from pathlib import Path

import pytest

import minimisers


def run_cli(monkeypatch, args, fasta_text="") -> io.StringIO:
    err = io.StringIO()
    monkeypatch.setattr(minimisers, "argv", ["minimisers"] + args)
    monkeypatch.setattr(minimisers, "stdin", io.StringIO(fasta_text))
    monkeypatch.setattr(minimisers, "stderr", err)
    minimisers.main()
    return err


def test_reports_minimisers_per_sequence(monkeypatch, capsys) -> None:
    run_cli(monkeypatch, ["--k=2", "--window=2", "--hash=identity"], ">s1\nACGTA\n>s2\nGTAC\n")

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "s1\t0\t0000000000000001",
        "s1\t1\t0000000000000006",
        "s1\t2\t000000000000000B",
        "s2\t0\t000000000000000B",
        "s2\t2\t0000000000000001",
    ]


def test_canonical_option(monkeypatch, capsys) -> None:
    run_cli(monkeypatch, ["K=2", "W=2", "--hash=identity", "--canonical"], ">s1\nACGTA\n")

    assert capsys.readouterr().out.splitlines() == ["s1\t0\t0000000000000001"]


def test_head_limit_and_progress(monkeypatch, capsys) -> None:
    err = run_cli(
        monkeypatch,
        ["--k=2", "--window=2", "--hash=identity", "--head=1", "--progress=1"],
        ">s1\nACGTA\n>s2\nGTAC\n",
    )

    out = capsys.readouterr().out
    assert "s2" not in out
    assert "processing sequence #1: s1" in err.getvalue()
    assert "limit of 1 sequences reached" in err.getvalue()


def test_short_and_non_acgt_sequences_warn(monkeypatch, capsys) -> None:
    err = run_cli(monkeypatch, ["--k=3", "--window=2"], ">short\nAC\n>gappy\nACGNNACGT\n")

    warnings = err.getvalue()
    assert "WARNING: \"short\" is shorter than the kmer size" in warnings
    assert "WARNING: \"gappy\" contains non-ACGT" in warnings
    out = capsys.readouterr().out.splitlines()
    assert out
    assert all(line.startswith("gappy\t") for line in out)


def test_seeded_hash_option(monkeypatch, capsys) -> None:
    run_cli(monkeypatch, ["--k=4", "--window=3", "--hash=minimap2.0x10"], ">s\nACGTTGCAAGGT\n")

    out = capsys.readouterr().out.splitlines()
    assert out
    for line in out:
        (name, position, hash_value) = line.split("\t")
        assert name == "s"
        assert 0 <= int(position) <= 8
        assert len(hash_value) == 16


def test_debug_hashes(monkeypatch, capsys) -> None:
    err = run_cli(monkeypatch, ["--k=2", "--window=2", "--hash=identity", "--debug=hashes"], ">s1\nACG\n")

    assert "s1 h[0] 0000000000000001" in err.getvalue()
    capsys.readouterr()


def test_reads_gzipped_fasta_file(monkeypatch, capsys, tmp_path: Path) -> None:
    fasta_path = tmp_path / "seqs.fa.gz"
    with gzip.open(fasta_path, "wt") as f:
        f.write(">s1\nACGTA\n")

    run_cli(monkeypatch, [str(fasta_path), "--k=2", "--window=2", "--hash=identity"])

    assert capsys.readouterr().out.splitlines()[0] == "s1\t0\t0000000000000001"


@pytest.mark.parametrize(
    "args",
    [
        ["--window=1"],
        ["--k=1"],
        ["--k=33"],
        ["--hash=md5.3"],
        ["--hash=minimap2.seed"],
        ["--bogus"],
        ["one.fa", "two.fa"],
        ["--help"],
        ["--version"],
    ],
)
def test_bad_or_terminal_options_exit(monkeypatch, args) -> None:
    with pytest.raises(SystemExit):
        run_cli(monkeypatch, args)


def test_int_with_unit() -> None:
    assert minimisers.int_with_unit("12") == 12
    assert minimisers.int_with_unit("2K") == 2000
    assert minimisers.int_with_unit("1.5M") == 1500000
