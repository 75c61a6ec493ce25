from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import trimesh

REPO_ROOT = Path(__file__).resolve().parent.parent


def _run(args):
    cmd = [sys.executable, str(REPO_ROOT / "scripts" / "slice_mesh.py"), *args]
    return subprocess.run(cmd, capture_output=True, text=True)


def test_cli_slices_box_and_writes_hulls(box_mesh_file: str, tmp_path: Path):
    out_dir = tmp_path / "out"
    proc = _run([
        "--mesh", box_mesh_file,
        "--normal", "0", "0", "1",
        "--distance", "10",
        "--format", "stl",
        "--output-dir", str(out_dir),
    ])
    assert proc.returncode == 0, proc.stderr
    assert "Result: upper=" in proc.stdout

    upper = trimesh.load(str(out_dir / "upper.stl"), force="mesh")
    lower = trimesh.load(str(out_dir / "lower.stl"), force="mesh")
    assert upper.bounds[0][2] > 9.9
    assert lower.bounds[1][2] < 10.1

    summary = json.loads((out_dir / "slice_summary.json").read_text(encoding="utf-8"))
    assert summary["stats"]["split_triangles"] == 8
    assert len(summary["cross_section"]) == 16
    assert summary["plane"]["distance"] == 10.0


def test_cli_plane_missing_mesh_writes_single_hull(box_mesh_file: str, tmp_path: Path):
    out_dir = tmp_path / "out"
    proc = _run([
        "--mesh", box_mesh_file,
        "--normal", "1", "0", "0",
        "--point", "-500", "0", "0",
        "--format", "stl",
        "--output-dir", str(out_dir),
    ])
    assert proc.returncode == 0, proc.stderr
    assert (out_dir / "upper.stl").exists()
    assert not (out_dir / "lower.stl").exists()


def test_cli_rejects_missing_file(tmp_path: Path):
    proc = _run(["--mesh", str(tmp_path / "nope.stl"), "--normal", "0", "0", "1"])
    assert proc.returncode != 0
    assert "not found" in proc.stderr


def test_cli_rejects_zero_normal(box_mesh_file: str):
    proc = _run(["--mesh", box_mesh_file, "--normal", "0", "0", "0"])
    assert proc.returncode != 0
    assert "non-zero" in proc.stderr
