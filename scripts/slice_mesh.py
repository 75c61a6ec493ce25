#!/usr/bin/env python3
"""
Slice a mesh file with a plane and export the upper and lower hulls.

Usage:
    python scripts/slice_mesh.py --mesh model.obj --normal 0 0 1 --distance 0.5
    python scripts/slice_mesh.py --mesh model.glb --normal 1 0 0 --point 0 0 0 --format ply
    python scripts/slice_mesh.py --mesh model.stl --normal 0 1 0 --normal-mode smooth --output-dir out/ -v
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

import trimesh

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hull_slicer import MeshData, Plane, SliceConfig, slice_mesh
from hull_slicer.contracts import DEFAULT_EPSILON

logger = logging.getLogger("slice_mesh")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Slice a triangle mesh into upper and lower hulls along a plane.",
    )
    parser.add_argument(
        "--mesh", required=True,
        help="Path to input mesh file (OBJ, GLB, PLY, STL)",
    )
    parser.add_argument(
        "--normal", type=float, nargs=3, required=True, metavar=("NX", "NY", "NZ"),
        help="Plane normal; the upper hull is on the side it points to",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--distance", type=float, default=None,
        help="Signed plane offset along the normal (default: 0)",
    )
    group.add_argument(
        "--point", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"),
        help="A point on the plane (alternative to --distance)",
    )
    parser.add_argument(
        "--epsilon", type=float, default=DEFAULT_EPSILON,
        help=f"On-plane tolerance (default: {DEFAULT_EPSILON})",
    )
    parser.add_argument(
        "--normal-mode", default="flat", choices=["flat", "smooth"],
        help="Normal recomputation for the output hulls (default: flat)",
    )
    parser.add_argument(
        "--output-dir", default=None,
        help="Output directory (default: <input_dir>/<input_stem>_sliced/)",
    )
    parser.add_argument(
        "--format", default="obj", choices=["obj", "ply", "glb", "stl"],
        help="Export format for hull meshes (default: obj)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = os.path.abspath(args.mesh)
    if not os.path.isfile(input_path):
        parser.error(f"Input file not found: {input_path}")

    try:
        plane = (
            Plane.from_point_normal(args.point, args.normal, epsilon=args.epsilon)
            if args.point is not None
            else Plane(normal=args.normal, distance=args.distance or 0.0, epsilon=args.epsilon)
        )
    except ValueError as exc:
        parser.error(str(exc))

    loaded = trimesh.load(input_path, force="mesh", process=False)
    mesh = MeshData.from_trimesh(loaded)
    issues = mesh.validate()
    if issues:
        parser.error(f"Invalid mesh {input_path}: {'; '.join(issues)}")

    if args.output_dir:
        output_dir = os.path.abspath(args.output_dir)
    else:
        stem = Path(input_path).stem
        output_dir = os.path.join(os.path.dirname(input_path), f"{stem}_sliced")
    os.makedirs(output_dir, exist_ok=True)

    config = SliceConfig(epsilon=args.epsilon, normal_mode=args.normal_mode)
    logger.info("Slicing %s (%d triangles)", input_path, mesh.triangle_count)
    sliced = slice_mesh(mesh, plane, config)
    if sliced is None:
        print("Nothing to slice: mesh has no triangles.")
        return 1

    written = []
    for name, hull in (("upper", sliced.upper_hull), ("lower", sliced.lower_hull)):
        if hull is None:
            logger.info("No %s hull produced", name)
            continue
        path = os.path.join(output_dir, f"{name}.{args.format}")
        hull.to_trimesh().export(path)
        written.append(path)

    summary = sliced.to_dict()
    summary["input"] = input_path
    summary["plane"] = {
        "normal": plane.normal.tolist(),
        "distance": plane.distance,
        "epsilon": plane.epsilon,
    }
    summary["outputs"] = written
    summary_path = os.path.join(output_dir, "slice_summary.json")
    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=2)

    stats = sliced.stats
    print(f"Result: upper={stats['upper_triangles']} lower={stats['lower_triangles']} "
          f"split={stats['split_triangles']} cross={stats['cross_section_points']}")
    for path in written:
        print(f"  wrote {path}")
    print(f"Summary saved to {summary_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
