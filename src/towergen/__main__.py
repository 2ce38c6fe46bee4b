#!/usr/bin/env python3
"""
Command line front end for towergen.

Usage:
    python -m towergen presets [--preset-file FILE]
    python -m towergen plan  [--preset NAME] [--param NAME=VALUE ...]
    python -m towergen build [--preset NAME] [--param NAME=VALUE ...] [--json]

Examples:
    # List the bundled presets
    python -m towergen presets

    # Show the segment plan of a small tower
    python -m towergen plan -p segment_count=3 -p tower_height=3 \
        -p twist_max=90 -p scale_min=1 -p scale_max=1

    # Build a star tower and print mesh statistics as JSON
    python -m towergen build --preset star_spire --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from towergen import __version__
from towergen.colors import to_hex
from towergen.logging_config import setup_logging
from towergen.params import ParameterSet
from towergen.planner import plan
from towergen.presets import list_presets, load_preset
from towergen.synthesizer import synthesize, synthesize_instances

logger = logging.getLogger("towergen.cli")


def parse_param_args(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Turn ``NAME=VALUE`` strings into a mapping (values stay strings)."""
    result: Dict[str, Any] = {}
    for item in pairs or []:
        if '=' not in item:
            raise ValueError(f"Invalid parameter format: {item} (expected NAME=VALUE)")
        name, value = item.split('=', 1)
        result[name.strip()] = value.strip()
    return result


def resolve_params(args) -> ParameterSet:
    preset_file = Path(args.preset_file) if args.preset_file else None
    if args.preset:
        base = load_preset(args.preset, preset_file)
    else:
        base = ParameterSet()

    overrides = parse_param_args(args.param)
    if args.shape:
        overrides['shape_kind'] = args.shape
    if args.seed is not None:
        overrides['seed'] = args.seed
    if overrides:
        base = base.replace(**overrides)
    return base.clamped()


def cmd_presets(args) -> int:
    preset_file = Path(args.preset_file) if args.preset_file else None
    names = list_presets(preset_file)
    if not names:
        print("No presets found.")
        return 0
    for name in names:
        print(name)
    return 0


def cmd_plan(args) -> int:
    params = resolve_params(args)
    entries = plan(params)
    if args.json:
        print(json.dumps([{
            'index': e.index,
            't': e.t,
            'offset': e.offset,
            'twist_degrees': e.twist_degrees,
            'scale': list(e.scale),
        } for e in entries], indent=2))
        return 0

    print(f"{'seg':>4} {'t':>7} {'offset':>9} {'twist':>9} {'scale':>7}")
    for e in entries:
        print(f"{e.index:>4} {e.t:7.3f} {e.offset:9.3f} {e.twist_degrees:9.2f} {e.scale_factor:7.3f}")
    return 0


def cmd_build(args) -> int:
    params = resolve_params(args)

    if args.instanced:
        tower = synthesize_instances(params)
        summary = {
            'shape': params.shape_kind.value,
            'instances': tower.instance_count,
            'profile_vertices': tower.profile.vertex_count,
            'profile_triangles': tower.profile.face_count,
            'bottom_color': to_hex(tuple(tower.colors[0])),
            'top_color': to_hex(tuple(tower.colors[-1])),
        }
    else:
        mesh = synthesize(params)
        lo, hi = mesh.bounding_box()
        summary = {
            'shape': params.shape_kind.value,
            'segments': mesh.segment_count,
            'vertices': mesh.vertex_count,
            'vertices_per_segment': mesh.vertices_per_segment,
            'triangles': mesh.triangle_count,
            'bbox_min': [round(float(v), 6) for v in lo],
            'bbox_max': [round(float(v), 6) for v in hi],
            'surface_area': round(mesh.surface_area(), 6),
            'bottom_color': to_hex(params.bottom_color),
            'top_color': to_hex(params.top_color),
        }

    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        for key, value in summary.items():
            print(f"{key:>20}: {value}")
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--preset', metavar='NAME', help='Start from a named preset')
    parser.add_argument('--preset-file', metavar='FILE', help='Read presets from FILE only')
    parser.add_argument('-p', '--param', action='append', metavar='NAME=VALUE',
                        help='Override a parameter (can be repeated)')
    parser.add_argument('--shape', help='Shape kind (box, roundedBox, circle, cylinder, polygon, star)')
    parser.add_argument('--seed', type=int, help='Seed for polygon irregularity')
    parser.add_argument('--json', action='store_true', help='Print JSON instead of text')


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='python -m towergen',
        description='Procedural twisted tower generator',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-file', metavar='FILE', help='Also write log records to FILE')

    subparsers = parser.add_subparsers(dest='action', required=True)

    presets_parser = subparsers.add_parser('presets', help='List available presets')
    presets_parser.add_argument('--preset-file', metavar='FILE', help='Read presets from FILE only')

    plan_parser = subparsers.add_parser('plan', help='Print the per-segment plan')
    _add_common(plan_parser)

    build_parser = subparsers.add_parser('build', help='Synthesize a tower and summarize it')
    _add_common(build_parser)
    build_parser.add_argument('--instanced', action='store_true',
                              help='Build per-segment instances instead of a merged mesh')

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file,
                  stream=sys.stderr)

    try:
        if args.action == 'presets':
            return cmd_presets(args)
        elif args.action == 'plan':
            return cmd_plan(args)
        elif args.action == 'build':
            return cmd_build(args)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
