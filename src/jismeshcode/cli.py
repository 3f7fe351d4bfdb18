"""
Command-line interface for JIS mesh code conversions.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from .coordinate import BoundingBox, Coordinate
from .errors import MeshCodeError
from .hierarchy import children, parent, to_level
from .levels import MeshLevel
from .meshcode import MeshCode
from .neighbors import Direction, neighbor
from .range import mesh_codes_in_bbox

logger = logging.getLogger(__name__)


def _level_arg(value: str) -> MeshLevel:
    try:
        return MeshLevel.from_name(value)
    except ValueError:
        choices = ", ".join(level.label for level in MeshLevel)
        raise argparse.ArgumentTypeError(f"unknown level {value!r} (choose from {choices})")


def _bbox_arg(value: str) -> tuple[float, ...]:
    try:
        bbox = tuple(map(float, value.split(",")))
    except ValueError:
        raise argparse.ArgumentTypeError(f"bbox values must be numbers: {value!r}")
    if len(bbox) != 4:
        raise argparse.ArgumentTypeError("bbox must be min_lon,min_lat,max_lon,max_lat")
    return bbox


def _cell_info(code: MeshCode) -> dict[str, Any]:
    bounds = code.bounds()
    return {
        "code": code.as_string(),
        "level": code.level.label,
        "bounds": {
            "min_lat": bounds.min_lat,
            "min_lon": bounds.min_lon,
            "max_lat": bounds.max_lat,
            "max_lon": bounds.max_lon,
        },
        "center": code.center().to_dict(),
    }


def _emit(args, lines: list[str], payload: Any):
    if args.output_format == "json":
        print(json.dumps(payload, indent=2))
    else:
        for line in lines:
            print(line)


def cmd_encode(args):
    """Encode a coordinate at one or all levels."""
    coord = Coordinate(args.lat, args.lon)
    levels = list(MeshLevel) if args.all else [args.level]
    codes = [MeshCode.from_coordinate(coord, level) for level in levels]
    _emit(
        args,
        [f"{code.level.label:<8} {code}" for code in codes],
        {"lat": coord.lat, "lon": coord.lon, "codes": {c.level.label: str(c) for c in codes}},
    )


def cmd_decode(args):
    """Show the bounds and center of a code."""
    code = MeshCode.from_string(args.code, level=args.level)
    info = _cell_info(code)
    b = info["bounds"]
    c = info["center"]
    _emit(
        args,
        [
            f"Code:   {info['code']} ({info['level']}, ~{code.level.approximate_size_meters():.0f}m)",
            f"SW:     ({b['min_lat']:.6f}, {b['min_lon']:.6f})",
            f"NE:     ({b['max_lat']:.6f}, {b['max_lon']:.6f})",
            f"Center: ({c['lat']:.6f}, {c['lon']:.6f})",
        ],
        info,
    )


def cmd_parent(args):
    code = MeshCode.from_string(args.code, level=args.level)
    result = parent(code)
    if result is None:
        _emit(args, [f"{code} is a first-level code and has no parent"], {"parent": None})
    else:
        _emit(args, [str(result)], {"parent": str(result)})


def cmd_children(args):
    code = MeshCode.from_string(args.code, level=args.level)
    result = children(code, level=args.child_level)
    _emit(args, [str(c) for c in result], {"code": str(code), "children": [str(c) for c in result]})


def cmd_convert(args):
    """Convert a code to a coarser level."""
    code = MeshCode.from_string(args.code, level=args.code_level)
    result = to_level(code, args.level)
    _emit(args, [str(result)], {"code": str(code), "level": args.level.label, "result": str(result)})


def cmd_neighbors(args):
    code = MeshCode.from_string(args.code, level=args.level)
    found = {d.name.lower(): neighbor(code, d) for d in Direction}
    _emit(
        args,
        [f"{name:<11} {adj if adj is not None else '-'}" for name, adj in found.items()],
        {name: (str(adj) if adj is not None else None) for name, adj in found.items()},
    )


def cmd_bbox(args):
    """List the codes covering a bounding box."""
    min_lon, min_lat, max_lon, max_lat = args.bbox
    bbox = BoundingBox.from_bounds(min_lon, min_lat, max_lon, max_lat)
    codes = mesh_codes_in_bbox(bbox, args.level)
    total = len(codes)
    logger.info("bbox %s covers %d %s cells", bbox.as_tuple(), total, args.level.label)

    shown = []
    for code in codes:
        if args.limit is not None and len(shown) >= args.limit:
            break
        shown.append(str(code))

    lines = list(shown)
    if len(shown) < total:
        lines.append(f"... ({total - len(shown)} more, {total} total)")
    _emit(args, lines, {"level": args.level.label, "total": total, "codes": shown})


def _add_common(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--output-format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )


def build_parser() -> argparse.ArgumentParser:
    default_level = os.environ.get("JISMESHCODE_LEVEL", "third")

    parser = argparse.ArgumentParser(
        prog="jismeshcode",
        description="Convert between coordinates and JIS X 0410 mesh codes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s encode 35.6812 139.7671 --level third
  %(prog)s decode 53394611
  %(prog)s bbox 139.70,35.60,139.80,35.70 --level second
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    encode_parser = subparsers.add_parser("encode", help="Encode a coordinate")
    encode_parser.add_argument("lat", type=float, help="Latitude in degrees")
    encode_parser.add_argument("lon", type=float, help="Longitude in degrees")
    encode_parser.add_argument(
        "--level",
        "-l",
        type=_level_arg,
        default=default_level,
        help=f"Mesh level (default: {default_level}, env JISMESHCODE_LEVEL)",
    )
    encode_parser.add_argument(
        "--all",
        "-a",
        action="store_true",
        help="Encode at every level",
    )
    _add_common(encode_parser)
    encode_parser.set_defaults(func=cmd_encode)

    # Commands taking a single code; --level disambiguates 10-digit codes
    for name, func, help_text in (
        ("decode", cmd_decode, "Show the bounds and center of a code"),
        ("parent", cmd_parent, "Show the enclosing code one level up"),
        ("children", cmd_children, "List the codes one level down"),
        ("neighbors", cmd_neighbors, "List the 8 adjacent codes"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("code", help="Mesh code digits")
        sub.add_argument(
            "--level",
            "-l",
            type=_level_arg,
            default=None,
            help="Level of the code, for 10-digit quarter/fifth codes",
        )
        _add_common(sub)
        sub.set_defaults(func=func)

    children_parser = subparsers.choices["children"]
    children_parser.add_argument(
        "--child-level",
        type=_level_arg,
        default=None,
        help="Child level, e.g. fifth for a third-level code",
    )

    convert_parser = subparsers.add_parser("convert", help="Convert a code to a coarser level")
    convert_parser.add_argument("code", help="Mesh code digits")
    convert_parser.add_argument(
        "--level",
        "-l",
        type=_level_arg,
        required=True,
        help="Target level",
    )
    convert_parser.add_argument(
        "--code-level",
        type=_level_arg,
        default=None,
        help="Level of the code, for 10-digit quarter/fifth codes",
    )
    _add_common(convert_parser)
    convert_parser.set_defaults(func=cmd_convert)

    bbox_parser = subparsers.add_parser("bbox", help="List the codes covering a bounding box")
    bbox_parser.add_argument(
        "bbox",
        type=_bbox_arg,
        help="Bounding box: min_lon,min_lat,max_lon,max_lat",
    )
    bbox_parser.add_argument(
        "--level",
        "-l",
        type=_level_arg,
        default=default_level,
        help=f"Mesh level (default: {default_level})",
    )
    bbox_parser.add_argument(
        "--limit",
        type=int,
        help="Show at most this many codes",
    )
    _add_common(bbox_parser)
    bbox_parser.set_defaults(func=cmd_bbox)

    return parser


def main(argv: Optional[list[str]] = None):
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,  # Default for external libs
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("jismeshcode").setLevel(logging.DEBUG if args.verbose else logging.INFO)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except MeshCodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
