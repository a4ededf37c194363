"""
colorgen command line.

    colorgen image wallpaper.png --mode dark
    colorgen color "#6750a4" --mode all --hash

Prints the scheme as JSON on stdout: a flat role -> color map for a single
mode, or {"seed", "light", "dark", "amoled"} for --mode all.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from colorgen import __version__
from colorgen.config import config
from colorgen.services import orchestrator
from colorgen.services.colors.errors import ColorGenError
from colorgen.services.colors.scheme import format_color
from colorgen.utils.logging import get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="colorgen",
        description="Generate Material Design 3 color schemes from an image or a seed color",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--mode", choices=config.SUPPORTED_MODES + ["all"], default="dark",
                        help="Scheme mode to print (default: dark)")
    common.add_argument("--variant", choices=config.SUPPORTED_VARIANTS, default=config.DEFAULT_VARIANT,
                        help="Tertiary palette variant")
    common.add_argument("--no-content", dest="content", action="store_const", const=False, default=None,
                        help="Use fixed tonal-spot chroma instead of the seed's own "
                             "(default: COLORGEN_CONTENT_PALETTES)")
    common.add_argument("--no-adjust", dest="adjust_surfaces", action="store_const", const=False, default=None,
                        help="Skip surface dimming/brightening (default: COLORGEN_SURFACE_ADJUST)")
    common.add_argument("--format", dest="fmt", choices=["hex", "rgb"], default="hex",
                        help="Color output format")
    common.add_argument("--hash", dest="hash_prefix", action="store_true",
                        help="Keep the leading # on hex colors")
    common.add_argument("--log-level", default=None, help="Log level for stderr diagnostics")

    subparsers = parser.add_subparsers(dest="command", required=True)

    image = subparsers.add_parser("image", parents=[common], help="Derive the seed from an image")
    image.add_argument("path", type=Path, help="Image file")
    image.add_argument("--max-colors", type=int, default=config.MAX_COLORS,
                       help="Quantizer color budget (1-256)")
    image.add_argument("--quantizer", choices=config.SUPPORTED_QUANTIZERS, default=config.QUANTIZER,
                       help="Quantization method")

    color = subparsers.add_parser("color", parents=[common], help="Use an explicit seed color")
    color.add_argument("hex", help="Seed color, e.g. 6750a4 or #6750a4")

    return parser


def render(result: orchestrator.SchemeResult, mode: str, fmt: str = "hex",
           hash_prefix: bool = False) -> Dict[str, Any]:
    """Scheme as a JSON-ready dict."""
    scheme = result.scheme
    if mode != "all":
        if not config.validate_mode(mode):
            raise ValueError(f"Unknown mode: {mode}. Supported: {', '.join(config.SUPPORTED_MODES)}, all")
        return scheme.to_dict(fmt, hash_prefix, modes=[mode])[mode]

    output: Dict[str, Any] = {"seed": format_color(result.seed, fmt, hash_prefix)}
    output.update(scheme.to_dict(fmt, hash_prefix))
    return output


def run(args: argparse.Namespace) -> orchestrator.SchemeResult:
    if args.command == "image":
        file_bytes = args.path.read_bytes()
        return orchestrator.scheme_from_image_bytes(
            file_bytes,
            variant=args.variant,
            content=args.content,
            adjust_surfaces=args.adjust_surfaces,
            max_colors=args.max_colors,
            quantizer=args.quantizer,
        )

    hex_value = args.hex if args.hex.startswith("#") else f"#{args.hex}"
    return orchestrator.scheme_from_color(
        hex_value,
        variant=args.variant,
        content=args.content,
        adjust_surfaces=args.adjust_surfaces,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    get_logger(args.log_level or config.LOG_LEVEL)

    try:
        result = run(args)
    except (ColorGenError, ValueError, OSError) as e:
        print(f"colorgen: {e}", file=sys.stderr)
        return 1

    json.dump(render(result, args.mode, args.fmt, args.hash_prefix), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
