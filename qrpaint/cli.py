"""qrpaint CLI: generate styled QR codes or serve them over HTTP."""

import argparse
import sys
from pathlib import Path

from qrpaint.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def _load_assets(args):
    from qrpaint.logo import LogoAssets

    if args.logo_file:
        # One custom file serves as both variants
        return LogoAssets.from_files(args.logo_file, args.logo_file)
    return None


def cmd_generate(args):
    """Generate a QR code PNG."""
    from qrpaint.pipeline import Options, qrcode

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    options = Options(
        add_logo=args.logo,
        add_gradient=args.gradient,
        add_transparency=True if args.transparent else None,
    )
    result = qrcode(args.text, options, assets=_load_assets(args), image_size=args.size)
    if not result.ok:
        print(f"Error: {result.error.message}", file=sys.stderr)
        sys.exit(1)

    output.write_bytes(result.image)
    print(f"Generated: {output} ({args.size}x{args.size}, {len(result.image)} bytes)")


def cmd_serve(args):
    """Start the HTTP server."""
    from qrpaint.service import create_app

    app = create_app(assets=_load_assets(args), image_size=args.size)
    print(f"Starting QR server on http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


def build_parser() -> argparse.ArgumentParser:
    from qrpaint.pipeline import IMAGE_SIZE_IN_PIXELS

    parser = argparse.ArgumentParser(prog="qrpaint", description="Styled QR code generator")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="JSON log lines on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    p_gen = subparsers.add_parser("generate", help="Generate a QR code")
    p_gen.add_argument("text", help="Text or URL to encode")
    p_gen.add_argument("-o", "--output", default="output/qr.png", help="Output file path")
    p_gen.add_argument("--logo", action="store_true", help="Overlay the logo at the center")
    p_gen.add_argument("--gradient", action="store_true", help="Recolor modules with the gradient")
    p_gen.add_argument("--transparent", action="store_true", help="Make the white background transparent")
    p_gen.add_argument("--size", type=int, default=IMAGE_SIZE_IN_PIXELS, help="Image side in pixels")
    p_gen.add_argument("--logo-file", default=None, help="Custom logo image instead of the built-in one")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Start the HTTP server")
    p_serve.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    p_serve.add_argument("--port", type=int, default=8080, help="Port to listen on")
    p_serve.add_argument("--size", type=int, default=IMAGE_SIZE_IN_PIXELS, help="Image side in pixels")
    p_serve.add_argument("--logo-file", default=None, help="Custom logo image instead of the built-in one")
    p_serve.add_argument("--debug", action="store_true", help="Enable debug mode")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else "INFO",
                  log_file=args.log_file, json_format=args.json_logs)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)
    commands = {
        "generate": cmd_generate,
        "serve": cmd_serve,
    }
    commands[args.command](args)
    audit("cli.done", logger=log, command=args.command)


if __name__ == "__main__":
    main()
