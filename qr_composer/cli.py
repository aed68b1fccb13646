"""CLI entry point for QR Composer."""

import argparse
import json
import logging
import os
import sys

from qr_composer import DEFAULT_MARGIN, DEFAULT_WIDTH, __version__


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qr-composer",
        description="Render QR codes for invitations and albums, with an optional logo or monogram.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plain code
  python -m qr_composer "https://example.com/invitation/abc123" -o invite.png

  # Monogram in the middle (error correction H for extra headroom)
  python -m qr_composer "https://example.com/invitation/abc123" \\
    --monogram "M&E" --ecl H -o invite.png

  # Logo from a URL, fall back to a plain code if it cannot be fetched
  python -m qr_composer --album 5f2c --logo https://example.com/logo.png \\
    --fallback-plain -o album.png

  # One code per line of urls.txt, written into out/
  python -m qr_composer --batch urls.txt -o out/
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    # Payload
    target = parser.add_mutually_exclusive_group()
    target.add_argument("url", nargs="?", help="URL or text to encode")
    target.add_argument("--invitation", metavar="ID", help="Encode the invitation page URL for ID")
    target.add_argument("--album", metavar="ID", help="Encode the album page URL for ID")
    target.add_argument("--batch", metavar="FILE", help="Render one plain code per line of FILE")
    target.add_argument(
        "--options", action="store_true", help="Print the supported option presets as JSON and exit"
    )

    # Output
    parser.add_argument(
        "--output", "-o",
        default="qr_code.png",
        help="Output PNG path, or directory with --batch (default: qr_code.png)",
    )
    parser.add_argument(
        "--data-url",
        action="store_true",
        help="Print a data:image/png;base64 URL instead of writing a file",
    )

    # Base code
    parser.add_argument("--size", type=int, default=DEFAULT_WIDTH, help=f"Width in pixels. Default: {DEFAULT_WIDTH}")
    parser.add_argument(
        "--margin", type=int, default=DEFAULT_MARGIN, help=f"Quiet zone in modules. Default: {DEFAULT_MARGIN}"
    )
    parser.add_argument("--ecl", default="M", choices=["L", "M", "Q", "H"], help="Error correction level. Default: M")
    parser.add_argument("--dark", default="#000000", help="Module colour. Default: #000000")
    parser.add_argument("--light", default="#FFFFFF", help="Background colour. Default: #FFFFFF")

    # Centre content
    center = parser.add_mutually_exclusive_group()
    center.add_argument("--logo", metavar="SOURCE", help="Logo path, /uploads/logos/ reference, or http(s) URL")
    center.add_argument("--monogram", metavar="TEXT", help='Monogram text, e.g. "M&E"')

    parser.add_argument("--logo-size", type=float, default=0.20, help="Logo size as a fraction of width. Default: 0.20")
    parser.add_argument(
        "--logo-margin", type=float, default=0.05, help="Matte margin as a fraction of width. Default: 0.05"
    )
    parser.add_argument("--logo-background", default="#FFFFFF", help="Matte colour. Default: #FFFFFF")

    parser.add_argument(
        "--font-size", type=float, default=0.15, help="Monogram font size as a fraction of width. Default: 0.15"
    )
    parser.add_argument("--font-family", default="Arial, sans-serif", help="Font families, CSS style")
    parser.add_argument("--text-color", default="#000000", help="Monogram text colour. Default: #000000")
    parser.add_argument("--monogram-background", default="#FFFFFF", help="Badge colour. Default: #FFFFFF")
    parser.add_argument("--corner-radius", type=int, default=8, help="Badge corner radius in pixels. Default: 8")
    parser.add_argument(
        "--padding", type=float, default=0.05, help="Badge padding as a fraction of width. Default: 0.05"
    )

    # Flags
    parser.add_argument("--verify", action="store_true", help="Check the result decodes (needs pyzbar)")
    parser.add_argument(
        "--fallback-plain",
        action="store_true",
        help="Render a plain code if the logo or monogram cannot be applied",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    return parser


def _center_from_args(args, settings):
    from qr_composer.options import LogoCenter, MonogramCenter, NoCenter

    if args.logo:
        return LogoCenter(
            image_source=settings.resolve_logo_reference(args.logo),
            target_size_fraction=args.logo_size,
            margin_fraction=args.logo_margin,
            background_color=args.logo_background,
        )
    if args.monogram is not None:
        return MonogramCenter(
            text=args.monogram,
            font_size_fraction=args.font_size,
            font_family=args.font_family,
            text_color=args.text_color,
            background_color=args.monogram_background,
            corner_radius=args.corner_radius,
            padding_fraction=args.padding,
        )
    return NoCenter()


def _run_batch(args, options) -> int:
    from qr_composer.composer import render_batch

    with open(args.batch, encoding="utf-8") as f:
        urls = [line.strip() for line in f if line.strip()]

    print(f"Rendering {len(urls)} QR codes into: {args.output}")
    items = render_batch(urls, options)
    os.makedirs(args.output, exist_ok=True)
    for index, item in enumerate(items, start=1):
        if item.success:
            path = os.path.join(args.output, f"qr_{index:03d}.png")
            with open(path, "wb") as f:
                f.write(item.png)
            print(f"  ✓ {item.url} -> {path}")
        else:
            print(f"  ✗ {item.url}: {item.error}", file=sys.stderr)

    succeeded = sum(item.success for item in items)
    print(f"\nGenerated {succeeded} of {len(items)} QR codes")
    return 0 if succeeded == len(items) else 1


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Lazy imports for faster --help
    from qr_composer.composer import render_qr
    from qr_composer.config import Settings
    from qr_composer.errors import InvalidOptionsError, LogoError, QRComposerError
    from qr_composer.image_utils import VerifyResult, to_data_url, verify_qr_scannable
    from qr_composer.logo_source import get_logo_source
    from qr_composer.options import NoCenter, RenderOptions, options_catalogue

    if args.options:
        print(json.dumps(options_catalogue(), indent=2))
        return 0

    try:
        settings = Settings.from_env()
        options = RenderOptions(
            width=args.size,
            margin=args.margin,
            dark_color=args.dark,
            light_color=args.light,
            error_correction=args.ecl,
        )

        if args.batch:
            return _run_batch(args, options)

        if args.invitation:
            url = settings.invitation_url(args.invitation)
        elif args.album:
            url = settings.album_url(args.album)
        elif args.url:
            url = args.url
        else:
            parser.error("a URL, --invitation, --album, --batch or --options is required")

        center = _center_from_args(args, settings)

        def logo_loader(source: str) -> bytes:
            return get_logo_source(source, timeout=settings.fetch_timeout).read()

        try:
            png = render_qr(url, options, center.center_type, center, logo_loader=logo_loader)
        except (LogoError, InvalidOptionsError) as e:
            if not args.fallback_plain or isinstance(center, NoCenter):
                raise
            print(f"  ⚠️  {center.center_type} could not be applied ({e}); using a plain code.", file=sys.stderr)
            png = render_qr(url, options, "none", NoCenter())

        if args.data_url:
            print(to_data_url(png))
        else:
            os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
            with open(args.output, "wb") as f:
                f.write(png)
            print(f"✓ Saved {args.size}px QR code for {url} to: {args.output}")

        if args.verify:
            result, decoded = verify_qr_scannable(png)
            if result == VerifyResult.SCANNABLE:
                print(f"  ✓ QR code is SCANNABLE! Decoded: {decoded}")
            elif result == VerifyResult.SKIPPED:
                print("  ⊘ Verification skipped (pyzbar not installed)")
                print("    Install with: pip install pyzbar")
            else:
                print("  ⚠️  WARNING: QR code may not be scannable.")
                print("     Try --ecl H or a smaller --logo-size / --font-size")
                return 1

        return 0

    except (QRComposerError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
