"""
Command-line interface for inspecting and converting motion clips.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from kinemotion.config.settings import ExportFormat, Settings
from kinemotion.core.angle_solver import AngleSolver
from kinemotion.data.exporters import CSVExporter, InterchangeCodec, JSONExporter
from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import JOINT_ORDER, ROLL, PITCH, YAW
from kinemotion.errors import MotionError

console = Console()


def setup_logging(level: int = logging.INFO):
    """Configure logging for the command-line tools."""
    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        root_logger.addHandler(console_handler)

    logging.getLogger('kinemotion').setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="kinemotion",
        description="Inspect and convert skeletal motion clips",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show clip metadata and the angles of the first keyframe
  kinemotion info wave.xml

  # Export joint angles and positions to CSV
  kinemotion export wave.xml --format csv --output out/wave

  # Re-derive angles from the stored positions
  kinemotion solve wave.xml --output wave_solved.xml
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (YAML)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show clip metadata")
    info.add_argument("clip", type=Path, help="Interchange XML file")
    info.add_argument(
        "--keyframe", "-k",
        type=int,
        default=0,
        help="Keyframe whose angles are listed (default: 0)",
    )

    export = subparsers.add_parser("export", help="Convert a clip to another format")
    export.add_argument("clip", type=Path, help="Interchange XML file")
    export.add_argument(
        "--format", "-f",
        choices=[fmt.value for fmt in ExportFormat],
        default=None,
        help="Export format (default: from configuration)",
    )
    export.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output path (CSV: file name prefix)",
    )

    solve = subparsers.add_parser("solve", help="Re-derive joint angles from positions")
    solve.add_argument("clip", type=Path, help="Interchange XML file")
    solve.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output interchange XML file",
    )

    return parser


def _codec(settings: Settings) -> InterchangeCodec:
    return InterchangeCodec(
        legacy_pelvis=settings.export.xml_legacy_pelvis,
        pretty_print=settings.export.xml_pretty_print,
    )


def show_info(clip: MotionClip, keyframe: int = 0):
    """Print clip metadata and one keyframe's angles."""
    console.print(f"[bold cyan]Interval:[/bold cyan] {clip.interval_ms} ms")
    console.print(f"[bold cyan]Duration:[/bold cyan] {clip.duration:.3f} s")
    console.print(f"[bold cyan]Keyframes:[/bold cyan] {clip.keyframe_count}")

    pose = clip.get_keyframe(keyframe)
    if pose is None:
        console.print(f"[yellow]No keyframe {keyframe}[/yellow]")
        return

    table = Table(title=f"Keyframe {keyframe} (t={pose.time:.1f} ms)")
    table.add_column("Joint")
    table.add_column("Roll", justify="right")
    table.add_column("Pitch", justify="right")
    table.add_column("Yaw", justify="right")

    for kind, angles in zip(JOINT_ORDER, pose.angles):
        table.add_row(
            kind.value,
            f"{angles[ROLL]:.2f}",
            f"{angles[PITCH]:.2f}",
            f"{angles[YAW]:.2f}",
        )

    console.print(table)
    console.print(f"Pelvis pitch/yaw: {pose.pelvis_pitch:.2f} / {pose.pelvis_yaw:.2f}")


def export_clip(clip: MotionClip, fmt: ExportFormat, output: Path, settings: Settings) -> bool:
    """Write a clip in the requested format."""
    if fmt is ExportFormat.XML:
        return _codec(settings).export(clip, output)
    if fmt is ExportFormat.JSON:
        exporter = JSONExporter(
            pretty_print=settings.export.json_pretty_print,
            include_confidence=settings.export.json_include_confidence,
        )
        return exporter.export(clip, output)

    exporter = CSVExporter(
        delimiter=settings.export.csv_delimiter,
        include_header=settings.export.csv_include_header,
    )
    return exporter.export_all(clip, output.parent, output.stem)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.config:
            settings = Settings.from_yaml(args.config)
        else:
            settings = Settings()

        clip = _codec(settings).load(args.clip)

        if args.command == "info":
            show_info(clip, args.keyframe)

        elif args.command == "export":
            fmt = ExportFormat(args.format) if args.format else settings.export.default_format
            if not export_clip(clip, fmt, args.output, settings):
                console.print("[yellow]Nothing to export: clip has no keyframes[/yellow]")
                return 1
            console.print(f"[green]✓[/green] Exported {fmt.value.upper()}: {args.output}")

        elif args.command == "solve":
            clip.finalize(AngleSolver(settings.solver))
            _codec(settings).export(clip, args.output)
            console.print(f"[green]✓[/green] Solved {clip.keyframe_count} keyframes: {args.output}")

    except (MotionError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
