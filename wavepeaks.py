import os
import sys
import time
import argparse
import logging

try:
    from rich.console import Console
    from rich.table import Table
    from rich.panel import Panel
    from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn
    from rich.logging import RichHandler
    from rich import box
except ImportError:
    print("Error: The 'rich' library is required for the CLI but not installed.", file=sys.stderr)
    print("Please install it with: pip install wavepeaks[cli]", file=sys.stderr)
    sys.exit(1)

from wavepeakslib import __version__
from wavepeakslib.audio import AudioLoadError, load_source, format_duration, linear_to_db
from wavepeakslib.cache import PeakCache
from wavepeakslib.config import (
    ConfigError,
    default_config,
    load_preset,
    merge_configs,
    save_preset,
    validate_config,
)
from wavepeakslib.events import EventBus, WARMUP_LEVEL_COMPLETE, WARMUP_LEVEL_START
from wavepeakslib.models import ReductionMode, ViewportState
from wavepeakslib.viewport import max_position, peaks_opacity, query_window

console = Console()


def positive_int(value):
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return ivalue


def positive_float(value):
    fvalue = float(value)
    if fvalue <= 0:
        raise argparse.ArgumentTypeError("must be a positive number")
    return fvalue


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="wavepeaks - multi-resolution waveform peaks",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--version", action="version",
                        version=f"wavepeaks {__version__}")

    parser.add_argument("input", type=str,
                        help="Audio file (.wav, .aif, .aiff, .flac, .ogg); only channel 0 is read")

    # View
    parser.add_argument("--mode", type=str, choices=["peak", "rms"], default=None,
                        help="Reduction mode (default from preset, else peak)")
    parser.add_argument("--zoom", type=float, default=1.0,
                        help="Magnification factor (>= 1)")
    parser.add_argument("--position", type=float, default=0.0,
                        help="Left edge of the view in seconds")
    parser.add_argument("--width", type=positive_int, default=None,
                        help="Viewport width in pixels (default from preset, else 1000)")
    parser.add_argument("--samples-per-px", type=positive_float, default=None,
                        help="Query this exact resolution instead of deriving it from the view "
                             "(prints --width columns starting at --position)")

    # Cache
    parser.add_argument("--no-warmup", action="store_true",
                        help="Skip pre-populating the coarse cache levels")
    parser.add_argument("--rows", type=positive_int, default=20,
                        help="Max number of columns to print")

    # Presets
    parser.add_argument("--preset", type=str, default=None,
                        help="Load settings from a JSON preset")
    parser.add_argument("--save-preset", type=str, default=None,
                        help="Write the effective settings to a JSON preset and exit")

    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show library log output")

    args = parser.parse_args(argv)

    if args.zoom < 1.0:
        parser.error("--zoom must be >= 1")
    if args.position < 0.0:
        parser.error("--position must be >= 0")

    return args


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def build_config(args):
    config = default_config()
    if args.preset:
        config = merge_configs(config, load_preset(args.preset))
    cli_overrides = {
        "mode": args.mode,
        "width": args.width,
        "_source_file": args.input,
    }
    config = merge_configs(config, cli_overrides)
    validate_config(config)
    return config


# ---------------------------------------------------------------------------
# Rich console rendering (CLI-only, not in the library)
# ---------------------------------------------------------------------------

def run_warmup(cache: PeakCache, mode: ReductionMode) -> None:
    event_bus = EventBus()
    cache.event_bus = event_bus

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>5.1f}%"),
        console=console,
    ) as progress:
        task_id = progress.add_task("[cyan]Warming cache...", total=1.0)

        def on_level_start(index, samples_per_px, **data):
            progress.update(task_id,
                            description=f"[cyan]Warming {samples_per_px} samples/px...")

        def on_level_complete(index, samples_per_px, elapsed, **data):
            progress.console.print(
                f"  [green]-[/] level {index}: {samples_per_px} samples/px "
                f"[dim]({elapsed * 1000:.0f} ms)[/]")

        def on_progress(value):
            progress.update(task_id, completed=value)

        with event_bus.subscribed({
            WARMUP_LEVEL_START: on_level_start,
            WARMUP_LEVEL_COMPLETE: on_level_complete,
        }):
            cache.warmup(on_progress, mode)

    cache.event_bus = None


def print_values(values, window_start, samples_per_px, rows):
    table = Table(box=box.ROUNDED, title="Peak Values", title_justify="left")
    table.add_column("Column", justify="right", style="cyan")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Peak dBFS", justify="right", style="bold green")

    step = max(1, len(values) // rows) if values else 1
    for i in range(0, len(values), step):
        pair = values[i]
        peak = max(abs(pair.min), abs(pair.max))
        db = linear_to_db(peak)
        db_str = f"{db:.1f}" if db != float("-inf") else "-inf"
        table.add_row(str(window_start + i), f"{pair.min:+.4f}",
                      f"{pair.max:+.4f}", db_str)

    console.print(table)
    console.print(f"[dim]{len(values)} columns at {samples_per_px:g} samples/px, "
                  f"every {step}. column shown[/]")


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return 2

    if args.save_preset:
        save_preset(config, args.save_preset,
                    description=f"Saved by wavepeaks {__version__}")
        console.print(f"[green]Preset written to {args.save_preset}[/]")
        return 0

    if not os.path.isfile(args.input):
        console.print(f"[bold red]Error:[/] File not found: {args.input}")
        return 1
    try:
        source = load_source(args.input)
    except AudioLoadError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return 1

    mode = ReductionMode.parse(config["mode"])
    width = config["width"]

    # --- HEADER PANEL ---
    console.print(Panel.fit(
        f"[bold]wavepeaks[/] {source.filename}\n"
        f"Length: [cyan]{format_duration(source.total_samples, source.samplerate)}[/] "
        f"({source.total_samples:,} samples @ {source.samplerate} Hz, "
        f"{source.channels} ch, reading ch 0)\n"
        f"Mode: [cyan]{mode.value}[/] | Zoom: [cyan]{args.zoom:g}x[/] | "
        f"Width: [cyan]{width} px[/]",
        title="Configuration"
    ))

    cache = PeakCache(source.data, config=config)

    if not args.no_warmup:
        t0 = time.perf_counter()
        run_warmup(cache, mode)
        console.print(f"[dim]Warmup: {(time.perf_counter() - t0) * 1000:.0f} ms[/]")

    # --- QUERY ---
    duration = source.duration_sec
    position = min(args.position, max_position(duration, args.zoom))
    state = ViewportState(position=position, zoom=args.zoom, duration=duration,
                          viewport_offset=0.0, viewport_size=float(width))

    if args.samples_per_px is not None:
        samples_per_px = args.samples_per_px
        start = int(position * source.samplerate / samples_per_px)
        end = start + width - 1
    else:
        window = query_window(state, source.total_samples)
        if window is None:
            console.print("[yellow]Nothing to show (empty audio).[/]")
            return 0
        samples_per_px, start, end = window.samples_per_px, window.start, window.end

    t0 = time.perf_counter()
    values = cache.get_values(samples_per_px, start, end, mode)
    query_ms = (time.perf_counter() - t0) * 1000

    print_values(values, start, samples_per_px, args.rows)
    console.print(f"[dim]Query: {query_ms:.1f} ms | peak line opacity "
                  f"{peaks_opacity(samples_per_px):.2f} | cached levels: "
                  f"{', '.join(f'{lvl:g}' for lvl in cache.levels(mode)) or 'none'}[/]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
