#!/usr/bin/env python3
"""
Endpoint Lister v1.0
====================
Statically lists the HTTP endpoints defined by a folder of Hyperlambda files.

Features:
  - Deterministic, sorted pre-order folder walk
  - Route and verb from "<route>.<verb>.hl" file names
  - Arguments, authorization roles and description per endpoint
  - CRUD / raw SQL / statistics endpoint classification
  - JSON manifest output
  - Timeout and Ctrl+C cancellation

Usage: python main.py [OPTIONS] <root>
"""

import sys
import json
import argparse
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from pathlib import Path
from typing import List, Dict, Any, Optional

# =============================================================================
# VERSION
# =============================================================================
__version__ = "1.0.0"

# =============================================================================
# DEPENDENCY CHECK
# =============================================================================
REQUIRED = {"rich": "rich>=13.7.0", "dotenv": "python-dotenv>=1.0.0", "yaml": "pyyaml>=6.0"}

def check_deps():
    missing = []
    for mod, pkg in REQUIRED.items():
        try:
            __import__(mod)
        except ImportError:
            missing.append(pkg)
    if missing:
        print(f"\nMissing: pip install {' '.join(missing)}\n")
        sys.exit(1)

check_deps()

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
from dotenv import load_dotenv

from endpoint_discovery import (
    DiscoveryConfig,
    DiscoveryError,
    EndpointDescriptor,
    EndpointKind,
    EndpointScanner,
)

console = Console()

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure structured logging for discovery."""
    logger = logging.getLogger("endpoint_discovery")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)  # Only warnings and errors to console
    console_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            datefmt='%Y-%m-%dT%H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger

# =============================================================================
# OUTPUT FORMATTERS
# =============================================================================
KIND_COLORS = {
    EndpointKind.CRUD_CREATE: "green",
    EndpointKind.CRUD_READ: "cyan",
    EndpointKind.CRUD_UPDATE: "yellow",
    EndpointKind.CRUD_DELETE: "red",
    EndpointKind.CRUD_COUNT: "blue",
    EndpointKind.CRUD_SQL: "magenta",
    EndpointKind.CRUD_STATISTICS: "bold magenta",
}

def fmt_kind(k: Optional[EndpointKind]) -> str:
    if k is None:
        return "[dim]custom[/dim]"
    color = KIND_COLORS.get(k, "white")
    return f"[{color}]{k.value}[/{color}]"

def fmt_auth(auth: Optional[List[str]]) -> str:
    if not auth:
        return "[red]public[/red]"
    return f"[green]{', '.join(auth)}[/green]"

def make_table(endpoints: List[EndpointDescriptor]) -> Table:
    t = Table(title=" Discovered Endpoints", box=box.ROUNDED, header_style="bold magenta")
    t.add_column("#", style="dim", width=4)
    t.add_column("Verb", width=8)
    t.add_column("Path", max_width=50)
    t.add_column("Kind", width=16)
    t.add_column("Auth", max_width=24)
    t.add_column("Input", style="dim", max_width=30)

    for i, ep in enumerate(endpoints[:200], 1):
        path = ep.path[:47] + "..." if len(ep.path) > 50 else ep.path
        args = ", ".join(f.name for f in ep.input) if ep.input else ""
        t.add_row(str(i), ep.verb.value.upper(), path, fmt_kind(ep.kind), fmt_auth(ep.auth), args)

    if len(endpoints) > 200:
        t.add_row("...", "...", f"... +{len(endpoints) - 200} more", "", "", "")

    return t

def make_summary(s: Dict[str, Any]) -> Panel:
    txt = f"""
[bold cyan] Discovery Summary[/bold cyan]

[bold]Total Endpoints:[/bold] {s['total']}
[bold]Files Skipped:[/bold] {s['files_skipped']} | Folders Skipped: {s['folders_skipped']}

[bold cyan]By Verb:[/bold cyan]
""" + "\n".join([f"   {verb.upper()}: {count}" for verb, count in s['by_verb'].items()])

    txt += f"""

[bold cyan]Authorization:[/bold cyan]
   Secured: {s['secured']}
   Public: {s['public']}

[bold cyan]By Kind:[/bold cyan]
""" + "\n".join([f"   {k}: {v}" for k, v in sorted(s['by_kind'].items(), key=lambda x: -x[1])])

    return Panel(txt, title=" Results", border_style="cyan")

# =============================================================================
# MAIN CLI
# =============================================================================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"Endpoint Lister v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py ./files                        # List endpoints below ./files/modules
  python main.py ./files --start-folder ""      # Walk the root itself
  python main.py ./files -o manifest.json       # Save the manifest
  python main.py ./files --json                 # Print the manifest as JSON
  python main.py ./files --config discovery.yaml
        """
    )

    parser.add_argument("root", nargs="?", help="Root folder routes are relative to")

    scan_group = parser.add_argument_group("Scan Options")
    scan_group.add_argument("--start-folder", metavar="DIR",
                            help="Folder below the root to walk (default: modules)")
    scan_group.add_argument("--namespace", metavar="NAME",
                            help="Leading route segment (default: magic)")
    scan_group.add_argument("--timeout", type=float, metavar="SECONDS",
                            help="Abort discovery after this many seconds")
    scan_group.add_argument("--config", metavar="FILE",
                            help="Configuration file (JSON/YAML)")

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument("-o", "--output", help="Write the JSON manifest to FILE")
    output_group.add_argument("--json", action="store_true", help="Print the JSON manifest to stdout")

    parser.add_argument("--log-file", metavar="FILE", help="Write a debug log to FILE")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    return parser

def build_config(args: argparse.Namespace) -> DiscoveryConfig:
    if args.config:
        config = DiscoveryConfig.from_file(args.config)
    else:
        config = DiscoveryConfig.from_env()

    # Override with CLI args
    if args.root:
        config.root_folder = args.root
    if args.start_folder is not None:
        config.start_folder = args.start_folder
    if args.namespace is not None:
        config.namespace = args.namespace
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    return config

def run_scan(scanner: EndpointScanner, cancel: threading.Event,
             stats: Dict[str, int], poll: float = 0.2) -> List[EndpointDescriptor]:
    """
    Run list_endpoints() on a worker thread.

    The main thread only waits, so Ctrl+C lands here while the walk is
    still in progress and sets the cancel event before propagating.
    """
    with ThreadPoolExecutor(max_workers=1) as pool:
        try:
            future = pool.submit(scanner.list_endpoints, cancel, stats)
            while True:
                try:
                    return future.result(timeout=poll)
                except FutureTimeout:
                    continue
        except KeyboardInterrupt:
            cancel.set()
            raise

def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "INFO", args.log_file)
    quiet = args.quiet or args.json

    if not quiet:
        console.print(Panel.fit(
            f"[bold cyan] Endpoint Lister v{__version__}[/bold cyan]\n"
            "[dim]Hyperlambda | CRUD | SQL | Statistics[/dim]",
            border_style="cyan"
        ))

    cancel = threading.Event()
    stats: Dict[str, int] = {}
    try:
        config = build_config(args)
        scanner = EndpointScanner(config)
        if not quiet:
            console.print(f"\n[bold cyan] Scanning {Path(config.root_folder) / config.start_folder}...[/bold cyan]")

        endpoints = run_scan(scanner, cancel, stats)
        manifest = [ep.to_dict() for ep in endpoints]

        if args.json:
            print(json.dumps(manifest, indent=2))
        elif not quiet:
            console.print(f"\n[green] Found {len(endpoints)} endpoints[/green]")
            console.print(make_summary(scanner.summary(endpoints, stats)))
            if endpoints:
                console.print(make_table(endpoints))

        if args.output:
            with open(args.output, 'w') as f:
                json.dump(manifest, f, indent=2)
            if not quiet:
                console.print(f"\n[green] Saved: {args.output}[/green]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except (DiscoveryError, OSError, ValueError) as e:
        console.print(f"\n[red]Error: {e}[/red]")
        if args.verbose:
            console.print_exception()
        return 1

    if not quiet:
        console.print("\n[bold green] Complete![/bold green]")
    return 0

def run():
    sys.exit(main())

if __name__ == "__main__":
    run()
