#!/usr/bin/env python3
"""
ClearUp - Main Entry Point
Finds large files under a directory tree so they can be cleaned up.
"""

import sys
from pathlib import Path

import click
from colorama import init, Fore, Style

from .classifier import classify_cleanliness, CleanLevel
from .config import Config
from .events import ConsoleSink
from .models import InvalidInput
from .reporter import ReportGenerator
from .scanner import ScanEngine
from .utils import format_file_size, parse_size

# Initialize colorama for cross-platform colored output
init()

LEVEL_COLORS = {
    CleanLevel.SAFE: Fore.GREEN,
    CleanLevel.CAUTION: Fore.YELLOW,
    CleanLevel.DANGER: Fore.RED,
    CleanLevel.UNKNOWN: Fore.WHITE,
}


@click.group()
def cli():
    """ClearUp - find and clean up large files."""


@cli.command()
@click.argument('scan_path', type=click.Path(file_okay=False))
@click.option('--threshold', '-s', default='1GB', show_default=True,
              help='Minimum file size, e.g. 500MB or 2GB')
@click.option('--threads', '-t', default=8, show_default=True, type=int,
              help='Number of directory workers')
@click.option('--report/--no-report', default=False, help='Write a report of the matches')
@click.option('--format', 'report_format',
              type=click.Choice(['html', 'json', 'markdown', 'csv'], case_sensitive=False),
              default='html', help='Report format')
@click.option('--output', '-o', 'output_dir', default='reports', help='Output directory for reports')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def scan(scan_path, threshold, threads, report, report_format, output_dir, verbose):
    """
    Scan SCAN_PATH for files at or above the size threshold.
    """
    print(f"{Fore.CYAN}🧹 ClearUp - Large File Finder{Style.RESET_ALL}")
    print("-" * 50)

    try:
        config = Config(
            scan_path=scan_path,
            threshold_bytes=parse_size(threshold),
            max_workers=threads,
            output_dir=output_dir,
            report_format=report_format.lower(),
            verbose=verbose,
        )
        sink = ConsoleSink(verbose=verbose)
        engine = ScanEngine(sink=sink, max_workers=config.max_workers,
                            batch_interval=config.batch_interval, verbose=verbose)
        click.echo(f"{Fore.GREEN}🚀 Starting scan of: {scan_path} "
                   f"(>= {format_file_size(config.threshold_bytes)}){Style.RESET_ALL}")
        engine.start(config.scan_path, config.threshold_bytes)
    except InvalidInput as e:
        click.echo(f"{Fore.RED}❌ Error: {e}{Style.RESET_ALL}")
        sys.exit(1)

    try:
        # poll so Ctrl-C is delivered to the main thread
        while not engine.wait(0.2):
            pass
    except KeyboardInterrupt:
        engine.stop()
        engine.wait()
        click.echo(f"\n{Fore.YELLOW}⏹️  Scan interrupted by user.{Style.RESET_ALL}")

    matches = sorted(sink.matches, key=lambda m: m.size_bytes, reverse=True)
    summary = sink.summary
    for match in matches:
        advice = classify_cleanliness(match.path)
        click.echo(f"{LEVEL_COLORS[advice.level]}{format_file_size(match.size_bytes):>10}  "
                   f"{advice.level.label:<20}{Style.RESET_ALL} {match.path}")

    total = sum(m.size_bytes for m in matches)
    click.echo(f"{Fore.CYAN}📈 {summary.matches} of {summary.processed} files matched, "
               f"{format_file_size(total)} in total{Style.RESET_ALL}")
    if summary.cancelled:
        click.echo(f"{Fore.YELLOW}⚠️  Scan was cancelled; results are partial.{Style.RESET_ALL}")

    if report and matches:
        Path(output_dir).mkdir(parents=True, exist_ok=True)
        report_path = ReportGenerator(config).generate_report(matches)
        click.echo(f"{Fore.GREEN}✅ Report saved to: {report_path}{Style.RESET_ALL}")
    elif not matches:
        click.echo(f"{Fore.YELLOW}⚠️  No files above the threshold.{Style.RESET_ALL}")

    if summary.cancelled:
        sys.exit(1)


@cli.command()
@click.option('--host', default='127.0.0.1', show_default=True)
@click.option('--port', default=5000, show_default=True, type=int)
@click.option('--debug', is_flag=True)
def serve(host, port, debug):
    """Run the web API."""
    from .web_app import app

    print("🌐 Starting ClearUp Web API...")
    print(f"📊 Status: http://{host}:{port}/api/scan/status")
    app.run(host=host, port=port, debug=debug, threaded=True)


def main():
    cli(prog_name='clearup')


if __name__ == "__main__":
    main()
