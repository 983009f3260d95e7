#!/usr/bin/env python3
"""
Command-line interface for CodeGlow - build-time syntax highlighting.
"""

import os
import sys
import argparse
import logging
from typing import List, Optional

from . import __version__
from .core import HighlightPostProcessor, ProcessingSummary
from .errors import CodeGlowError
from .highlighter import PygmentsHighlighter
from .settings import CodeGlowSettings


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """Set up logging configuration."""
    logger = logging.getLogger('CodeGlow')
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    return logger


def report_summary(logger: logging.Logger, summary: ProcessingSummary) -> None:
    """Log the run totals."""
    logger.info(f"Files scanned: {summary.files_scanned}")
    logger.info(f"Files modified: {summary.files_modified}")
    logger.info(f"Blocks highlighted: {summary.blocks_highlighted}")
    logger.info(f"Blocks skipped (unsupported language): {summary.blocks_skipped}")
    if summary.blocks_failed:
        logger.warning(f"Blocks failed: {summary.blocks_failed}")
    if summary.files_failed:
        logger.warning(f"Files failed: {summary.files_failed}")
    logger.info(f"Highlighting completed in {summary.elapsed:.6f} seconds.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='CodeGlow - build-time syntax highlighting for generated HTML')
    parser.add_argument('--output', type=str,
                        help='Directory holding the generated site (default: public)')
    parser.add_argument('--theme', type=str,
                        help='Pygments style for highlighted blocks (default: github-dark)')
    parser.add_argument('--languages', type=str,
                        help='Comma-separated list of language tags to highlight')
    parser.add_argument('--workers', type=int,
                        help='Number of worker processes')
    parser.add_argument('--strict', action='store_true', default=None,
                        help='Exit non-zero if any block or file fails')
    parser.add_argument('--log-file', type=str,
                        help='Also write a detailed log to this file')
    parser.add_argument('--verbose', action='store_true', default=None,
                        help='Show debug output')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Handle init command
    if args.init:
        settings_loader = CodeGlowSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")
        return

    # Load settings from configuration file
    settings_loader = CodeGlowSettings()
    settings_loader.load_settings()

    # Command line arguments take precedence
    args_dict = {k: v for k, v in vars(args).items() if v is not None and k != 'init'}
    final_settings = settings_loader.merge_with_args(args_dict)

    output_dir = os.path.expanduser(final_settings['output'])
    logger = setup_logging(final_settings['verbose'], final_settings['log_file'])

    try:
        highlighter = PygmentsHighlighter(final_settings['theme'])
        processor = HighlightPostProcessor(
            highlighter=highlighter,
            theme=final_settings['theme'],
            languages=final_settings['languages'],
            workers=final_settings['workers'],
        )

        logger.info(f"Highlighting code blocks with {highlighter.name}...")
        logger.info(f"Theme: {processor.theme}")
        logger.info(f"Languages: {', '.join(sorted(processor.languages))}")

        summary = processor.run(output_dir)
    except CodeGlowError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    report_summary(logger, summary)

    if final_settings['strict'] and summary.has_failures:
        print("Error: highlighting failures in strict mode", file=sys.stderr)
        sys.exit(1)

    logger.info("✓ Code highlighting complete!")


if __name__ == '__main__':
    main()
