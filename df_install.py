#!/usr/bin/env python3
"""
deepflow installer - Install deepflow commands, skills and agents for Claude Code.

Run without arguments to install or update deepflow globally (~/.claude) or in
the current project (./.claude). Run with --uninstall to remove it again.
"""

import argparse
import os
import sys

from deepflow import __version__
from deepflow.config import DeepflowConfig
from deepflow.exceptions import (
    AssetNotFoundError,
    DeepflowError,
    FileOperationError,
)
from deepflow.formatting import colored_status
from deepflow.installer import Installer


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog='deepflow',
        description='deepflow installer - spec-driven development commands for Claude Code',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Install, or update an existing installation
  %(prog)s

  # Remove deepflow
  %(prog)s --uninstall
        """
    )
    parser.add_argument('--uninstall', action='store_true',
                        help='Remove deepflow from the global or project configuration')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv=None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        installer = Installer(DeepflowConfig())

        if args.uninstall:
            installer.run_uninstall()
        else:
            installer.run_install()

        return 0

    except KeyboardInterrupt:
        print(f"\n{colored_status('ERROR', 'Operation cancelled by user')}", file=sys.stderr)
        return 1
    except AssetNotFoundError as e:
        print(colored_status('ERROR', f"Installation failed: {e}"), file=sys.stderr)
        return 1
    except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
        print(colored_status('ERROR', f"Installation failed: file system error: {e}"), file=sys.stderr)
        return 1
    except FileOperationError as e:
        print(colored_status('ERROR', f"Installation failed: file operation failed: {e}"), file=sys.stderr)
        return 1
    except DeepflowError as e:
        print(colored_status('ERROR', f"Installation failed: {e}"), file=sys.stderr)
        return 1
    except Exception as e:
        print(colored_status('ERROR', f"Installation failed: {e}"), file=sys.stderr)
        if os.getenv('DEBUG'):
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
