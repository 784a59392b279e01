# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
lhapdf-provision Command-Line Interface entry point.

Provides the main() function that serves as the entry point for the
`lhapdf-provision` command: parse arguments, dispatch to the command
handler and turn anything that escapes it into an exit code.
"""


def main(argv=None):
    """
    Main entry point for the lhapdf-provision CLI.

    Args:
        argv: Argument list, sys.argv[1:] when None

    Returns:
        Process exit code
    """
    import sys

    from lhapdf_provision.cli.argument_parser import CLIParser
    from lhapdf_provision.cli.exit_codes import ExitCode, exit_code_for
    from lhapdf_provision.core.exceptions import LHAPDFProvisionError

    try:
        parser = CLIParser()
        args = parser.parse_args(argv)

        if hasattr(args, 'func'):
            return int(args.func(args))
        # No command specified - should not happen due to required=True on subparsers
        parser.parser.print_help()
        return ExitCode.USAGE_ERROR

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user", file=sys.stderr)
        return ExitCode.INTERRUPTED
    except LHAPDFProvisionError as e:
        print(f"❌ {e}", file=sys.stderr)
        return exit_code_for(e)
    except Exception as e:  # noqa: BLE001
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    import sys
    sys.exit(main())
