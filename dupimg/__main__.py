"""
Allow running the package with: python -m dupimg

Examples:
    python -m dupimg /path/to/photos            # List similar images
    python -m dupimg /path/to/photos -m ./dups  # Move similar images
    python -m dupimg --cache-list               # Show cached folders
    python -m dupimg config                     # Show effective settings
    python -m dupimg config --init              # Create example config file
"""

import sys


def config_command(args: list) -> int:
    """Show the effective settings, or write an example config file with --init."""
    from .user_config import get_user_config

    config = get_user_config()

    if '--init' in args or '-i' in args:
        if not config.create_example_config():
            print("Failed to create configuration file.", file=sys.stderr)
            return 1
        print(f"Created example configuration file at:\n  {config.config_file_path}")
        return 0

    status = "found" if config.config_file_path.exists() else "not found (using defaults)"
    print(f"Configuration file: {config.config_file_path}")
    print(f"Status: {status}")
    print("\nCurrent settings:")
    for key, value in config.as_dict().items():
        print(f"  {key}: {value}")
    return 0


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        sys.exit(config_command(sys.argv[2:]))

    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
