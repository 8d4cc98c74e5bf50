"""Main entry point for acigroup."""

from acigroup.cli.main import main


if __name__ == "__main__":
    main()
