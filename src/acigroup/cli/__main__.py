"""Allow running the CLI as python -m acigroup.cli."""

from acigroup.cli.main import main

if __name__ == "__main__":
    main()
