"""
Run the yaml-magic command line with ``python -m yaml_magic``.

Examples::

    python -m yaml_magic format config.yaml --check
    python -m yaml_magic set config.yaml replicas 3 --comment "scaled up"
"""

from typing import List, Optional

from yaml_magic.cli.commands import cli


def main(argv: Optional[List[str]] = None):
    """Invoke the CLI; ``argv`` defaults to the process arguments."""
    cli.main(args=argv, prog_name="yaml-magic")


if __name__ == "__main__":
    main()
