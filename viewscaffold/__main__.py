"""Allow ``python -m viewscaffold``."""

from viewscaffold.cli import main

main()
