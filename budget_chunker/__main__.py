"""
Entry point for ``python -m budget_chunker``
"""
import sys

from budget_chunker.cli import main

sys.exit(main())
