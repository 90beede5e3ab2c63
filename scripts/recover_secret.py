#!/usr/bin/env python3
"""
Recover secrets from share documents.

Usage:
    python scripts/recover_secret.py data/testcase1.json
    python scripts/recover_secret.py data/testcase1.json --mode prime_field
    python scripts/recover_secret.py data/*.json --policy permissive --log-level DEBUG
"""

import sys

from threshold_recovery.cli import main


if __name__ == "__main__":
    sys.exit(main())
