#!/usr/bin/env python3
"""
GA Match CLI - Minimal entry point.

Evolves a population of random byte strings until one matches the target
exactly (or an optional generation cap is reached).

Usage:
    python3 ga_match_cli.py
    python3 ga_match_cli.py --config run_config.yaml
    python3 ga_match_cli.py --seed 7 --report-every 50
    python3 ga_match_cli.py --help

Exit status is 0 when the run ends solved or exhausted, 1 on error or
interruption.
"""

import sys
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


if __name__ == '__main__':
    from ga_match.cli import main
    main()
