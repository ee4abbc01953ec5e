#!/usr/bin/env python3
"""
Protein Hash - Main Entry Point

Structural fingerprints of source code that ignore naming and syntax
style but follow the logic.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from protein_hash.cli import main

if __name__ == "__main__":
    main()
