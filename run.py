#!/usr/bin/env python3
"""
PrayLine Runner - renders the statusline from a source checkout
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from prayline.app import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
