#!/usr/bin/env python3
"""
Paging masonry grid demo launcher.

Run this from the project root to open the demo window.
"""

import sys

from paginggrid.run_gui import main

if __name__ == '__main__':
    sys.exit(main())
