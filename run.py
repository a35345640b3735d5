"""
Entry Point Script (Bootstrap)
==============================
Runs the tracker from a source checkout without installing it.

It prepends 'src' to 'sys.path' so 'palettetracker' resolves, then hands the
command line over to the package entry point.

Usage:
    $ python run.py --profile hucast
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from palettetracker.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
