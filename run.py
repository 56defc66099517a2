"""
Entry Point Script (Bootstrap)
==============================
Development runner that works without installing the package.

Why is this file needed?
------------------------
1. It is located outside the 'src' package to act as a convenient runner.
2. It modifies 'sys.path' so imports like 'from rollpack.model...' resolve
   from a plain checkout.

Usage:
    $ python run.py --lanes 4 --channels 3 --layers 2 --show
"""
import os
import sys

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from rollpack.__main__ import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
