"""
Entry Point Script (Bootstrap)
==============================
Development runner that works without installing the package.

It prepends 'src' to 'sys.path' so 'from linelogic...' imports resolve
from a plain checkout.

Usage:
    $ python run.py
    $ LINELOGIC_LOG_LEVEL=DEBUG python run.py
"""
import os
import sys

current_dir: str = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(current_dir, 'src'))

from linelogic.main import main

if __name__ == "__main__":
    main()
