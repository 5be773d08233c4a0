#!/usr/bin/env python3
"""
Link verifier launcher script.
Checks every [label](target) link in the markdown files under the given
paths (default: the current directory) and exits non-zero on any failure.

Usage: python verify_links.py [-v] [-d] [--] [DIR|FILE]...
"""
import sys
import os

# Add the project root to Python path (where link_verifier is located)
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == '__main__':
    from link_verifier.cli import main

    sys.exit(main(sys.argv[1:]))
