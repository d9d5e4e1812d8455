#!/usr/bin/env python3
"""
Launch the fileman CLI with automatic .env loading.
"""

from dotenv import load_dotenv

# Load .env BEFORE anything reads FILEMAN_* variables
load_dotenv()

import sys

from fileman.cli import main

if __name__ == "__main__":
    sys.exit(main())
