#!/usr/bin/env python3
"""FocusLite — entry point.

Run with:
    python main.py
    python -m focuslite
"""

from focuslite.__main__ import main


if __name__ == "__main__":
    main()
