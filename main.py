#!/usr/bin/env python3
"""
kinemotion - Skeletal motion recording and angle solving

Usage:
    python main.py info CLIP.xml
    python main.py export CLIP.xml --format json --output clip.json
    python main.py solve CLIP.xml --output solved.xml
    python main.py --help
"""

import sys
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    """Main entry point."""
    from kinemotion.cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
