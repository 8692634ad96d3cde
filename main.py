#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch

Or approximate one image directly:

    python -m shape_anneal.cli single my_photo.jpg -o output/result.png
    python -m shape_anneal.cli single my_photo.jpg --triangle --sample 500
"""

from shape_anneal.cli import app

if __name__ == "__main__":
    app()
