"""
readpe Module Entry Point
=========================

Allows running the readpe CLI via: python -m readpe
"""

from readpe.cli import main

if __name__ == "__main__":
    main()
