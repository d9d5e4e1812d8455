"""
fileman - file organization CLI.

Commands:
- dedupe: content-hash duplicate detection with guarded deletion
- organize: move files into folders by extension or date
- tree: print a directory tree
- clean-empty: remove empty directories
- rename: batch rename by regex
- audit-nonpdf: list non-PDF files and their PDF counterparts
"""

__version__ = "1.0.0"
