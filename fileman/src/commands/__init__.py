"""
fileman commands.

Modules:
- dedupe: duplicate detection by content hash (package)
- organize: move files by extension or date
- tree: directory tree rendering
- clean_empty: empty directory removal
- rename: regex batch rename
- audit_non_pdf: non-PDF files vs same-name PDFs
"""
