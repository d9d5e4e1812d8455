"""
Core filesystem layer.

Modules:
- models: FileEntry
- enumerator: iterative directory scan
- fs_utils: small path helpers shared by commands
- sink: progress line sinks
- outcome: command outcome values
"""
