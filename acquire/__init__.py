"""
Workload acquisition tool.

Restores a workload manifest package and its packs into a scratch NuGet
cache, pins pack versions, and moves everything into a local SDK tree.
"""

__version__ = "0.1.0"
