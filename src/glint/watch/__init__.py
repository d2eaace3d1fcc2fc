"""Filesystem watching: exclusion filter, change coalescer, directory watcher.

    from glint.watch import Coalescer, DirectoryWatcher

    coalescer = Coalescer(0.1, broadcaster.notify)
    watcher = DirectoryWatcher("site", (".git", "node_modules"), coalescer.trigger)
"""

from glint.watch.coalescer import Coalescer
from glint.watch.filters import is_excluded, parse_exclusions
from glint.watch.watcher import ChangeEvent, DirectoryWatcher

__all__ = [
    "ChangeEvent",
    "Coalescer",
    "DirectoryWatcher",
    "is_excluded",
    "parse_exclusions",
]
