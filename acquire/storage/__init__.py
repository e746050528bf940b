"""
Filesystem layout for workload acquisition.

* `scratch`  - the private, per-run restore tree (removed on exit).
* `sdk_tree` - paths inside the SDK installation and the moves into it.
"""
