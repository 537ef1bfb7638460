"""
Utility modules for fancierlog.

Modules:
    - paths: Where config and log files live
    - config: Loading, validating and writing config.txt
    - sessionlog: Append-only log of the viewer's own notices
    - producer: Process-table lookup for the log's producer
"""
