"""
Live log viewer components.

Modules:
    - model: Shared data types and collaborator interfaces
    - colors: Ordered pattern -> color rules
    - reformat: Per-line timestamp and tag rewriting
    - tailer: The polling state machine that ties everything together
    - views: ANSI terminal rendering

Architecture:
    One thread, one loop. Each cycle FileTailer checks the producer process,
    checks the file for truncation, reads new complete lines and for every
    line asks ColorRuleSet for colors, LineReformatter for text, and hands
    the result to the renderer.
"""
