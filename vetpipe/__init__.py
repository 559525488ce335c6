"""vetpipe — validated-operation pipeline: load → validate → execute → report.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports from submodules, no star exports
"""
