"""Core Layer — pure pipeline logic, no IO, no async, no logging setup.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All check/parse/redact functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: stages in services/ wrap these
"""
