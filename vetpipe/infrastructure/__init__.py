"""Infrastructure Layer — concrete collaborators: filesystem source, credential store, logging.

Invariants:
    - Implements the Protocols in core/boundary_protocols.py; never imports services/
"""
