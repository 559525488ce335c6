"""Services Layer — the pipeline stages and their orchestration.

Invariants:
    - One stage per module: config_loader, operations, reporter; pipeline wires them
    - Stages convert collaborator faults to PipelineError before returning

Design Decisions:
    - Collaborators (ByteSource, CredentialStore, DiagnosticSink) injected via constructors
"""
