"""Core Transformation Module

This module provides the attribute value transformation pipeline,
independent of the hosting synchronization engine.

Architecture:
    - Pure Python (no host engine dependencies in core logic)
    - Testable without a live directory or metaverse
    - Host collaborators (lookup, trace sink) are injected per invocation

Module Structure:
    - values.py         : Value representation and coercion (multi-values, base64, GUID, SID, integers)
    - dates.py          : Invariant-culture date formatting and parsing
    - transforms/       : Closed catalog of transform variants
    - chain.py          : TransformChain, AttributeMapping, build_chain()
    - context.py        : ExecutionContext and host collaborator protocols
    - diagnostics.py    : Logging and JSON Lines trace sinks
    - pipeline.py       : PipelineInvoker entry point
    - exceptions.py     : Error taxonomy

Public APIs:
    Pipeline (mare.core.pipeline):
        - PipelineInvoker.run()
        - PipelineInvoker.run_mapping()
        - PipelineResult

    Chains (mare.core.chain):
        - build_chain()
        - TransformChain.apply()

    Catalog (mare.core.transforms):
        - build_transform()
        - TRANSFORMS
"""
