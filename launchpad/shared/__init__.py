"""
Launchpad Shared Kernel
=======================

Architecture:
- core: EventBus, configuration, failures and results
- infrastructure: HTTP transport, authenticated pipeline, session store
- domain: entities, repositories and use cases
"""
