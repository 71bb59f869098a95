"""
Launchpad
=========

App shell with an authenticated request pipeline and startup-gated navigation.

Architecture:
- shared: EventBus, configuration, network pipeline, session store, domain
- app: navigation state machine, startup sequence, Flet shell
"""

__version__ = "0.1.0"
