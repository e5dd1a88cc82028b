"""
Portal - Client Application Framework.

Small application framework built around three pieces:
- ServiceRegistry: name-keyed dependency injection container
- BaseComponent: stateful UI component with lifecycle hooks and change detection
- Application: bootstrap sequencer wiring services and components together
"""

__version__ = "0.1.0"
