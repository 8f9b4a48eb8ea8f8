"""
ATM withdrawal system.

Layers:
- core: value objects, exceptions and collaborator interfaces
- domain: withdrawal engine and banknote breakdown strategies
- infrastructure: settings, Redis and HTTP collaborator adapters
- application: withdrawal service used by the host application
"""

__version__ = "0.1.0"
