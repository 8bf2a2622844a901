"""Mode Analytics Terraform provider package.

This package implements the resource and data-source handlers of the
Mode Analytics Terraform provider on top of a small HTTP core: a
rate-limit aware request executor and an asynchronous deletion
verifier.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.3.0"
