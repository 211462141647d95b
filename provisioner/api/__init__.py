"""
FastAPI Backend API

This package contains the REST endpoints for the provisioning facade.
Each router proxies to exactly one upstream provider.
"""

__version__ = "0.1.0"
