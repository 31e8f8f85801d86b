"""
nodekit - project-local Node.js and npm provisioning.
"""

__version__ = "0.1.0"
