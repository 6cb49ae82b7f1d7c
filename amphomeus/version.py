"""
Amphomeus library and API version.
"""

AMPHOMEUS_VERSION = "0.1.0"
