"""
MedScan: resolves scanned product codes into canonical product records.
"""

__version__ = "1.0.0"
