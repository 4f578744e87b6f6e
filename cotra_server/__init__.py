"""
COTRA Authority Service
"""
