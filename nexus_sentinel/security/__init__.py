"""
Security module - Authentication and token lifecycle
"""
