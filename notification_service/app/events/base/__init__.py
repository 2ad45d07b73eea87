"""
Notification Service message channel adapters.
"""
