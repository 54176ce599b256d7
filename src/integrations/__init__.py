"""
Integrations with external delivery services.
"""
