"""
License Entitlement Service Django project.
"""
