"""
Authentication: password login, JWT bearer tokens and user management.
"""
