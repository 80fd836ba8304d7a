"""
Clients for the external CM repository.
"""
