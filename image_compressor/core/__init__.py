"""
Core configuration, logging, exceptions and client factories.
"""
