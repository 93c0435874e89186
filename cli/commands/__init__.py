"""
txval CLI Commands Package

Command modules for the transaction validator CLI.
"""

__all__ = ['validate', 'config']
