"""
Confidential Ledger - Source Package

An encrypted expense ledger: principals submit encrypted amounts, the
ledger keeps an encrypted running total per principal and compares it,
still encrypted, against an encrypted spending limit set by the owner.

DESIGN PRINCIPLES:
1. No plaintext inside the ledger, ever
2. Every handle that leaves is tagged for its decryption path
3. All-or-nothing commands
4. Fail early, fail visibly
5. The encryption backend is swappable
"""

__version__ = "1.0.0"
