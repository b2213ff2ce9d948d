"""
bidcalc - English auction bid step arithmetic

Computes, for one incremental bid:
- Minimal bid and minimal buyout prices per token
- Refund and bonus owed to the outbid party
- Amounts at stake for the new bidder
- Protocol fee, royalty and lister split
"""

__version__ = "0.1.0"
