"""Client-side TRON wallet: transaction construction, signing, broadcast and block watching."""

__version__ = "0.1.0"
