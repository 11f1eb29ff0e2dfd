"""relaysweep - sweep a wallet's tokens to a relayer across chains."""

__version__ = "0.1.0"
