"""
Nonce Manager
Explicit nonce cursor for sequential multi-contract deployment
"""

from loguru import logger


class SequenceCursor:
    """
    Next nonce to assign during a single deployment run

    Owned by one run and advanced once per confirmed deployment.
    Never decremented, never shared between runs.
    """

    def __init__(self, start: int):
        """
        Initialize cursor

        Args:
            start: First nonce to assign
        """
        if isinstance(start, bool) or not isinstance(start, int):
            raise TypeError(f"Nonce must be an integer, got {start!r}")
        if start < 0:
            raise ValueError(f"Nonce cannot be negative: {start}")

        self.start = start
        self._current = start

        logger.debug(f"Nonce cursor starting at {start}")

    @classmethod
    def from_signer(cls, signer) -> "SequenceCursor":
        """Start from the signer's pending transaction count"""
        nonce = signer.get_nonce()
        logger.info(f"Nonce synced from chain for {signer.address}: {nonce}")
        return cls(nonce)

    @property
    def current(self) -> int:
        """Nonce for the next transaction (without consuming it)"""
        return self._current

    def advance(self) -> int:
        """
        Consume the current nonce

        Returns:
            The nonce that was consumed
        """
        nonce = self._current
        self._current += 1
        logger.debug(f"Nonce {nonce} consumed, next is {self._current}")
        return nonce

    def __repr__(self) -> str:
        return f"SequenceCursor(start={self.start}, current={self._current})"
