"""
Known AI crawler signatures and user-agent lookup.
"""
from typing import Iterable, Iterator

from crawlworth.models.domain import BotSignature, SignatureMatch


class SignatureRegistry:
    """
    Ordered table of bot signatures.

    Lookup walks companies in declared order and each company's patterns in
    declared order, returning on the first case-insensitive substring hit.
    Declared order is the priority: when a user agent carries tokens of two
    companies, the earlier company wins.
    """

    def __init__(self, signatures: Iterable[BotSignature]):
        self._signatures: tuple[BotSignature, ...] = tuple(signatures)
        # Lower-cased once; (signature, original pattern, lowered pattern)
        self._index: tuple[tuple[BotSignature, str, str], ...] = tuple(
            (signature, pattern, pattern.lower())
            for signature in self._signatures
            for pattern in signature.patterns
        )

    def __iter__(self) -> Iterator[BotSignature]:
        return iter(self._signatures)

    def __len__(self) -> int:
        return len(self._signatures)

    @property
    def signatures(self) -> tuple[BotSignature, ...]:
        return self._signatures

    def companies(self) -> list[str]:
        """Company names in registry order."""
        return [signature.company for signature in self._signatures]

    def lookup(self, user_agent: str | None) -> SignatureMatch | None:
        """
        Match a user agent against the registry.

        Args:
            user_agent: Raw User-Agent header value

        Returns:
            SignatureMatch for the first matching pattern, or None
        """
        if not user_agent:
            return None

        agent = user_agent.lower()
        for signature, pattern, lowered in self._index:
            if lowered and lowered in agent:
                return SignatureMatch(
                    company=signature.company,
                    bot_type=signature.key,
                    risk_level=signature.risk_level,
                    commercial=signature.commercial,
                    matched_pattern=pattern,
                    purpose=signature.purpose,
                )
        return None
