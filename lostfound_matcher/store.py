"""
In-memory match registry.

Stands in for the persistence collaborator during recalculation and in
tests. Holds at most one match per (lost_item_id, found_item_id) pair.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Match

logger = logging.getLogger(__name__)


class MatchStore:

    def __init__(self, matches: Iterable[Match] = ()):
        self._matches: Dict[Tuple[str, str], Match] = {}
        for match in matches:
            self.add(match)

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self):
        return iter(list(self._matches.values()))

    def __contains__(self, pair) -> bool:
        return tuple(pair) in self._matches

    def add(self, match: Match) -> bool:
        """Insert a match unless its pair is already stored. Returns True if inserted."""
        if match.pair in self._matches:
            logger.debug(f"Skipping duplicate match for pair {match.pair}")
            return False
        self._matches[match.pair] = match
        return True

    def get(self, match_id: str) -> Optional[Match]:
        for match in self._matches.values():
            if match.id == match_id:
                return match
        return None

    def for_user(self, user_email: str) -> List[Match]:
        return [m for m in self._matches.values() if m.involves_user(user_email)]

    def for_item(self, item_id: str) -> List[Match]:
        return [m for m in self._matches.values() if item_id in m.pair]

    def remove_for_user(self, user_email: str) -> List[Match]:
        """Delete every match where the user reported either side. Returns the removed matches."""
        removed = self.for_user(user_email)
        for match in removed:
            del self._matches[match.pair]
        logger.info(f"Removed {len(removed)} matches for {user_email}")
        return removed

    def verify(self, match_id: str, is_verified: bool) -> Match:
        match = self.get(match_id)
        if match is None:
            raise KeyError(f"Match not found: {match_id}")
        match.verify(is_verified)
        return match
