"""Per-user activity counters with deterministic ranking."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel


class RankedCounter(BaseModel):
    """A named multiset of login -> count.

    Counts only ever grow.  :meth:`rank` orders entries by count descending,
    breaking ties by login ascending, so equal inputs always rank the same.
    """
    name: str
    counts: dict[str, int] = {}

    def increment(self, login: str) -> None:
        self.counts[login] = self.counts.get(login, 0) + 1

    def update(self, logins: Iterable[str]) -> None:
        """Increment every login in *logins* once per occurrence."""
        for login in logins:
            self.increment(login)

    def get(self, login: str) -> int:
        return self.counts.get(login, 0)

    def rank(self) -> list[tuple[str, int]]:
        return sorted(self.counts.items(), key=lambda item: (-item[1], item[0]))

    def __len__(self) -> int:
        return len(self.counts)

    def __contains__(self, login: object) -> bool:
        return login in self.counts
