from __future__ import annotations


class FeedTracker:
    """Assigns a stable integer id to every feed name seen during a build.

    Ids start at 0 and follow first-seen order. They are never reused or
    reassigned.
    """

    def __init__(self) -> None:
        self.next_feed_id = 0
        self.ids: dict[str, int] = {}

    def identify(self, name: str) -> int:
        feed_id = self.ids.get(name)
        if feed_id is not None:
            return feed_id
        feed_id = self.next_feed_id
        self.next_feed_id += 1
        self.ids[name] = feed_id
        return feed_id

    def items(self) -> list[tuple[str, int]]:
        return list(self.ids.items())

    def __len__(self) -> int:
        return len(self.ids)
