from dataclasses import dataclass, field


@dataclass
class ItemResult:
    """Outcome of one queue message."""

    msg_id: int
    succeeded: bool
    outcome: str
    error: str | None = None


@dataclass
class BatchReport:
    results: list[ItemResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)
