import math


class IdleAutoStart:
    """Countdown that switches the bot on after a stretch without manual input.

    Fires at most once per arming; any qualifying input re-arms it.
    """

    def __init__(self, threshold_ms: float = 7000.0, now: float = 0.0):
        self.threshold_ms = threshold_ms
        self.last_input = now
        self.auto_started = False

    def record_input(self, now: float) -> None:
        self.last_input = now
        self.auto_started = False

    def reset(self, now: float) -> None:
        self.record_input(now)

    def elapsed_ms(self, now: float) -> float:
        return now - self.last_input

    def should_start(self, now: float, bot_active: bool) -> bool:
        if bot_active or self.auto_started:
            return False
        return self.elapsed_ms(now) >= self.threshold_ms

    def mark_started(self) -> None:
        self.auto_started = True

    def remaining_ms(self, now: float) -> float:
        return max(0.0, self.threshold_ms - self.elapsed_ms(now))

    def remaining_seconds(self, now: float) -> int:
        return math.ceil(self.remaining_ms(now) / 1000.0)

    def status_text(self, now: float, bot_active: bool):
        if bot_active or self.auto_started:
            return None
        return f"Auto-Bot Starting in: {self.remaining_seconds(now)}s"
