from datetime import datetime, timezone

from gatepass.app.services.clock import IClock


class SystemClock(IClock):
    """Wall clock of the server, as naive UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)
