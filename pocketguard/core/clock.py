from datetime import datetime

from pocketguard.config import settings


def system_now() -> datetime:
    """Naive local time, or the frozen MOCK_NOW when one is configured."""
    return settings.MOCK_NOW or datetime.now()
