"""ORM Models — SQLAlchemy declarative models for all BoothBoss entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the tenant root; event URLs, settings, journeys and sessions hang off it

Design Decisions:
    - One file per entity; all imported here so string-based relationship()
      references resolve before the first query
"""

from boothboss.models.user import User  # noqa: F401
from boothboss.models.subscription import Subscription  # noqa: F401
from boothboss.models.event_url import EventUrl  # noqa: F401
from boothboss.models.booth_settings import BoothSettings  # noqa: F401
from boothboss.models.event_url_settings import EventUrlSettings  # noqa: F401
from boothboss.models.journey import Journey  # noqa: F401
from boothboss.models.booth_session import BoothSession  # noqa: F401
from boothboss.models.booth_analytics import BoothAnalytics, BoothEventLog  # noqa: F401
