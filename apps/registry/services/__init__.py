"""
apps.registry.services package.

Views call only these modules; no business logic lives in views or
serializers.
"""
from . import children, photos, proxies, schools, sponsors, sponsorships  # noqa: F401
