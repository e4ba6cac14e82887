"""Runtime settings read from the environment.

Entry points call :func:`dotenv.load_dotenv` before :meth:`Settings.from_env`
so a ``.env`` file in the working directory is honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from course_planner.routing.client import DEFAULT_BASE_URL
from course_planner.routing.models import TravelMode

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass
class Settings:
    """Course planner configuration."""

    osrm_url: str = DEFAULT_BASE_URL
    """``COURSE_PLANNER_OSRM_URL``: routing server root."""

    osrm_per_profile_prefix: bool = True
    """``COURSE_PLANNER_OSRM_PROFILE_PREFIX``: use ``/routed-{profile}`` paths."""

    routing_timeout: float = 10.0
    """``COURSE_PLANNER_ROUTING_TIMEOUT``: seconds per routing request."""

    serialize_legs: bool = True
    """``COURSE_PLANNER_SERIALIZE_LEGS``: one leg in flight at a time."""

    default_mode: TravelMode = TravelMode.WALKING
    """``COURSE_PLANNER_DEFAULT_MODE``: ``walking`` or ``cycling``."""

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from *environ* (defaults to :data:`os.environ`).

        Raises:
            ValueError: If a numeric or enum variable has an invalid value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            osrm_url=env.get("COURSE_PLANNER_OSRM_URL", defaults.osrm_url),
            osrm_per_profile_prefix=_flag(
                env.get("COURSE_PLANNER_OSRM_PROFILE_PREFIX"), defaults.osrm_per_profile_prefix
            ),
            routing_timeout=float(
                env.get("COURSE_PLANNER_ROUTING_TIMEOUT", defaults.routing_timeout)
            ),
            serialize_legs=_flag(
                env.get("COURSE_PLANNER_SERIALIZE_LEGS"), defaults.serialize_legs
            ),
            default_mode=TravelMode(
                env.get("COURSE_PLANNER_DEFAULT_MODE", defaults.default_mode.value).lower()
            ),
        )


def _flag(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUTHY
