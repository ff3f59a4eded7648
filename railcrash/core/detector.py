import logging
from typing import List

from .models import Network, RouteRegistry
from .policies import Crash, make_policy

logger = logging.getLogger(__name__)


def detect_collisions(network: Network, routes: RouteRegistry, policy: str = "branch", include_trivial_routes: bool = False) -> List[Crash]:
    # both tables must be complete before detection
    network.validate()
    routes.validate()
    crashes = make_policy(policy, include_trivial_routes=include_trivial_routes).detect(network, routes)
    logger.info("policy=%s engines=%d crashes=%d", policy, routes.engine_count, len(crashes))
    return crashes
