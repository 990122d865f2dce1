"""
Engine Configuration
Settings for the AI side of the engine and the console logging setup

Defaults live on EngineConfig; from_env() reads BRIDGE_* overrides.
"""

import logging
import os
from dataclasses import dataclass

GIB_ROBOT_URL = 'http://gibrest.bridgebase.com/u_bm/robot.php'

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class EngineConfig:
    """Tunable settings for the engine's AI players"""
    # Monte-Carlo bidding
    mc_trials: int = 1000
    confidence_threshold: float = 0.6
    max_bidding_rounds: int = 20
    max_deal_attempts: int = 50
    mc_workers: int = 1
    trick_estimator: str = 'points'   # 'points' or 'dds'

    # Remote advisor
    advisor_enabled: bool = False
    advisor_url: str = GIB_ROBOT_URL
    advisor_timeout: float = 20.0
    advisor_user_agent: str = 'bridge-engine/1.0'

    # Scheduler
    think_delay: float = 0.0

    @classmethod
    def from_env(cls):
        """Build a config from BRIDGE_* environment variables"""
        return cls(
            mc_trials=int(os.getenv('BRIDGE_MC_TRIALS', '1000')),
            confidence_threshold=float(os.getenv('BRIDGE_CONFIDENCE_THRESHOLD', '0.6')),
            max_bidding_rounds=int(os.getenv('BRIDGE_MAX_BIDDING_ROUNDS', '20')),
            max_deal_attempts=int(os.getenv('BRIDGE_MAX_DEAL_ATTEMPTS', '50')),
            mc_workers=int(os.getenv('BRIDGE_MC_WORKERS', '1')),
            trick_estimator=os.getenv('BRIDGE_TRICK_ESTIMATOR', 'points'),
            advisor_enabled=_env_bool('BRIDGE_ADVISOR_ENABLED', False),
            advisor_url=os.getenv('BRIDGE_ADVISOR_URL', GIB_ROBOT_URL),
            advisor_timeout=float(os.getenv('BRIDGE_ADVISOR_TIMEOUT', '20')),
            advisor_user_agent=os.getenv('BRIDGE_ADVISOR_USER_AGENT', 'bridge-engine/1.0'),
            think_delay=float(os.getenv('BRIDGE_THINK_DELAY', '0')),
        )


def configure_logging(level=None):
    """Attach a stream handler to the root logger (safe to call twice)"""
    if level is None:
        level = os.getenv('BRIDGE_LOG_LEVEL', 'INFO')
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
