"""Policy adapters and the RL environment."""
from .policies import Policy, ScheduledPolicy, StaticPolicy
from .coastal_env import CoastalDefenseEnv

__all__ = ["Policy", "ScheduledPolicy", "StaticPolicy", "CoastalDefenseEnv"]
