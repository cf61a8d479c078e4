"""Cost-bounded assistance orchestration for scripted Mind Shifting sessions."""

__version__ = "0.1.0"
