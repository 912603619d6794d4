"""MonoCollector: personal collection tracking with gamified progress"""

__version__ = "1.0.0"
