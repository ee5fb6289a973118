"""MindBridge - conversation memory and continuity engine"""

__version__ = "0.1.0"
