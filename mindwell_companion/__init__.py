"""
MindWell Companion - a wellness-support service with an empathetic assistant.

This package provides mood, activity and journal tracking plus a companion
engine that replies to users, classifies the sentiment of what they wrote and
suggests coping activities.
"""

__version__ = "0.1.0"
