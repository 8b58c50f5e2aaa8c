"""
YouthMind - a mood-aware wellness companion service.

This package provides a small webserver that sequences calls to a hosted
generative model (mood detection, counselling chat, recommendations, career
roadmaps, voice replies) behind a crisis keyword gate, and a moderated peer
support board.
"""

__version__ = "0.1.0"
