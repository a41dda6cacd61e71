"""
questcore: adaptive learning and curriculum-progression engine.

Decides what problem to show next, scores performance, and decides when a
learner may advance to new content. Presentation layers call in and get plain
data back.
"""

__version__ = "1.0.0"
