"""
User feedback collection.

Responsibilities:
- Accept star ratings with free-text feedback from any visitor.
- List feedback page by page, newest or by stars.
"""
