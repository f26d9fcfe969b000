"""
External service integrations
"""

from .browser import BrowserSession
