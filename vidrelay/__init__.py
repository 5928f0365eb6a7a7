"""
VidRelay: metadata lookup and download relay for YouTube, TikTok and Facebook videos.
"""

__version__ = "1.0.0"
