"""storyfeed: public story feeds for decentralized-storage blogs.

Resolves a handle to the user's storage bucket, migrates the stored
story and settings files to their current shape, and renders them as
sanitized HTML pages or an RSS 2.0 feed.
"""

__version__ = "0.1.0"
