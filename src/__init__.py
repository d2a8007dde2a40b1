"""
Video Library Bundle Service.

Keeps a per clinic/department index of localized videos and subtitles
in object storage, and provisions language folders for new videos.

- core: Framework-agnostic bundle and folder logic
- infrastructure: Object storage integration
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
