"""Development settings for the room reservations project.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and using
human-readable console logs. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Readable log lines instead of JSON
LOGGING['handlers']['console']['formatter'] = 'console'  # noqa: F405
