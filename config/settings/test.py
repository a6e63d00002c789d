"""Test settings.

SQLite with a file-backed test database, so that tests running real
threads against the database see one shared store, and fast password
hashing.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

TIME_ZONE = 'UTC'

SECRET_KEY = 'test-secret-key-not-for-production'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': 20,
        },
        'TEST': {
            'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        },
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

RESERVATIONS = {
    **RESERVATIONS,  # noqa: F405
    'EXPAND_RECURRENCE': True,
}

LOGGING['root']['level'] = 'ERROR'  # noqa: F405
for _name in ('apps', 'shared', 'reservations.audit'):
    LOGGING['loggers'][_name]['level'] = 'WARNING'  # noqa: F405
