"""
Test settings
"""
from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

FRONTEND_URL = 'https://park.example.com'
ENABLE_PARK_SCHEDULER = False
LOG_LEVEL = 'WARNING'
LOGGING['root']['level'] = LOG_LEVEL
