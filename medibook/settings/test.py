import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')

from .base import *

DEBUG = False

DATABASES = {
    'default': {'ENGINE': 'django.db.backends.sqlite3', 'NAME': ':memory:'},
}

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

AXES_ENABLED = False

TIME_ZONE = 'Asia/Kolkata'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
