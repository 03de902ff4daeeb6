from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

SESSION_COOKIE_SECURE = False

RESEND_API_KEY = ''
PUBLIC_BASE_URL = 'https://asiatek.pro'
REPLIT_URL = ''

NOTIFICATIONS_EAGER = True
