"""
This is an extension of the default test_settings.py file that uses MySQL for
the backend. The apps run fine using SQLite, but tag names rely on a binary
collation to compare case-sensitively, which only MySQL exercises.

If you need a compatible MySQL server running locally, spin one up with:
docker run --rm \
    -e MYSQL_DATABASE=test_mb_db \
    -e MYSQL_USER=test_mb_user \
    -e MYSQL_PASSWORD=test_mb_pass \
    -e MYSQL_RANDOM_ROOT_PASSWORD=true \
    -p 3306:3306 mysql:8
"""

from test_settings import *

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.mysql",
        "NAME": "mb_db",
        "USER": "test_mb_user",
        "PASSWORD": "test_mb_pass",
        "HOST": "127.0.0.1",
        "PORT": "3306",
        "OPTIONS": {
            "charset": "utf8mb4"
        }
    }
}
