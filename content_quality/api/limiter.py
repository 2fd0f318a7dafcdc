"""
Shared rate limiter for the API blueprints.

Bound to the app in create_app; storage and the default limit come
from RATELIMIT_STORAGE_URI and RATELIMIT_DEFAULT.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


limiter = Limiter(key_func=get_remote_address)
