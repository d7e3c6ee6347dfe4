"""Extension singletons, bound to an app in ``create_app`` via ``init_app``."""
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_caching import Cache

from postdesk.services.tokens import TokenIssuer

db: SQLAlchemy = SQLAlchemy()
migrate: Migrate = Migrate()

# Post listings only; cleared on every write
cache: Cache = Cache()

# Bearer tokens for the API
tokens: TokenIssuer = TokenIssuer()

# Per-client-IP limits; write routes add tighter ones
limiter: Limiter = Limiter(key_func=get_remote_address, default_limits=["100 per minute"])
