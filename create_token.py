"""Print a long-lived bearer token for a user id (default: the admin ``u3``).

Usage:
    python create_token.py [user_id]
"""
import sys

from tourisma_api.app.core.security import create_access_token

user_id = sys.argv[1] if len(sys.argv) > 1 else "u3"
# 365 days, in seconds
token = create_access_token({"sub": user_id}, expires_delta=365 * 24 * 60 * 60)
print(token)
