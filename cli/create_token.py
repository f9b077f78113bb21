#!/usr/bin/env python3
"""Issue a bearer token for an owner, for local development and testing.

Usage:
    python cli/create_token.py <owner_id> [--days N]
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from backend.api.auth.tokens import ACCESS_TOKEN_EXPIRE_DAYS, create_access_token  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Issue a bearer token for an owner")
    parser.add_argument("owner_id", help="Owner identity to put in the sub claim")
    parser.add_argument("--days", type=int, default=ACCESS_TOKEN_EXPIRE_DAYS, help="Token lifetime in days")
    args = parser.parse_args()

    print(create_access_token(args.owner_id, expires_delta=timedelta(days=args.days)))


if __name__ == "__main__":
    main()
