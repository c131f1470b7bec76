"""
Create a user without going through the HTTP API. Run from project root:
  python -m genius.scripts.create_user EMAIL USERNAME PASSWORD
Example:
  python -m genius.scripts.create_user admin@example.com admin your-secure-password
"""
import argparse
import sys

from genius.core.database import SessionLocal
from genius.services.accounts import AccountError, create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Genius user account.")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("username", help="Username (unique, 1-255 chars)")
    parser.add_argument("password", help="Password")
    args = parser.parse_args(argv)

    email = args.email.strip()
    username = args.username.strip()
    if not email or len(email) > 255:
        print("Invalid email length.", file=sys.stderr)
        return 1
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password:
        print("Password must be non-empty.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, email, username, args.password)
    except AccountError as e:
        print(f"{e.message}: '{username}' / '{email}'.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' (id={user.id}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
