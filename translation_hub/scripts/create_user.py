"""
Create a user account from the shell. Run from project root:
  python -m translation_hub.scripts.create_user EMAIL PASSWORD
Example:
  python -m translation_hub.scripts.create_user admin@example.com your-secure-password
"""
import argparse
import sys

from dotenv import load_dotenv

from translation_hub.core.config import get_settings
from translation_hub.core.database import build_engine, build_sessionmaker
from translation_hub.services.session_manager import SessionManager
from translation_hub.stores.credential_store import CredentialStoreUnavailableError
from translation_hub.stores.sqlalchemy_credential_store import SqlAlchemyCredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a translation hub user.")
    parser.add_argument("email", help="Account email (stored as given)")
    parser.add_argument("password", help="Password (1-128 chars)")
    args = parser.parse_args(argv)

    if not args.email.strip() or not args.password.strip():
        print("Email and password are required.", file=sys.stderr)
        return 1

    load_dotenv()
    settings = get_settings()
    engine = build_engine(settings)
    try:
        store = SqlAlchemyCredentialStore(build_sessionmaker(engine))
        manager = SessionManager.from_settings(store, settings)
        if not manager.register(args.email, args.password):
            print(f"Could not create '{args.email}': invalid input or email already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{args.email}'.")
        return 0
    except CredentialStoreUnavailableError as e:
        print(f"Database unavailable: {e.message}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
