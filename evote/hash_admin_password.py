# Prints a bcrypt hash to use as ADMIN_PASSWORD_HASH.
# Usage: python -m evote.hash_admin_password <password>
import sys
from getpass import getpass

from evote.security import hash_password


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    password = argv[0] if argv else getpass("Admin password: ")
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        return 1
    print(hash_password(password))
    return 0


if __name__ == "__main__":
    sys.exit(main())
