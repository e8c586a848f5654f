#!/usr/bin/env python3
import os
from getpass import getpass

from dotenv import load_dotenv

from myreps import accounts
from myreps.errors import ValidationError
from myreps_core import DATA_DIR


def main(data_dir=None):
    load_dotenv()
    data_dir = data_dir or os.environ.get("MYREPS_DATA_DIR", DATA_DIR)

    email = input("Email: ").strip().lower()
    if not email:
        print("Email cannot be empty.")
        return

    if accounts.get_user(data_dir, email):
        print(f"User '{email}' already exists.")
        return

    name = input("Name: ").strip()

    password = getpass("Password: ")
    confirm = getpass("Confirm password: ")

    if password != confirm:
        print("Passwords do not match.")
        return

    role = input("Role [user/admin] (default: user): ").strip().lower() or "user"
    if role not in accounts.VALID_ROLES:
        role = "user"

    try:
        accounts.register(data_dir, email, password, name, role=role)
    except ValidationError as e:
        print(e.message or e.error)
        return

    print(f"User '{email}' added with role '{role}'.")


if __name__ == "__main__":
    main()
