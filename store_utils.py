#!/usr/bin/env python3
"""
Storefront data utility.

Usage:
    python store_utils.py stats      - Show catalog and user statistics
    python store_utils.py users      - List all users
    python store_utils.py products   - List all products
    python store_utils.py backup     - Copy the users file into the backup directory
    python store_utils.py reset      - Delete the users file (the demo user is re-seeded on next start)
"""
import argparse
import os
import platform
import shutil
import sys
from datetime import datetime
from pathlib import Path

from shared.utils import settings
from storefront.catalog import Catalog
from storefront.user_store import UserStore

BACKUP_DIR = "backups"

# --- Colors ---
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

if platform.system() == "Windows":
    os.system('color')  # Enable ANSI colors in Windows terminal

def log(msg, color=Colors.ENDC, bold=False):
    prefix = Colors.BOLD if bold else ""
    print(f"{prefix}{color}{msg}{Colors.ENDC}")

def rule():
    log("━" * 50, Colors.HEADER)

# --- Commands ---

def show_stats(users_file: Path):
    catalog = Catalog()
    log("\nStorefront Statistics\n", Colors.HEADER, bold=True)
    rule()
    log(f"Products:    {len(catalog)}")
    log(f"Categories:  {len(catalog.categories())}")
    if users_file.exists():
        users = UserStore(users_file).load()
        log(f"Users:       {len(users)}")
        log(f"Users file:  {users_file} ({users_file.stat().st_size / 1024:.2f} KB)")
    else:
        log(f"Users file:  {users_file} (missing, demo user only)", Colors.WARNING)
    rule()

def list_users(users_file: Path):
    if not users_file.exists():
        log(f"Users file {users_file} not found. Start the server or register a user first.", Colors.WARNING)
        return
    users = UserStore(users_file).load().all()
    log(f"\nUsers ({len(users)})\n", Colors.HEADER, bold=True)
    for user in users:
        log(f"  {user.id:<34} {user.email:<30} {user.name}")

def list_products():
    catalog = Catalog()
    log(f"\nProducts ({len(catalog)})\n", Colors.HEADER, bold=True)
    for p in catalog.list_products():
        log(f"  {p.id:>3}  {p.name:<22} ${p.price:>8}  stock {p.stock:<4} {p.category}")

def backup_users(users_file: Path, backup_dir: Path) -> bool:
    if not users_file.exists():
        log(f"Users file {users_file} not found. Nothing to back up.", Colors.FAIL)
        return False
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    target = backup_dir / f"{users_file.stem}-{stamp}{users_file.suffix}"
    shutil.copyfile(users_file, target)
    log(f"✓ Backup created: {target}", Colors.GREEN)
    return True

def reset_users(users_file: Path, assume_yes: bool) -> bool:
    if not users_file.exists():
        log("Users file does not exist. Nothing to reset.", Colors.CYAN)
        return True
    log("WARNING: This will delete all registered users!", Colors.WARNING, bold=True)
    if not assume_yes and input("Type 'yes' to continue: ").strip().lower() != "yes":
        log("Aborted.", Colors.WARNING)
        return False
    users_file.unlink()
    log(f"✓ Deleted {users_file}", Colors.GREEN)
    return True

# --- Main ---

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Inspect and maintain ShopHub storefront data")
    parser.add_argument("command", choices=["stats", "users", "products", "backup", "reset"])
    parser.add_argument("--users-file", default=settings.USERS_FILE, help="Path to the users JSON file")
    parser.add_argument("--backup-dir", default=BACKUP_DIR, help="Where backups are written")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation on reset")
    args = parser.parse_args(argv)

    users_file = Path(args.users_file)

    if args.command == "stats":
        show_stats(users_file)
    elif args.command == "users":
        list_users(users_file)
    elif args.command == "products":
        list_products()
    elif args.command == "backup":
        return 0 if backup_users(users_file, Path(args.backup_dir)) else 1
    elif args.command == "reset":
        return 0 if reset_users(users_file, args.yes) else 1
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log("\nAborted by user.", Colors.WARNING)
        sys.exit(0)
