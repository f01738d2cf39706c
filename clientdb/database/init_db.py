"""
Database initialization and seeding.

This script:
- Creates the clients and phones tables
- Optionally seeds the demo clients and phones
- Can reset the database (drop and recreate)

Usage:
    # Create tables
    python -m clientdb.database.init_db

    # Reset database (drops all tables and recreates)
    python -m clientdb.database.init_db --reset

    # Add sample data for testing
    python -m clientdb.database.init_db --sample-data
"""

import argparse
import logging
from typing import Dict, Optional

from sqlalchemy import func, select

from clientdb.config import settings
from clientdb.core.exceptions import UniqueConstraintViolation
from clientdb.database.session import engine, get_db_context
from clientdb.models import Client, Phone, drop_all_tables
from clientdb.repositories import ClientRepository


def create_tables(repo: ClientRepository, reset: bool = False) -> None:
    """
    Create all database tables.

    Args:
        repo: Repository whose unit of work creates the schema
        reset: If True, drop existing tables first
    """
    if reset:
        print("🗑️  Dropping existing tables...")
        with get_db_context(repo.session_factory) as db:
            drop_all_tables(db.connection())
        print("✅ Tables dropped")

    print("📊 Creating database tables...")
    repo.ensure_schema()
    print("✅ Tables created")


def seed_sample_data(repo: ClientRepository) -> Dict[str, Optional[int]]:
    """
    Seed sample clients and exercise every repository operation once.

    Steps:
    1. Two clients, three phones
    2. Change Ivan's email
    3. Remove one of Ivan's phones
    4. Remove Petr together with his phone

    Returns:
        Mapping of email to client id (empty when clients already exist)
    """
    print("\n🌱 Seeding sample data...")

    if repo.find_clients().first() is not None:
        print("⏭️  Sample data already present (skipping)")
        return {}

    ids: Dict[str, Optional[int]] = {}
    for first_name, last_name, email in (
        ("Иван", "Иванов", "ivan@example.com"),
        ("Петр", "Петров", "petr@example.com"),
    ):
        try:
            ids[email] = repo.add_client(first_name, last_name, email)
            print(f"  ✅ Client added with ID: {ids[email]}")
        except UniqueConstraintViolation:
            ids[email] = None
            print(f"  ⏭️  Client '{email}' already exists (skipping)")

    ivan = ids["ivan@example.com"]
    petr = ids["petr@example.com"]
    if ivan is None or petr is None:
        return ids

    for client_id, number in (
        (ivan, "+79111234567"),
        (ivan, "+79117654321"),
        (petr, "+79213456789"),
    ):
        repo.add_phone(client_id, number)
        print(f"  📞 Phone {number} added to client {client_id}")

    repo.update_client(ivan, email="ivan.new@example.com")
    print("  ✏️  Ivan's email changed to ivan.new@example.com")

    for record in repo.find_clients(first_name="Иван").group():
        print(f"  🔎 {record.first_name} {record.last_name} <{record.email}>: {sorted(record.phones)}")
    for row in repo.find_clients(phone_number="+79213456789"):
        print(f"  🔎 {row.phone_number} belongs to {row.first_name} {row.last_name}")

    repo.delete_phone("+79117654321")
    print("  🗑️  Phone +79117654321 deleted")

    repo.delete_client(petr)
    print(f"  🗑️  Client {petr} deleted")

    if not repo.find_clients(first_name="Петр").all():
        print("  🔎 No clients found named Петр")

    print("✅ Sample data seeded")
    return ids


def print_database_status(repo: ClientRepository) -> None:
    """Print current database status and counts."""
    print("\n" + "=" * 60)
    print("📊 Database Status")
    print("=" * 60)

    with get_db_context(repo.session_factory) as db:
        clients_count = db.scalar(select(func.count()).select_from(Client))
        phones_count = db.scalar(select(func.count()).select_from(Phone))

    print(f"  Clients: {clients_count}")
    print(f"  Phones:  {phones_count}")

    records = repo.find_clients().group()
    if records:
        print("\n  Current Clients:")
        for record in records:
            phones = ", ".join(sorted(record.phones)) or "-"
            print(f"    • [{record.client_id}] {record.first_name} {record.last_name} <{record.email}> {phones}")

    print("=" * 60)


def initialize_database(
    reset: bool = False,
    sample_data: bool = False,
    repo: Optional[ClientRepository] = None,
) -> None:
    """
    Initialize the database.

    Args:
        reset: Drop existing tables before creating
        sample_data: Add sample data for testing
        repo: Repository to use (defaults to one on the global engine)
    """
    repo = repo or ClientRepository()

    print("=" * 60)
    print("🗄️  Database Initialization")
    print("=" * 60)

    # Step 1: Create tables
    create_tables(repo, reset=reset)

    # Step 2: Seed sample data (optional)
    if sample_data:
        seed_sample_data(repo)

    # Step 3: Show status
    print_database_status(repo)

    print("\n✅ Database initialization complete!")


def main():
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Initialize and seed the client database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create tables only
  python -m clientdb.database.init_db

  # Reset database (drop all tables and recreate)
  python -m clientdb.database.init_db --reset

  # Add sample data for testing
  python -m clientdb.database.init_db --sample-data

  # Full reset with sample data
  python -m clientdb.database.init_db --reset --sample-data
        """
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop existing tables before creating (WARNING: deletes all data!)"
    )

    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Add sample data for development/testing"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Confirm reset if requested
    if args.reset:
        print(f"⚠️  WARNING: This will DELETE ALL DATA in {engine.url.render_as_string(hide_password=True)}!")
        response = input("Are you sure? Type 'yes' to continue: ")
        if response.lower() != 'yes':
            print("❌ Aborted")
            return

    # Initialize
    initialize_database(reset=args.reset, sample_data=args.sample_data)


if __name__ == "__main__":
    main()
