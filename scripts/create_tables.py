#!/usr/bin/env python3
"""
Check the database connection and create the dealership tables
"""
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from db.database import test_connection, get_engine
from db.models import Base


def main() -> int:
    print("🔍 Testing database connection...")

    if not test_connection():
        print("❌ Database connection failed!")
        print("Check DATABASE_URL / DATABASE_SERVICE_KEY")
        return 1

    print("✅ Database connection successful!")
    print("🔨 Creating tables...")
    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    tables = inspect(engine).get_table_names()
    print(f"📋 Tables: {tables}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
